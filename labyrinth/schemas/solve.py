"""Solve schemas for request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from labyrinth.schemas.maze import MazePosition


class SolveRequest(BaseModel):
    """Schema for a solve request: a catalog maze or a raw grid."""

    maze_id: Optional[str] = None
    grid_data: Optional[str] = Field(None, min_length=3, max_length=100000)
    animated: bool = False
    delay_seconds: Optional[float] = Field(None, ge=0, le=1)

    @model_validator(mode="after")
    def check_one_source(self) -> "SolveRequest":
        """Exactly one of maze_id and grid_data must be given."""
        if (self.maze_id is None) == (self.grid_data is None):
            raise ValueError("Provide exactly one of maze_id or grid_data")
        return self


class SolveResponse(BaseModel):
    """Schema for solve response."""

    status: str  # at_exit, failed
    steps: int
    backtracks: int
    departures: int
    passages: int
    moves: list[str]
    start_position: Optional[MazePosition] = None
    final_position: Optional[MazePosition] = None
    message: Optional[str] = None
    trail: str
