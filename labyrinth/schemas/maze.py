"""Maze schemas for request/response validation."""

from pydantic import BaseModel, Field


class MazeBase(BaseModel):
    """Base maze schema with common fields."""

    name: str
    difficulty: str = Field(..., pattern="^(tutorial|intermediate|challenge)$")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class MazeListItem(MazeBase):
    """Schema for maze list item (without grid data)."""

    id: str


class MazeDetail(MazeBase):
    """Schema for detailed maze response with grid data."""

    id: str
    grid_data: str
    start_x: int
    start_y: int
    exit_x: int
    exit_y: int
    passages: int


class MazeListResponse(BaseModel):
    """Schema for maze list response."""

    mazes: list[MazeListItem]
    total: int


class MazePosition(BaseModel):
    """Schema for a position in the maze."""

    x: int
    y: int
