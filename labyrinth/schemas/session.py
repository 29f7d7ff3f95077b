"""Session schemas for request/response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from labyrinth.schemas.maze import MazePosition


class SessionCreateRequest(BaseModel):
    """Schema for creating a new session."""

    maze_id: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Schema for session state."""

    id: str
    maze_id: str
    current_position: MazePosition
    turn_count: int
    status: str  # active, completed
    created_at: datetime
    completed_at: Optional[datetime] = None


class MoveRequest(BaseModel):
    """Schema for move request."""

    direction: str = Field(..., pattern="^(north|south|east|west)$")


class MoveResponse(BaseModel):
    """Schema for move response."""

    status: str  # moved, blocked, completed
    position: MazePosition
    turns: int
    message: Optional[str] = None


class LookResponse(BaseModel):
    """Schema for look response."""

    north: str
    south: str
    east: str
    west: str
    current: str
