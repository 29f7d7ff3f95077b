"""Maze routes for listing and retrieving catalog mazes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from labyrinth.core.maze_engine import MazeEngine
from labyrinth.schemas.maze import MazeDetail, MazeListItem, MazeListResponse
from labyrinth.services.maze_catalog import get_maze_catalog

router = APIRouter(prefix="/maze", tags=["Mazes"])


@router.get(
    "",
    response_model=MazeListResponse,
)
async def list_mazes(
    difficulty: Optional[str] = Query(
        None,
        description="Filter by difficulty (tutorial, intermediate, challenge)",
        pattern="^(tutorial|intermediate|challenge)$",
    ),
) -> MazeListResponse:
    """List all available mazes.

    Grid data is not included - use GET /v1/maze/{id} for full details.
    """
    mazes = get_maze_catalog().list_mazes(difficulty)

    maze_items = [
        MazeListItem(
            id=maze.slug,
            name=maze.name,
            difficulty=maze.difficulty,
            width=maze.width,
            height=maze.height,
        )
        for maze in mazes
    ]

    return MazeListResponse(
        mazes=maze_items,
        total=len(maze_items),
    )


@router.get(
    "/{maze_id}",
    response_model=MazeDetail,
)
async def get_maze(maze_id: str) -> MazeDetail:
    """Get detailed information about a specific maze, including grid data."""
    maze = get_maze_catalog().get(maze_id)

    if not maze:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {maze_id}",
        )

    return MazeDetail(
        id=maze.slug,
        name=maze.name,
        difficulty=maze.difficulty,
        grid_data=maze.grid_data,
        width=maze.width,
        height=maze.height,
        start_x=maze.start_x,
        start_y=maze.start_y,
        exit_x=maze.exit_x,
        exit_y=maze.exit_y,
        passages=MazeEngine(maze.grid_data).passage_count(),
    )
