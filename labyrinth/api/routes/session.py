"""Session routes for playing catalog mazes over HTTP."""

import logging

from fastapi import APIRouter, HTTPException, status

from labyrinth.schemas.maze import MazePosition
from labyrinth.schemas.session import (
    LookResponse,
    MoveRequest,
    MoveResponse,
    SessionCreateRequest,
    SessionResponse,
)
from labyrinth.services.maze_catalog import get_maze_catalog
from labyrinth.services.session_service import PlaySession, get_session_service
from labyrinth.solver.directions import Direction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["Sessions"])


def _get_session_or_404(session_id: str) -> PlaySession:
    session = get_session_service().get_session(session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    return session


def _to_response(session: PlaySession) -> SessionResponse:
    state = session.state
    return SessionResponse(
        id=session.id,
        maze_id=session.maze_id,
        current_position=MazePosition(x=state.position.x, y=state.position.y),
        turn_count=state.turn_count,
        status=session.status,
        created_at=session.created_at,
        completed_at=session.completed_at,
    )


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(request: SessionCreateRequest) -> SessionResponse:
    """Create a new maze session.

    The player starts at the maze's start position (S).
    """
    maze = get_maze_catalog().get(request.maze_id)
    if not maze:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {request.maze_id}",
        )

    session = get_session_service().create_session(maze)
    logger.info(f"Session {session.id} created on maze {maze.slug}")
    return _to_response(session)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
)
async def get_session(session_id: str) -> SessionResponse:
    """Get session state by ID."""
    return _to_response(_get_session_or_404(session_id))


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def end_session(session_id: str) -> None:
    """End a session and release it, whether or not it reached the exit."""
    session = _get_session_or_404(session_id)
    get_session_service().end_session(session.id)
    logger.info(f"Session {session.id} ended after {session.state.turn_count} turns")


@router.post(
    "/{session_id}/move",
    response_model=MoveResponse,
)
async def move(session_id: str, request: MoveRequest) -> MoveResponse:
    """Move in a direction. COSTS 1 TURN."""
    session = _get_session_or_404(session_id)

    if session.status != "active":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Session is not active (status: {session.status})",
        )

    move_result = get_session_service().move(session, Direction(request.direction))
    if move_result.status == "completed":
        logger.info(f"Session {session.id} escaped in {move_result.turns} turns")

    return MoveResponse(
        status=move_result.status,
        position=MazePosition(x=move_result.position.x, y=move_result.position.y),
        turns=move_result.turns,
        message=move_result.message,
    )


@router.post(
    "/{session_id}/look",
    response_model=LookResponse,
)
async def look(session_id: str) -> LookResponse:
    """Look at surrounding cells. FREE - does not cost a turn."""
    session = _get_session_or_404(session_id)
    look_result = get_session_service().look(session)

    return LookResponse(
        north=look_result.north,
        south=look_result.south,
        east=look_result.east,
        west=look_result.west,
        current=look_result.current,
    )
