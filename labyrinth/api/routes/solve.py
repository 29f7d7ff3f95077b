"""Solve routes: run the maze solver on a catalog maze or a submitted grid."""

from fastapi import APIRouter, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.concurrency import run_in_threadpool

from labyrinth.config import get_settings
from labyrinth.core.maze_parser import MazeParseError, MazeValidationError, parse_maze_text
from labyrinth.schemas.solve import SolveRequest, SolveResponse
from labyrinth.services.maze_catalog import get_maze_catalog
from labyrinth.services.solve_service import get_solve_service

settings = get_settings()
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(tags=["Solver"])


@router.post(
    "/solve",
    response_model=SolveResponse,
)
@limiter.limit(f"{settings.rate_limit_solves}/minute")
async def solve(request: Request, solve_request: SolveRequest) -> SolveResponse:
    """Run the solver from the maze's start until it escapes or gives up.

    An unsolvable maze is not an HTTP error: the response has status "failed"
    and a message naming where the solver stopped.
    """
    if solve_request.maze_id is not None:
        maze = get_maze_catalog().get(solve_request.maze_id)
        if not maze:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Maze not found: {solve_request.maze_id}",
            )
        grid_data = maze.grid_data
    else:
        try:
            grid_data = parse_maze_text(
                solve_request.grid_data, max_size=settings.max_grid_size
            ).grid_data
        except (MazeParseError, MazeValidationError) as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )

    service = get_solve_service()
    if solve_request.animated:
        report = await service.solve_animated(grid_data, delay=solve_request.delay_seconds)
    else:
        report = await run_in_threadpool(service.solve, grid_data)

    return SolveResponse(**report.to_dict())
