"""Pytest configuration and fixtures."""

import random
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from labyrinth.api.routes import solve as solve_routes
from labyrinth.config import get_settings
from labyrinth.main import app
from labyrinth.services.maze_catalog import MazeCatalog


def generate_maze(rows: int, cols: int, seed: int, loops: int = 0) -> str:
    """
    Generate a random maze by depth-first carving, then knock out extra walls.

    Args:
        rows: Number of cell rows.
        cols: Number of cell columns.
        seed: Random seed.
        loops: Number of internal walls to remove, each one adding a cycle.

    Returns:
        Maze text with S and E on two distinct random cells.
    """
    rng = random.Random(seed)
    height, width = 2 * rows + 1, 2 * cols + 1
    grid = [["X"] * width for _ in range(height)]

    stack = [(0, 0)]
    seen = {(0, 0)}
    grid[1][1] = "."
    while stack:
        r, c = stack[-1]
        neighbours = [
            (r + dr, c + dc)
            for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1))
            if 0 <= r + dr < rows and 0 <= c + dc < cols and (r + dr, c + dc) not in seen
        ]
        if not neighbours:
            stack.pop()
            continue
        nr, nc = rng.choice(neighbours)
        grid[r + nr + 1][c + nc + 1] = "."
        grid[2 * nr + 1][2 * nc + 1] = "."
        seen.add((nr, nc))
        stack.append((nr, nc))

    walls = [
        (y, x)
        for y in range(1, height - 1)
        for x in range(1, width - 1)
        if grid[y][x] == "X" and y % 2 != x % 2
    ]
    for y, x in rng.sample(walls, min(loops, len(walls))):
        grid[y][x] = "."

    cells = [(2 * r + 1, 2 * c + 1) for r in range(rows) for c in range(cols)]
    sy, sx = rng.choice(cells)
    ey, ex = rng.choice([cell for cell in cells if cell != (sy, sx)])
    grid[sy][sx] = "S"
    grid[ey][ex] = "E"
    return "\n".join("".join(row) for row in grid)


def generate_room(rows: int, cols: int, seed: int) -> str:
    """Generate a fully open rectangular room with S and E on random cells."""
    rng = random.Random(seed)
    grid = [["X"] * (cols + 2)] + [
        ["X"] + ["."] * cols + ["X"] for _ in range(rows)
    ] + [["X"] * (cols + 2)]
    cells = [(y, x) for y in range(1, rows + 1) for x in range(1, cols + 1)]
    (sy, sx), (ey, ex) = rng.sample(cells, 2)
    grid[sy][sx] = "S"
    grid[ey][ex] = "E"
    return "\n".join("".join(row) for row in grid)


@pytest.fixture
def maze_factory() -> Callable[..., str]:
    """Random maze generator."""
    return generate_maze


@pytest.fixture
def room_factory() -> Callable[..., str]:
    """Random open room generator."""
    return generate_room


@pytest.fixture
def tutorial_maze() -> str:
    """Grid of the packaged tutorial maze."""
    return MazeCatalog(get_settings().mazes_dir).get("tutorial").grid_data


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Start every test with fresh rate-limit counters."""
    solve_routes.limiter.reset()
    yield


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
