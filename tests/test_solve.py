"""Tests for the solve service and the /v1/solve endpoint."""

import threading

import pytest

from labyrinth.config import Settings
from labyrinth.services.solve_service import SolveService


T_MAZE = """XXXXX
XE..X
XX.XX
XXSXX
XXXXX"""

UNSOLVABLE_MAZE = """XXXXX
XS.XE
XXXXX"""


class TestSolveService:
    """Tests for running solves through the service."""

    def test_solve_reports_route(self):
        """Test a successful synchronous solve report."""
        report = SolveService(Settings(ledger_initial_span=1)).solve(T_MAZE)

        assert report.status == "at_exit"
        assert report.moves == ["north", "north", "east", "west", "west"]
        assert report.backtracks == 1
        assert report.departures == 5
        assert report.passages == 4
        assert report.within_bound
        assert report.final_position.to_dict() == {"x": 1, "y": 1}
        assert report.start_position.to_dict() == {"x": 2, "y": 3}
        assert report.message == "Exit reached"

    def test_unsolvable_is_reported_not_raised(self):
        """Test that failures come back as a failed report."""
        report = SolveService().solve(UNSOLVABLE_MAZE)

        assert report.status == "failed"
        assert report.steps == 2
        assert "No exit reachable from (0, 0)" in report.message
        assert report.to_dict()["final_position"] == {"x": 1, "y": 1}

    @pytest.mark.asyncio
    async def test_animated_timeout_is_reported(self):
        """Test that a confirmation slower than the timeout fails the solve."""
        service = SolveService(Settings(move_timeout_seconds=0.01))
        report = await service.solve_animated(T_MAZE, delay=0.2)

        assert report.status == "failed"
        assert "not confirmed" in report.message
        assert report.steps == 1


@pytest.mark.asyncio
async def test_solve_catalog_mazes(client):
    """Test POST /v1/solve escapes every packaged maze within the bound."""
    for maze_id in ("tutorial", "intermediate", "challenge"):
        response = await client.post("/v1/solve", json={"maze_id": maze_id})
        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "at_exit", maze_id
        assert data["steps"] == len(data["moves"])
        assert data["steps"] <= 2 * data["passages"]
        assert "@" in data["trail"]


@pytest.mark.asyncio
async def test_solve_submitted_grid(client):
    """Test solving a grid sent in the request, synchronously and animated."""
    response = await client.post("/v1/solve", json={"grid_data": T_MAZE})
    assert response.json()["moves"] == ["north", "north", "east", "west", "west"]

    response = await client.post(
        "/v1/solve", json={"grid_data": T_MAZE, "animated": True, "delay_seconds": 0}
    )
    data = response.json()
    assert data["status"] == "at_exit"
    assert data["steps"] == 5


@pytest.mark.asyncio
async def test_solve_unsolvable_grid(client):
    """Test that an unsolvable maze is a failed solve, not an HTTP error."""
    response = await client.post("/v1/solve", json={"grid_data": UNSOLVABLE_MAZE})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "failed"
    assert "No exit reachable" in data["message"]


@pytest.mark.asyncio
async def test_solve_rejects_bad_requests(client):
    """Test validation of solve requests."""
    response = await client.post("/v1/solve", json={"grid_data": "XXXX\nXS.X\nXXXX"})
    assert response.status_code == 400
    assert "no exit cell" in response.json()["detail"]

    response = await client.post("/v1/solve", json={"maze_id": "tutorial", "grid_data": T_MAZE})
    assert response.status_code == 422

    response = await client.post("/v1/solve", json={})
    assert response.status_code == 422

    response = await client.post("/v1/solve", json={"maze_id": "unknown"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_solve_rejects_oversized_grids(client, room_factory):
    """Test the grid size cap and the request body cap."""
    # 301x301 cells fits in the request body but not in the size cap
    response = await client.post("/v1/solve", json={"grid_data": room_factory(299, 299, seed=1)})
    assert response.status_code == 400
    assert "301x301; the largest allowed is 256x256" in response.json()["detail"]

    response = await client.post("/v1/solve", json={"grid_data": "S" + "." * 100000 + "E"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_synchronous_solve_runs_off_the_event_loop(client, monkeypatch):
    """Test that the CPU-bound solve is handed to a worker thread."""
    solve_threads = []
    solve = SolveService.solve

    def recording_solve(self, maze_text):
        solve_threads.append(threading.current_thread())
        return solve(self, maze_text)

    monkeypatch.setattr(SolveService, "solve", recording_solve)

    response = await client.post("/v1/solve", json={"grid_data": T_MAZE})

    assert response.json()["status"] == "at_exit"
    assert solve_threads and solve_threads[0] is not threading.main_thread()
