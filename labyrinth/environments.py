"""
Environments the maze solver can be placed in.

- EngineEnvironment: drives a local MazeEngine session, confirming each move
  before request_move returns.
- AnimatedEnvironment: drives a local MazeEngine session from the asyncio
  event loop, confirming each move after a delay (as an animated front end
  would once the move has been drawn).
- RemoteEnvironment: drives a session of the Labyrinth Trail HTTP API.

Usage:
    env = EngineEnvironment.from_text(maze_text)
    result = MazeSolver().solve(env)
"""

import asyncio
import logging
from typing import Optional

import requests

from labyrinth.config import get_settings
from labyrinth.core.maze_engine import LookResult, MazeEngine
from labyrinth.solver.directions import Direction
from labyrinth.solver.environment import MoveCallback, Surroundings
from labyrinth.solver.errors import EnvironmentFault

logger = logging.getLogger(__name__)

WALL = "X"
EXIT = "E"


class MoveRejectedError(EnvironmentFault):
    """The environment refused a move (for example, into a wall)."""

    pass


class RemoteEnvironmentError(EnvironmentFault):
    """The remote maze API failed or returned an error."""

    pass


def surroundings_from_cells(north: str, east: str, south: str, west: str) -> Surroundings:
    """Classify neighbour cell characters as passable or blocked."""
    return Surroundings(
        north=north != WALL,
        east=east != WALL,
        south=south != WALL,
        west=west != WALL,
    )


def _surroundings_from_look(look: LookResult) -> Surroundings:
    return surroundings_from_cells(look.north, look.east, look.south, look.west)


class EngineEnvironment:
    """Synchronous environment over a MazeEngine session."""

    def __init__(self, engine: MazeEngine, session_id: str):
        self.engine = engine
        self.session_id = session_id

    @classmethod
    def from_text(cls, maze_text: str) -> "EngineEnvironment":
        """Create an engine and a fresh session for maze_text."""
        engine = MazeEngine(maze_text)
        session = engine.create_session()
        return cls(engine, session.session_id)

    def sense(self) -> Surroundings:
        return _surroundings_from_look(self.engine.look(self.session_id))

    def is_at_exit(self) -> bool:
        return self.engine.is_at_exit(self.session_id)

    def request_move(self, direction: Direction, on_complete: MoveCallback) -> None:
        result = self.engine.move(self.session_id, direction)
        if result.status == "blocked":
            raise MoveRejectedError(result.message)
        on_complete()

    def visualize(self, show_trail: bool = True) -> str:
        """Render the maze with the player and, optionally, its trail."""
        return self.engine.visualize(self.session_id, show_trail=show_trail)


class AnimatedEnvironment(EngineEnvironment):
    """
    Asynchronous environment over a MazeEngine session.

    Each move takes effect, and is confirmed, `delay` seconds after it was
    requested. Only one move may be in flight at a time. Must be used from
    a running event loop.
    """

    def __init__(self, engine: MazeEngine, session_id: str, delay: float = 0.0):
        super().__init__(engine, session_id)
        self.delay = delay
        self.moves_requested = 0
        self._pending: Optional[Direction] = None

    @classmethod
    def from_text(cls, maze_text: str, delay: float = 0.0) -> "AnimatedEnvironment":
        engine = MazeEngine(maze_text)
        session = engine.create_session()
        return cls(engine, session.session_id, delay=delay)

    @property
    def move_pending(self) -> bool:
        """Check if a requested move has not been confirmed yet."""
        return self._pending is not None

    def sense(self) -> Surroundings:
        if self._pending is not None:
            raise EnvironmentFault("Cannot sense while a move is in flight")
        return super().sense()

    def request_move(self, direction: Direction, on_complete: MoveCallback) -> None:
        if self._pending is not None:
            raise EnvironmentFault(
                f"Move {direction.value} requested while {self._pending.value} is in flight"
            )
        if not self.sense().is_open(direction):
            raise MoveRejectedError(f"Cannot move {direction.value} - wall blocking")

        self._pending = direction
        self.moves_requested += 1
        loop = asyncio.get_running_loop()
        loop.call_later(self.delay, self._complete, direction, on_complete)

    def _complete(self, direction: Direction, on_complete: MoveCallback) -> None:
        self._pending = None
        if self.engine.get_session(self.session_id) is None:
            fault = EnvironmentFault(
                f"Session {self.session_id} ended before move {direction.value} landed"
            )
            logger.warning(str(fault))
            on_complete(fault)
            return
        self.engine.move(self.session_id, direction)
        on_complete()


class RemoteEnvironment:
    """
    Environment backed by the Labyrinth Trail HTTP API.

    Example:
        env = RemoteEnvironment("http://localhost:8000/v1")
        env.start_session("tutorial")
        result = MazeSolver().solve(env)
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 10.0):
        """
        Initialize the remote environment.

        Args:
            base_url: API base URL including the version prefix. Defaults to
                the configured api_url.
            timeout: Per-request timeout in seconds.
        """
        if base_url is None:
            base_url = get_settings().api_url
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session_id: Optional[str] = None
        self._headers = {"Content-Type": "application/json"}

    def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        """Make an API request."""
        url = f"{self.base_url}{endpoint}"
        try:
            response = requests.request(
                method, url, headers=self._headers, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise RemoteEnvironmentError(f"Not found: {endpoint}") from e
            raise RemoteEnvironmentError(f"API error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise RemoteEnvironmentError(f"Request failed: {e}") from e

    def start_session(self, maze_id: str) -> str:
        """
        Start a new session on a catalog maze.

        Returns:
            Session ID string.
        """
        data = self._request("POST", "/session", json={"maze_id": maze_id})
        self.session_id = data["id"]
        logger.info(f"Started remote session {self.session_id} on maze {maze_id}")
        return self.session_id

    def _ensure_session(self) -> str:
        if not self.session_id:
            raise RemoteEnvironmentError("No active session. Call start_session() first.")
        return self.session_id

    def _look(self) -> dict:
        session_id = self._ensure_session()
        return self._request("POST", f"/session/{session_id}/look")

    def sense(self) -> Surroundings:
        data = self._look()
        return surroundings_from_cells(data["north"], data["east"], data["south"], data["west"])

    def is_at_exit(self) -> bool:
        return self._look().get("current") == EXIT

    def request_move(self, direction: Direction, on_complete: MoveCallback) -> None:
        session_id = self._ensure_session()
        data = self._request(
            "POST",
            f"/session/{session_id}/move",
            json={"direction": direction.value},
        )
        if data["status"] == "blocked":
            raise MoveRejectedError(data.get("message") or f"Cannot move {direction.value}")
        on_complete()
