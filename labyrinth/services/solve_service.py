"""Solve service: runs the maze solver against local mazes."""

import logging
from dataclasses import dataclass, field
from typing import Literal, Optional

from labyrinth.config import Settings, get_settings
from labyrinth.core.maze_engine import Position
from labyrinth.environments import AnimatedEnvironment, EngineEnvironment
from labyrinth.solver.driver import MazeSolver, SolveResult
from labyrinth.solver.errors import EnvironmentFault, SolverError

logger = logging.getLogger(__name__)


@dataclass
class SolveReport:
    """Outcome of solving one maze."""

    status: Literal["at_exit", "failed"]
    steps: int
    backtracks: int
    departures: int
    passages: int
    moves: list[str] = field(default_factory=list)
    start_position: Optional[Position] = None
    final_position: Optional[Position] = None
    message: Optional[str] = None
    trail: str = ""

    @property
    def within_bound(self) -> bool:
        """Check the solver stayed within two moves per passage."""
        return self.steps <= 2 * self.passages

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "status": self.status,
            "steps": self.steps,
            "backtracks": self.backtracks,
            "departures": self.departures,
            "passages": self.passages,
            "moves": self.moves,
            "start_position": self.start_position.to_dict() if self.start_position else None,
            "final_position": self.final_position.to_dict() if self.final_position else None,
            "message": self.message,
            "trail": self.trail,
        }


class SolveService:
    """Builds a fresh solver and environment per maze and reports the outcome."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _report(
        self,
        env: EngineEnvironment,
        result: SolveResult,
        message: Optional[str] = None,
    ) -> SolveReport:
        state = env.engine.get_session(env.session_id)
        report = SolveReport(
            status="at_exit" if result.reached_exit else "failed",
            steps=result.steps,
            backtracks=result.backtracks,
            departures=result.departures,
            passages=env.engine.passage_count(),
            moves=[move.direction.value for move in result.moves],
            start_position=state.start_position if state else None,
            final_position=state.position if state else None,
            message=message,
            trail=env.visualize(),
        )
        env.engine.end_session(env.session_id)
        return report

    def solve(self, maze_text: str) -> SolveReport:
        """
        Solve a maze synchronously.

        Args:
            maze_text: Maze grid text.

        Returns:
            SolveReport; failures are reported, not raised.
        """
        env = EngineEnvironment.from_text(maze_text)
        solver = MazeSolver(initial_span=self.settings.ledger_initial_span)
        try:
            result = solver.solve(env)
        except (SolverError, EnvironmentFault) as e:
            return self._report(env, solver.result(), message=str(e))

        logger.info(f"[{solver.solver_id}] Solved in {result.steps} moves")
        return self._report(env, result, message="Exit reached")

    async def solve_animated(self, maze_text: str, delay: Optional[float] = None) -> SolveReport:
        """
        Solve a maze on the event loop, one confirmed move at a time.

        Args:
            maze_text: Maze grid text.
            delay: Seconds before each move is confirmed. Defaults to
                the configured animation delay.

        Returns:
            SolveReport; failures (including confirmation timeouts) are reported.
        """
        if delay is None:
            delay = self.settings.animation_delay_seconds

        env = AnimatedEnvironment.from_text(maze_text, delay=delay)
        solver = MazeSolver(initial_span=self.settings.ledger_initial_span)
        try:
            result = await solver.solve_async(
                env, move_timeout=self.settings.move_timeout_seconds
            )
        except (SolverError, EnvironmentFault) as e:
            return self._report(env, solver.result(), message=str(e))

        logger.info(f"[{solver.solver_id}] Solved (animated) in {result.steps} moves")
        return self._report(env, result, message="Exit reached")


# Global service instance
_solve_service: Optional[SolveService] = None


def get_solve_service() -> SolveService:
    """Get singleton solve service."""
    global _solve_service
    if _solve_service is None:
        _solve_service = SolveService()
    return _solve_service
