"""
Maze solver driver.

A MazeSolver owns everything one solve needs: the agent's position relative
to its start, the traversal ledger and the list of moves made. Each step
senses the current cell, picks a move, records the departure against the cell
being left, advances the position and only then asks the environment to carry
the move out. The next step starts once the environment has confirmed it.

Example usage:
    solver = MazeSolver()
    result = solver.solve(environment)              # synchronous
    result = await solver.solve_async(environment)  # waits on confirmations
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from labyrinth.solver.directions import ORIGIN, Coord, Departures, Direction, step
from labyrinth.solver.environment import Environment, Surroundings
from labyrinth.solver.errors import (
    MoveConfirmationTimeout,
    MoveNotConfirmedError,
    SolverError,
    UnsolvableMazeError,
)
from labyrinth.solver.ledger import DEFAULT_INITIAL_SPAN, TraversalLedger
from labyrinth.solver.selector import find_backtrack_move, find_forward_move

logger = logging.getLogger(__name__)


class SolveState(Enum):
    """Lifecycle of a solve."""
    RUNNING = "running"
    AT_EXIT = "at_exit"
    FAILED = "failed"


class MoveKind(Enum):
    """Why a move was chosen."""
    FORWARD = "forward"
    BACKTRACK = "backtrack"


@dataclass(frozen=True)
class PlannedMove:
    """A move chosen by the solver."""
    direction: Direction
    kind: MoveKind
    origin: Coord
    target: Coord

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "direction": self.direction.value,
            "kind": self.kind.value,
            "from": list(self.origin),
            "to": list(self.target),
        }


@dataclass
class SolveResult:
    """Outcome of a finished solve."""
    state: SolveState
    position: Coord
    moves: list[PlannedMove] = field(default_factory=list)
    departures: int = 0
    failure: Optional[str] = None

    @property
    def steps(self) -> int:
        """Number of moves issued."""
        return len(self.moves)

    @property
    def backtracks(self) -> int:
        """Number of backtrack moves issued."""
        return sum(1 for move in self.moves if move.kind is MoveKind.BACKTRACK)

    @property
    def reached_exit(self) -> bool:
        """Check if the solve ended at the exit."""
        return self.state is SolveState.AT_EXIT

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result = {
            "state": self.state.value,
            "position": list(self.position),
            "steps": self.steps,
            "backtracks": self.backtracks,
            "departures": self.departures,
            "moves": [move.to_dict() for move in self.moves],
        }
        if self.failure:
            result["failure"] = self.failure
        return result


def _confirm(future: asyncio.Future, fault: Optional[Exception] = None) -> None:
    if future.done():
        return
    if fault is not None:
        future.set_exception(fault)
    else:
        future.set_result(None)


class MazeSolver:
    """
    Online maze solver that only remembers how it left each cell.

    A solver is single use: create one per solve and drop it once it has
    reached AT_EXIT or FAILED.
    """

    def __init__(
        self,
        initial_span: int = DEFAULT_INITIAL_SPAN,
        solver_id: Optional[str] = None,
    ):
        """
        Initialize a solver standing on its start cell.

        Args:
            initial_span: Initial half-extent of the ledger buffer.
            solver_id: Optional identifier used in log lines.
        """
        self.solver_id = solver_id or f"solve_{uuid.uuid4().hex[:8]}"
        self.position: Coord = ORIGIN
        self.ledger = TraversalLedger(initial_span)
        self.state = SolveState.RUNNING
        self.moves: list[PlannedMove] = []
        self.failure: Optional[str] = None

    def neighbour_records(self, surroundings: Surroundings) -> dict[Direction, Departures]:
        """Read the ledger record of every open neighbour."""
        return {
            direction: self.ledger.record_at(step(self.position, direction))
            for direction in surroundings.open_directions()
        }

    def choose_move(self, surroundings: Surroundings) -> PlannedMove:
        """
        Pick the next move from the current cell without changing any state.

        Args:
            surroundings: Sensed passability at the current cell.

        Returns:
            The chosen move.

        Raises:
            UnsolvableMazeError: If neither a forward nor a backtrack move exists.
        """
        records = self.neighbour_records(surroundings)

        direction = find_forward_move(surroundings, records)
        kind = MoveKind.FORWARD
        if direction is None:
            current = self.ledger.record_at(self.position)
            direction = find_backtrack_move(surroundings, records, current)
            kind = MoveKind.BACKTRACK
            if direction is None:
                raise UnsolvableMazeError(self.position, records)

        return PlannedMove(
            direction=direction,
            kind=kind,
            origin=self.position,
            target=step(self.position, direction),
        )

    def result(self) -> SolveResult:
        """Snapshot the solve so far."""
        return SolveResult(
            state=self.state,
            position=self.position,
            moves=list(self.moves),
            departures=self.ledger.departure_count,
            failure=self.failure,
        )

    def _fail(self, message: str) -> None:
        self.state = SolveState.FAILED
        self.failure = message
        logger.error(f"[{self.solver_id}] Solve failed at {self.position}: {message}")

    def _begin_step(self, environment: Environment) -> Optional[PlannedMove]:
        """Sense, choose and record a move. Returns None once at the exit."""
        if self.state is not SolveState.RUNNING:
            raise SolverError(f"Solver already finished (state: {self.state.value})")

        try:
            if environment.is_at_exit():
                self.state = SolveState.AT_EXIT
                logger.info(
                    f"[{self.solver_id}] Reached exit at {self.position} "
                    f"after {len(self.moves)} moves"
                )
                return None

            move = self.choose_move(environment.sense())
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")
            raise

        if move.kind is MoveKind.BACKTRACK:
            logger.debug(f"[{self.solver_id}] Backtracking {move.direction.value} from {move.origin}")

        # The departure belongs to the cell being left.
        self.ledger.mark_departure(self.position, move.direction)
        self.position = move.target
        self.moves.append(move)
        return move

    def step(self, environment: Environment) -> SolveState:
        """
        Run one step against an environment that confirms moves synchronously.

        Returns:
            The solver state after the step.

        Raises:
            UnsolvableMazeError: If the maze cannot be solved from here.
            MoveNotConfirmedError: If the environment did not confirm the move.
        """
        move = self._begin_step(environment)
        if move is None:
            return self.state

        confirmed: list[Optional[Exception]] = []
        try:
            environment.request_move(
                move.direction, lambda fault=None: confirmed.append(fault)
            )
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")
            raise

        if not confirmed:
            message = f"Move {move.direction.value} from {move.origin} was not confirmed"
            self._fail(message)
            raise MoveNotConfirmedError(message)
        if confirmed[0] is not None:
            fault = confirmed[0]
            self._fail(f"{type(fault).__name__}: {fault}")
            raise fault

        return self.state

    async def step_async(
        self,
        environment: Environment,
        move_timeout: Optional[float] = None,
    ) -> SolveState:
        """
        Run one step, suspending until the environment confirms the move.

        Args:
            environment: Environment whose request_move may confirm later,
                from the event loop or from another thread.
            move_timeout: Seconds to wait for confirmation (None waits forever).

        Returns:
            The solver state after the step.

        Raises:
            UnsolvableMazeError: If the maze cannot be solved from here.
            MoveConfirmationTimeout: If confirmation does not arrive in time.
        """
        move = self._begin_step(environment)
        if move is None:
            return self.state

        loop = asyncio.get_running_loop()
        confirmation = loop.create_future()

        try:
            environment.request_move(
                move.direction,
                lambda fault=None: loop.call_soon_threadsafe(_confirm, confirmation, fault),
            )
            await asyncio.wait_for(confirmation, timeout=move_timeout)
        except asyncio.TimeoutError as e:
            message = (
                f"Move {move.direction.value} from {move.origin} "
                f"not confirmed within {move_timeout}s"
            )
            self._fail(message)
            raise MoveConfirmationTimeout(message) from e
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")
            raise

        return self.state

    def solve(self, environment: Environment) -> SolveResult:
        """Step until the exit is reached or the solve fails."""
        logger.info(f"[{self.solver_id}] Starting solve")
        while self.state is SolveState.RUNNING:
            self.step(environment)
        return self.result()

    async def solve_async(
        self,
        environment: Environment,
        move_timeout: Optional[float] = None,
    ) -> SolveResult:
        """Step until done, one confirmed move at a time."""
        logger.info(f"[{self.solver_id}] Starting async solve (move timeout: {move_timeout}s)")
        while self.state is SolveState.RUNNING:
            await self.step_async(environment, move_timeout=move_timeout)
        return self.result()


def solve_maze(environment: Environment, initial_span: int = DEFAULT_INITIAL_SPAN) -> SolveResult:
    """Solve with a fresh solver."""
    return MazeSolver(initial_span=initial_span).solve(environment)
