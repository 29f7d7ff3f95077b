"""Exceptions raised by the maze solver and its environments."""

from typing import Optional

from labyrinth.solver.directions import Coord, Departures, Direction


class SolverError(Exception):
    """Base exception for solver failures."""

    pass


class UnsolvableMazeError(SolverError):
    """No forward or backtrack move exists and the exit was not reached.

    Either the reachable part of the maze has no exit, or a solver invariant
    was broken. The records of the open neighbours are kept for diagnosis.
    """

    def __init__(
        self,
        position: Coord,
        neighbour_records: Optional[dict[Direction, Departures]] = None,
    ):
        self.position = position
        self.neighbour_records = dict(neighbour_records or {})
        records = ", ".join(
            f"{direction.value}={int(record):#x}"
            for direction, record in self.neighbour_records.items()
        )
        super().__init__(
            f"No exit reachable from {position} "
            f"(open neighbour records: {records or 'none'})"
        )


class LedgerExhaustedError(SolverError):
    """The traversal ledger could not grow its storage."""

    pass


class EnvironmentFault(Exception):
    """Base exception for failures of the environment the solver drives."""

    pass


class MoveConfirmationTimeout(EnvironmentFault):
    """A requested move was not confirmed in time."""

    pass


class MoveNotConfirmedError(EnvironmentFault):
    """A synchronous environment returned without confirming the move."""

    pass
