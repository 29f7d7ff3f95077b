# Solver module
from .directions import ORIGIN, Coord, Departures, Direction, step
from .driver import MazeSolver, MoveKind, PlannedMove, SolveResult, SolveState, solve_maze
from .environment import Environment, Surroundings
from .errors import (
    EnvironmentFault,
    LedgerExhaustedError,
    MoveConfirmationTimeout,
    MoveNotConfirmedError,
    SolverError,
    UnsolvableMazeError,
)
from .ledger import TraversalLedger
from .selector import backtrack_candidates, find_backtrack_move, find_forward_move

__all__ = [
    "ORIGIN",
    "Coord",
    "Departures",
    "Direction",
    "step",
    "MazeSolver",
    "MoveKind",
    "PlannedMove",
    "SolveResult",
    "SolveState",
    "solve_maze",
    "Environment",
    "Surroundings",
    "EnvironmentFault",
    "LedgerExhaustedError",
    "MoveConfirmationTimeout",
    "MoveNotConfirmedError",
    "SolverError",
    "UnsolvableMazeError",
    "TraversalLedger",
    "backtrack_candidates",
    "find_backtrack_move",
    "find_forward_move",
]
