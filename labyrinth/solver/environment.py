"""The boundary between the solver and the world it moves through."""

from dataclasses import dataclass
from typing import Callable, Protocol

from labyrinth.solver.directions import Direction

MoveCallback = Callable[..., None]


@dataclass(frozen=True)
class Surroundings:
    """Which of the four neighbouring cells are passable."""
    north: bool = False
    east: bool = False
    south: bool = False
    west: bool = False

    def is_open(self, direction: Direction) -> bool:
        """Check whether the neighbour in direction is passable."""
        return getattr(self, direction.value)

    def open_directions(self) -> list[Direction]:
        """Passable directions in selector order."""
        return [direction for direction in Direction if self.is_open(direction)]

    def __repr__(self) -> str:
        marks = "".join(
            direction.name[0] if self.is_open(direction) else "-"
            for direction in Direction
        )
        return f"Surroundings({marks})"


class Environment(Protocol):
    """What the solver needs from the maze it is placed in.

    All queries are relative to the cell the agent currently occupies.
    """

    def sense(self) -> Surroundings:
        """Report which neighbours are passable."""
        ...

    def is_at_exit(self) -> bool:
        """Report whether the current cell is the exit."""
        ...

    def request_move(self, direction: Direction, on_complete: MoveCallback) -> None:
        """Move one cell in direction and call on_complete once it has happened.

        A move that was accepted but can no longer happen is settled with
        on_complete(fault), passing an EnvironmentFault, so the solver is not
        left waiting for it.
        """
        ...
