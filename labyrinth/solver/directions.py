"""
Cardinal directions, cell coordinates and departure records.

Coordinates are (row, col) pairs relative to the cell the agent started on,
which is always (0, 0). Rows grow downwards (south) and columns grow to the
right (east), so either component can go negative as the agent explores.
"""

from enum import Enum, IntFlag


Coord = tuple[int, int]

ORIGIN: Coord = (0, 0)


class Departures(IntFlag):
    """Record of the directions a cell has ever been departed in.

    Fits in the low four bits of a byte. An empty record means the cell
    has never been left.
    """
    NONE = 0
    NORTH = 0x1
    EAST = 0x2
    SOUTH = 0x4
    WEST = 0x8


class Direction(Enum):
    """Movement directions, in the order the selector examines them."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (drow, dcol) for this direction."""
        deltas = {
            Direction.NORTH: (-1, 0),
            Direction.EAST: (0, 1),
            Direction.SOUTH: (1, 0),
            Direction.WEST: (0, -1),
        }
        return deltas[self]

    @property
    def opposite(self) -> "Direction":
        """Get the direction pointing back the way we came."""
        opposites = {
            Direction.NORTH: Direction.SOUTH,
            Direction.EAST: Direction.WEST,
            Direction.SOUTH: Direction.NORTH,
            Direction.WEST: Direction.EAST,
        }
        return opposites[self]

    @property
    def departure(self) -> Departures:
        """Get the record flag set when a cell is left in this direction."""
        return Departures[self.name]


def step(coord: Coord, direction: Direction) -> Coord:
    """Return the coordinate one cell away from coord in direction."""
    drow, dcol = direction.delta
    return (coord[0] + drow, coord[1] + dcol)
