"""
Traversal ledger for the maze solver.

Stores, for every cell the agent has left, which of the four directions it
was left in. Records live one byte per cell in a dense buffer centred on the
start cell (0, 0). The buffer covers rows in [-row_span, row_span] and
columns in [-col_span, col_span]; when a coordinate outside that window is
touched the span of the offending axis is doubled and every existing record
is copied to the same logical coordinate in the new buffer.

Example usage:
    ledger = TraversalLedger()
    ledger.mark_departure((0, 0), Direction.EAST)
    ledger.record_at((0, 0))   # Departures.EAST
    ledger.record_at((0, 1))   # Departures.NONE
"""

import logging
from typing import Iterator

from labyrinth.solver.directions import Coord, Departures, Direction
from labyrinth.solver.errors import LedgerExhaustedError

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_SPAN = 2


class TraversalLedger:
    """Growable coordinate -> Departures store."""

    def __init__(self, initial_span: int = DEFAULT_INITIAL_SPAN):
        """
        Create an empty ledger.

        Args:
            initial_span: Initial half-extent of the buffer on both axes.
                Must be at least 1.
        """
        if initial_span < 1:
            raise ValueError(f"initial_span must be >= 1, got {initial_span}")

        self._row_span = initial_span
        self._col_span = initial_span
        self._width = 2 * initial_span + 1
        self._cells = bytearray((2 * initial_span + 1) * self._width)
        self._departure_count = 0

    @property
    def row_span(self) -> int:
        """Rows currently covered on each side of the origin."""
        return self._row_span

    @property
    def col_span(self) -> int:
        """Columns currently covered on each side of the origin."""
        return self._col_span

    @property
    def capacity(self) -> int:
        """Number of cell slots in the backing buffer."""
        return len(self._cells)

    @property
    def departure_count(self) -> int:
        """Number of distinct (cell, direction) departures recorded."""
        return self._departure_count

    def _covers(self, coord: Coord) -> bool:
        row, col = coord
        return abs(row) <= self._row_span and abs(col) <= self._col_span

    def _index(self, coord: Coord) -> int:
        row, col = coord
        return (row + self._row_span) * self._width + (col + self._col_span)

    def ensure_capacity(self, coord: Coord) -> bool:
        """
        Grow the buffer so that coord has a slot.

        Args:
            coord: Cell coordinate about to be read or written.

        Returns:
            True if the buffer was grown, False if coord was already covered.

        Raises:
            LedgerExhaustedError: If the larger buffer cannot be allocated.
        """
        if self._covers(coord):
            return False

        row, col = coord
        row_span, col_span = self._row_span, self._col_span
        while abs(row) > row_span:
            row_span *= 2
        while abs(col) > col_span:
            col_span *= 2

        width = 2 * col_span + 1
        try:
            cells = bytearray((2 * row_span + 1) * width)
        except MemoryError as e:
            raise LedgerExhaustedError(
                f"Cannot grow ledger to {2 * row_span + 1}x{width} cells"
            ) from e

        # Old row r lands (row_span - old_row_span) rows further down and every
        # column shifts right by (col_span - old_col_span).
        row_shift = row_span - self._row_span
        col_shift = col_span - self._col_span
        for old_row in range(2 * self._row_span + 1):
            source = old_row * self._width
            target = (old_row + row_shift) * width + col_shift
            cells[target:target + self._width] = self._cells[source:source + self._width]

        logger.debug(
            f"Ledger grown from {2 * self._row_span + 1}x{self._width} "
            f"to {2 * row_span + 1}x{width} to cover {coord}"
        )

        self._row_span = row_span
        self._col_span = col_span
        self._width = width
        self._cells = cells
        return True

    def record_at(self, coord: Coord) -> Departures:
        """Get the departure record for coord (empty if never written)."""
        self.ensure_capacity(coord)
        return Departures(self._cells[self._index(coord)])

    def mark_departure(self, coord: Coord, direction: Direction) -> bool:
        """
        Record that the agent left coord heading in direction.

        Args:
            coord: Cell being left.
            direction: Direction of departure.

        Returns:
            True if the flag was newly set, False if it was already set.
        """
        self.ensure_capacity(coord)
        index = self._index(coord)
        flag = direction.departure
        if self._cells[index] & flag:
            logger.warning(f"Departure {direction.value} from {coord} already recorded")
            return False

        self._cells[index] |= flag
        self._departure_count += 1
        return True

    def recorded_cells(self) -> Iterator[tuple[Coord, Departures]]:
        """Iterate (coord, record) for every cell with a non-empty record."""
        for index, value in enumerate(self._cells):
            if value:
                row, col = divmod(index, self._width)
                yield (row - self._row_span, col - self._col_span), Departures(value)
