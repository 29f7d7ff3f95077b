"""
Move selection for the maze solver.

Two kinds of move are possible from any cell:

- Forward: into a passable neighbour that has never been departed from.
  Since every cell the agent has entered and then left carries at least one
  departure flag, this only ever steps onto new ground, which breaks every
  loop at the first edge that would close it.
- Backtrack: into the neighbour that departed toward us while we have not
  yet departed toward it. With loops broken the explored cells form a tree
  and that neighbour is our parent in it, so there is at most one.

Directions are always examined in Direction order (north, east, south,
west). The order only decides which branch is explored first.

Nothing in this module mutates state.
"""

from typing import Mapping, Optional

from labyrinth.solver.directions import Departures, Direction
from labyrinth.solver.environment import Surroundings


NeighbourRecords = Mapping[Direction, Departures]


def find_forward_move(
    surroundings: Surroundings,
    neighbour_records: NeighbourRecords,
) -> Optional[Direction]:
    """
    Find a passable neighbour that has never been departed from.

    Args:
        surroundings: Sensed passability of the four neighbours.
        neighbour_records: Departure record of each open neighbour.

    Returns:
        The first qualifying direction, or None.
    """
    for direction in surroundings.open_directions():
        if not neighbour_records.get(direction, Departures.NONE):
            return direction
    return None


def backtrack_candidates(
    surroundings: Surroundings,
    neighbour_records: NeighbourRecords,
    current_record: Departures,
) -> list[Direction]:
    """All open directions whose neighbour left toward us while we have not left toward it."""
    candidates = []
    for direction in surroundings.open_directions():
        record = neighbour_records.get(direction, Departures.NONE)
        came_to_us = bool(record & direction.opposite.departure)
        went_there = bool(current_record & direction.departure)
        if came_to_us and not went_there:
            candidates.append(direction)
    return candidates


def find_backtrack_move(
    surroundings: Surroundings,
    neighbour_records: NeighbourRecords,
    current_record: Departures,
) -> Optional[Direction]:
    """
    Find the direction to retreat in when no forward move exists.

    Args:
        surroundings: Sensed passability of the four neighbours.
        neighbour_records: Departure record of each open neighbour.
        current_record: Departure record of the current cell.

    Returns:
        The first qualifying direction, or None if the solve cannot continue.
    """
    candidates = backtrack_candidates(surroundings, neighbour_records, current_record)
    return candidates[0] if candidates else None
