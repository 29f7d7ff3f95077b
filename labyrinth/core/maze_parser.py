"""
Reading maze grids from text.

The alphabet is the engine's own (CELL_CHARS): 'X' is a wall, 'S' the start,
'E' the exit and '.' or a space open floor. A grid holds exactly one start
and one exit and is at most max_size cells along either side.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from labyrinth.core.maze_engine import CELL_CHARS, CellType

logger = logging.getLogger(__name__)

DIFFICULTIES = ("tutorial", "intermediate", "challenge")
MAX_GRID_SIZE = 256


class MazeParseError(Exception):
    """The text or file could not be read as a grid."""

    pass


class MazeValidationError(Exception):
    """The grid was read but is not a playable maze."""

    pass


@dataclass(frozen=True)
class ParsedMaze:
    """A validated grid and where its start and exit are."""

    name: str
    difficulty: str
    grid_data: str
    width: int
    height: int
    start_x: int
    start_y: int
    exit_x: int
    exit_y: int

    @property
    def slug(self) -> str:
        """URL-friendly identifier derived from the name."""
        return "-".join(self.name.lower().split())


def _locate(rows: list[str], cell: CellType) -> tuple[int, int]:
    found = [
        (x, y)
        for y, row in enumerate(rows)
        for x, char in enumerate(row)
        if CELL_CHARS[char] is cell
    ]
    if not found:
        raise MazeValidationError(f"Maze has no {cell.name.lower()} cell ({cell.value})")
    if len(found) > 1:
        positions = ", ".join(str(pos) for pos in found)
        raise MazeValidationError(
            f"Maze has {len(found)} {cell.name.lower()} cells: {positions}"
        )
    return found[0]


def parse_maze_text(
    maze_text: str,
    name: str = "Submitted",
    difficulty: str = "tutorial",
    max_size: int = MAX_GRID_SIZE,
) -> ParsedMaze:
    """
    Parse and validate a maze grid.

    Args:
        maze_text: Grid text, one row per line.
        name: Display name of the maze.
        difficulty: One of DIFFICULTIES.
        max_size: Largest allowed width and height.

    Returns:
        ParsedMaze with the normalized grid.

    Raises:
        MazeParseError: If the text is empty.
        MazeValidationError: If the grid is too large, uses an unknown
            character, or does not hold exactly one start and one exit.
    """
    if difficulty not in DIFFICULTIES:
        raise MazeValidationError(
            f"Invalid difficulty '{difficulty}'. Must be one of: {', '.join(DIFFICULTIES)}"
        )

    rows = maze_text.strip().splitlines()
    if not rows:
        raise MazeParseError("Maze text is empty")

    width = max(len(row) for row in rows)
    height = len(rows)
    if width > max_size or height > max_size:
        raise MazeValidationError(
            f"Maze is {width}x{height}; the largest allowed is {max_size}x{max_size}"
        )

    for y, row in enumerate(rows):
        for x, char in enumerate(row):
            if char not in CELL_CHARS:
                raise MazeValidationError(f"Unknown cell {char!r} at ({x}, {y})")

    start_x, start_y = _locate(rows, CellType.START)
    exit_x, exit_y = _locate(rows, CellType.EXIT)

    return ParsedMaze(
        name=name,
        difficulty=difficulty,
        grid_data="\n".join(rows),
        width=width,
        height=height,
        start_x=start_x,
        start_y=start_y,
        exit_x=exit_x,
        exit_y=exit_y,
    )


def load_maze_file(file_path: Path) -> ParsedMaze:
    """
    Load a maze file, naming it after the file.

    "challenge_loops.txt" becomes "Challenge Loops" with difficulty
    "challenge"; files naming no difficulty are tutorials.
    """
    try:
        maze_text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise MazeParseError(f"Failed to read maze file: {e}") from e

    words = file_path.stem.replace("-", "_").lower().split("_")
    difficulty = next((d for d in DIFFICULTIES if d in words), "tutorial")
    return parse_maze_text(maze_text, name=" ".join(words).title(), difficulty=difficulty)


def load_all_mazes(mazes_dir: Path | str) -> list[ParsedMaze]:
    """
    Load every *.txt maze in a directory, skipping (and logging) broken ones.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
    """
    mazes_dir = Path(mazes_dir)
    if not mazes_dir.is_dir():
        raise FileNotFoundError(f"Mazes directory not found: {mazes_dir}")

    mazes = []
    for maze_file in sorted(mazes_dir.glob("*.txt")):
        try:
            mazes.append(load_maze_file(maze_file))
        except (MazeParseError, MazeValidationError) as e:
            logger.warning(f"Failed to load {maze_file}: {e}")
    return mazes
