"""Catalog of the built-in mazes."""

import logging
from pathlib import Path
from typing import Optional

from labyrinth.config import get_settings
from labyrinth.core.maze_parser import ParsedMaze, load_all_mazes

logger = logging.getLogger(__name__)

DIFFICULTY_ORDER = {"tutorial": 1, "intermediate": 2, "challenge": 3}


class MazeCatalog:
    """Mazes loaded from a directory of .txt files, keyed by slug."""

    def __init__(self, mazes_dir: Path | str):
        self.mazes_dir = Path(mazes_dir)
        self._mazes: dict[str, ParsedMaze] = {
            maze.slug: maze for maze in load_all_mazes(self.mazes_dir)
        }
        logger.info(f"Loaded {len(self._mazes)} mazes from {self.mazes_dir}")

    def __len__(self) -> int:
        return len(self._mazes)

    def list_mazes(self, difficulty: Optional[str] = None) -> list[ParsedMaze]:
        """List mazes, tutorial first, then by name."""
        mazes = [
            maze for maze in self._mazes.values()
            if difficulty is None or maze.difficulty == difficulty
        ]
        return sorted(mazes, key=lambda m: (DIFFICULTY_ORDER.get(m.difficulty, 4), m.name))

    def get(self, maze_id: str) -> Optional[ParsedMaze]:
        """Get a maze by slug."""
        return self._mazes.get(maze_id)


# Global catalog instance
_maze_catalog: Optional[MazeCatalog] = None


def get_maze_catalog() -> MazeCatalog:
    """Get singleton maze catalog."""
    global _maze_catalog
    if _maze_catalog is None:
        _maze_catalog = MazeCatalog(get_settings().mazes_dir)
    return _maze_catalog
