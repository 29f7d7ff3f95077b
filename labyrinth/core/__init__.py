# Core module
from .maze_engine import MazeEngine, CellType, MazeState, Position
from .maze_parser import (
    MazeParseError,
    MazeValidationError,
    ParsedMaze,
    parse_maze_text,
    load_all_mazes,
)

__all__ = [
    "MazeEngine",
    "CellType",
    "MazeState",
    "Position",
    "MazeParseError",
    "MazeValidationError",
    "ParsedMaze",
    "parse_maze_text",
    "load_all_mazes",
]
