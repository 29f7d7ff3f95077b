"""
Labyrinth Trail Maze Engine

Grid simulation the solver is run against:
- Maze parsing from text format
- Look and move actions
- Turn counting
- Exit detection
- Passage counting (bounds the solver's work)

Maze Format:
    S = Start position
    E = Exit (goal)
    X = Wall (impassable)
    . = Open path (can also be space or empty)
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Literal
import uuid

from labyrinth.solver.directions import Direction


class CellType(Enum):
    """Types of cells in the maze."""
    OPEN = "."
    WALL = "X"
    START = "S"
    EXIT = "E"

    @classmethod
    def from_char(cls, char: str) -> "CellType":
        """Convert character to CellType. Unknown characters are walls."""
        return CELL_CHARS.get(char, cls.WALL)

    @property
    def passable(self) -> bool:
        """Check if the cell can be stepped on."""
        return self is not CellType.WALL


# Every character a maze file may contain
CELL_CHARS: dict[str, CellType] = {
    ".": CellType.OPEN,
    " ": CellType.OPEN,
    "X": CellType.WALL,
    "S": CellType.START,
    "E": CellType.EXIT,
}


@dataclass
class Position:
    """2D grid position in the maze (x = column, y = row)."""
    x: int
    y: int

    def move(self, direction: Direction) -> "Position":
        """Return new position after moving in direction."""
        dy, dx = direction.delta
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y}


@dataclass
class MazeState:
    """Current state of a maze session."""
    session_id: str
    position: Position
    turn_count: int = 0
    completed: bool = False
    start_position: Position = field(default_factory=lambda: Position(0, 0))
    trail: list[Position] = field(default_factory=list)


@dataclass
class MoveResult:
    """Result of a move action."""
    status: Literal["moved", "blocked", "completed"]
    position: Position
    turns: int
    message: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result = {
            "status": self.status,
            "position": self.position.to_dict(),
            "turns": self.turns,
        }
        if self.message:
            result["message"] = self.message
        return result


@dataclass
class LookResult:
    """Result of a look action."""
    north: str
    south: str
    east: str
    west: str
    current: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "north": self.north,
            "south": self.south,
            "east": self.east,
            "west": self.west,
            "current": self.current,
        }


class MazeEngine:
    """
    Maze engine hosting play sessions on one maze.

    Example usage:
        engine = MazeEngine(maze_text)
        session = engine.create_session()

        # Look is FREE (no turn cost)
        surroundings = engine.look(session.session_id)

        # Move costs 1 turn
        result = engine.move(session.session_id, Direction.NORTH)
    """

    def __init__(self, maze_text: str):
        """
        Initialize maze engine with maze text.

        Args:
            maze_text: Multi-line string representing the maze grid.
        """
        self.grid: list[list[CellType]] = []
        self.width: int = 0
        self.height: int = 0
        self.start_pos: Optional[Position] = None
        self.exit_pos: Optional[Position] = None

        # Active sessions
        self._sessions: dict[str, MazeState] = {}

        self._parse_maze(maze_text)

    def _parse_maze(self, maze_text: str) -> None:
        """Parse maze text into grid."""
        lines = maze_text.strip().split("\n")
        self.grid = []

        for y, line in enumerate(lines):
            row = []
            for x, char in enumerate(line):
                cell = CellType.from_char(char)
                row.append(cell)

                if cell == CellType.START:
                    self.start_pos = Position(x, y)
                elif cell == CellType.EXIT:
                    self.exit_pos = Position(x, y)

            self.grid.append(row)

        self.height = len(self.grid)
        self.width = max(len(row) for row in self.grid) if self.grid else 0

        if self.start_pos is None:
            raise ValueError("Maze must have a start position (S)")
        if self.exit_pos is None:
            raise ValueError("Maze must have an exit position (E)")

    def get_cell(self, x: int, y: int) -> CellType:
        """Get cell type at position."""
        if not (0 <= y < self.height and 0 <= x < len(self.grid[y])):
            return CellType.WALL  # Out of bounds = wall
        return self.grid[y][x]

    def get_cell_char(self, x: int, y: int) -> str:
        """Get cell character for look results."""
        cell = self.get_cell(x, y)
        # The start cell reads as open path once the player can leave it
        if cell == CellType.START:
            return "."
        return cell.value

    def passage_count(self) -> int:
        """Count undirected passages between adjacent passable cells."""
        passages = 0
        for y, row in enumerate(self.grid):
            for x, cell in enumerate(row):
                if not cell.passable:
                    continue
                if self.get_cell(x + 1, y).passable:
                    passages += 1
                if self.get_cell(x, y + 1).passable:
                    passages += 1
        return passages

    def create_session(self, session_id: Optional[str] = None) -> MazeState:
        """
        Create a new maze session.

        Args:
            session_id: Optional custom session ID. If not provided, generates UUID.

        Returns:
            MazeState for the new session.
        """
        if session_id is None:
            session_id = f"sess_{uuid.uuid4().hex[:12]}"

        if self.start_pos is None:
            raise RuntimeError("Maze not properly initialized")

        state = MazeState(
            session_id=session_id,
            position=Position(self.start_pos.x, self.start_pos.y),
            start_position=Position(self.start_pos.x, self.start_pos.y),
        )
        self._sessions[session_id] = state
        return state

    def get_session(self, session_id: str) -> Optional[MazeState]:
        """Get session state by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """End and remove a session."""
        if session_id in self._sessions:
            del self._sessions[session_id]
            return True
        return False

    def _require_session(self, session_id: str) -> MazeState:
        state = self._sessions.get(session_id)
        if state is None:
            raise ValueError(f"Session not found: {session_id}")
        return state

    def is_at_exit(self, session_id: str) -> bool:
        """Check whether the session's player stands on the exit."""
        state = self._require_session(session_id)
        return state.position == self.exit_pos

    def look(self, session_id: str) -> LookResult:
        """
        Look at surrounding cells. FREE - does not increment turn counter.

        Args:
            session_id: Active session ID.

        Returns:
            LookResult with adjacent cell types.

        Raises:
            ValueError: If session not found.
        """
        pos = self._require_session(session_id).position
        return LookResult(
            north=self.get_cell_char(pos.x, pos.y - 1),
            south=self.get_cell_char(pos.x, pos.y + 1),
            east=self.get_cell_char(pos.x + 1, pos.y),
            west=self.get_cell_char(pos.x - 1, pos.y),
            current=self.get_cell_char(pos.x, pos.y),
        )

    def move(self, session_id: str, direction: Direction) -> MoveResult:
        """
        Move in a direction. COSTS 1 TURN.

        Args:
            session_id: Active session ID.
            direction: Direction to move.

        Returns:
            MoveResult with new state.

        Raises:
            ValueError: If session not found or already completed.
        """
        state = self._require_session(session_id)
        if state.completed:
            raise ValueError("Session already completed")

        state.turn_count += 1

        new_pos = state.position.move(direction)
        target_cell = self.get_cell(new_pos.x, new_pos.y)

        # Wall collision - can't move
        if target_cell == CellType.WALL:
            return MoveResult(
                status="blocked",
                position=state.position,
                turns=state.turn_count,
                message=f"Cannot move {direction.value} - wall blocking",
            )

        state.trail.append(state.position)
        state.position = new_pos

        if target_cell == CellType.EXIT:
            state.completed = True
            return MoveResult(
                status="completed",
                position=state.position,
                turns=state.turn_count,
                message="Congratulations! You escaped the maze!",
            )

        return MoveResult(
            status="moved",
            position=state.position,
            turns=state.turn_count,
        )

    def visualize(self, session_id: Optional[str] = None, show_trail: bool = False) -> str:
        """
        Generate ASCII visualization of maze.

        Args:
            session_id: If provided, shows player position.
            show_trail: Also mark every cell the player has left with '+'.

        Returns:
            ASCII string representation.
        """
        player_pos = None
        trail: set[tuple[int, int]] = set()
        if session_id:
            state = self._sessions.get(session_id)
            if state:
                player_pos = state.position
                if show_trail:
                    trail = {(pos.x, pos.y) for pos in state.trail}

        lines = []
        for y, row in enumerate(self.grid):
            line = ""
            for x, cell in enumerate(row):
                if player_pos and x == player_pos.x and y == player_pos.y:
                    line += "@"  # Player marker
                elif (x, y) in trail and cell == CellType.OPEN:
                    line += "+"
                else:
                    line += cell.value
            lines.append(line)

        return "\n".join(lines)

