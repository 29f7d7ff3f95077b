"""In-memory play sessions on catalog mazes."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from labyrinth.config import get_settings
from labyrinth.core.maze_engine import LookResult, MazeEngine, MazeState, MoveResult
from labyrinth.core.maze_parser import ParsedMaze
from labyrinth.solver.directions import Direction

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PlaySession:
    """A session bound to one maze engine."""

    id: str
    maze_id: str
    engine: MazeEngine
    created_at: datetime = field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None
    last_active_at: datetime = field(default_factory=_utcnow)

    @property
    def state(self) -> MazeState:
        """Engine-side state of this session."""
        state = self.engine.get_session(self.id)
        if state is None:
            raise RuntimeError(f"Engine lost session {self.id}")
        return state

    @property
    def status(self) -> str:
        """active or completed."""
        return "completed" if self.state.completed else "active"


class SessionService:
    """
    Creates sessions and forwards look/move to their engines.

    Sessions live in process memory. One idle (no look or move) for longer
    than ttl_seconds is dropped, completed or not; clients can also end a
    session explicitly.
    """

    def __init__(self, ttl_seconds: Optional[float] = None):
        if ttl_seconds is None:
            ttl_seconds = get_settings().session_ttl_seconds
        self.ttl = timedelta(seconds=ttl_seconds)
        self._sessions: dict[str, PlaySession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self, maze: ParsedMaze) -> PlaySession:
        """Start a session at the maze's start position."""
        self.prune_expired()
        engine = MazeEngine(maze.grid_data)
        session_id = str(uuid.uuid4())
        engine.create_session(session_id)
        session = PlaySession(id=session_id, maze_id=maze.slug, engine=engine)
        self._sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[PlaySession]:
        """Get a live session by ID. Expired sessions are dropped on sight."""
        session = self._sessions.get(session_id)
        if session and self._expired(session, _utcnow()):
            self.end_session(session_id)
            return None
        return session

    def end_session(self, session_id: str) -> bool:
        """Forget a session."""
        return self._sessions.pop(session_id, None) is not None

    def _expired(self, session: PlaySession, now: datetime) -> bool:
        return now - session.last_active_at > self.ttl

    def prune_expired(self, now: Optional[datetime] = None) -> int:
        """Drop idle sessions. Returns how many were dropped."""
        now = now or _utcnow()
        expired = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"Dropped {len(expired)} idle sessions")
        return len(expired)

    def look(self, session: PlaySession) -> LookResult:
        """Look around. Free."""
        session.last_active_at = _utcnow()
        return session.engine.look(session.id)

    def move(self, session: PlaySession, direction: Direction) -> MoveResult:
        """
        Move one cell.

        Raises:
            ValueError: If the session is already completed.
        """
        result = session.engine.move(session.id, direction)
        session.last_active_at = _utcnow()
        if result.status == "completed":
            session.completed_at = session.last_active_at
        return result

    @property
    def active_count(self) -> int:
        """Number of sessions not yet completed."""
        return sum(1 for session in self._sessions.values() if session.status == "active")


# Global service instance
_session_service: Optional[SessionService] = None


def get_session_service() -> SessionService:
    """Get singleton session service."""
    global _session_service
    if _session_service is None:
        _session_service = SessionService()
    return _session_service
