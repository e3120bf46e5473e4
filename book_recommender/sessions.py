import time
import uuid
from collections import OrderedDict
from typing import Callable, Tuple

from .catalog import Catalog
from .controller import RecommendationController
from .logger import logger

SESSION_COOKIE = "session_id"


class SessionStore:
    """
    Per-browser controllers kept in process memory only.

    A session ends after ``ttl_seconds`` without activity; when more than
    ``max_sessions`` are alive the least recently used one is dropped.
    """

    def __init__(
        self,
        catalog: Catalog,
        ttl_seconds: float = 3600,
        max_sessions: int = 1000,
        clock: Callable[[], float] = time.time,
    ):
        self.catalog = catalog
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        # session_id -> (controller, last_seen); oldest activity first
        self._sessions: "OrderedDict[str, Tuple[RecommendationController, float]]" = OrderedDict()

    def get(self, session_id: str | None) -> RecommendationController | None:
        """Return a live session's controller and mark it as active."""
        if not session_id:
            return None
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        controller, last_seen = entry
        now = self._clock()
        if now - last_seen > self.ttl_seconds:
            self._sessions.pop(session_id, None)
            return None
        self._sessions[session_id] = (controller, now)
        self._sessions.move_to_end(session_id)
        return controller

    def get_or_create(self, session_id: str | None) -> Tuple[str, RecommendationController]:
        controller = self.get(session_id)
        if controller is not None:
            return session_id, controller
        self._cleanup_expired()
        session_id = uuid.uuid4().hex
        controller = RecommendationController(self.catalog)
        self._sessions[session_id] = (controller, self._clock())
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Session store full; evicted least recently used session {evicted[:8]}")
        return session_id, controller

    def end(self, session_id: str | None) -> bool:
        return self._sessions.pop(session_id, None) is not None if session_id else False

    def _cleanup_expired(self) -> None:
        """Remove sessions idle for longer than the TTL."""
        now = self._clock()
        expired = [
            sid for sid, (_, last_seen) in self._sessions.items() if now - last_seen > self.ttl_seconds
        ]
        for sid in expired:
            self._sessions.pop(sid, None)

    def __len__(self) -> int:
        return len(self._sessions)
