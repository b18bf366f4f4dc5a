"""In-memory registry of navigation sessions."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from ...config import settings
from ...models.domain import RoutePath
from .clock import Clock, IntervalClock
from .simulator import ProgressSimulator

logger = logging.getLogger(__name__)


def _default_clock() -> Clock:
    return IntervalClock(settings.tick_interval_seconds)


@dataclass(slots=True)
class NavigationSession:
    session_id: str
    route: RoutePath
    simulator: ProgressSimulator
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_used: float = 0.0


class NavigationSessionStore:
    """Owns one route and one simulator per session; sessions share nothing.

    Sessions idle for longer than ``ttl_seconds`` are discarded, and the least
    recently used ones are discarded once ``max_sessions`` is reached. Both
    sweeps run when a session is created.
    """

    def __init__(
        self,
        clock_factory: Optional[Callable[[], Clock]] = None,
        ttl_seconds: Optional[float] = None,
        max_sessions: Optional[int] = None,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock_factory = clock_factory or _default_clock
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds
        self.max_sessions = max_sessions if max_sessions is not None else settings.max_sessions
        if self.ttl_seconds <= 0 or self.max_sessions < 1:
            raise ValueError("Session TTL must be positive and at least one session must be allowed.")
        self._now = now
        self._sessions: Dict[str, NavigationSession] = {}

    def create(self, route: RoutePath) -> NavigationSession:
        simulator = ProgressSimulator(route, clock=self._clock_factory())
        self._evict()
        session = NavigationSession(
            session_id=uuid.uuid4().hex, route=route, simulator=simulator, last_used=self._now()
        )
        self._sessions[session.session_id] = session
        logger.info(f"Created navigation session {session.session_id} ({route.source} route)")
        return session

    def get(self, session_id: str) -> NavigationSession:
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise KeyError(f"Navigation session '{session_id}' not found.") from None
        session.last_used = self._now()
        return session

    def discard(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Navigation session '{session_id}' not found.")
        session.simulator.close()
        logger.info(f"Discarded navigation session {session_id}")

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.discard(session_id)

    def _evict(self) -> None:
        cutoff = self._now() - self.ttl_seconds
        for session_id, session in list(self._sessions.items()):
            if session.last_used < cutoff:
                logger.info(f"Navigation session {session_id} expired")
                self.discard(session_id)

        while len(self._sessions) >= self.max_sessions:
            oldest = min(self._sessions.values(), key=lambda session: session.last_used)
            logger.info(f"Session limit {self.max_sessions} reached; evicting {oldest.session_id}")
            self.discard(oldest.session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
