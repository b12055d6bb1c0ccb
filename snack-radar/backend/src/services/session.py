from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models import AmenityRecord, Coordinate
from services.filter_model import FilterModel


@dataclass
class SearchSession:
    filters: FilterModel = field(default_factory=FilterModel)
    results: List[AmenityRecord] = field(default_factory=list)
    center: Optional[Coordinate] = None
    searched_at: Optional[float] = None


class SessionManager:
    """Simple in-memory session manager."""

    def __init__(self, ttl_sec: int = 3600) -> None:
        self._sessions: Dict[str, SearchSession] = {}
        self._last_access: Dict[str, float] = {}
        self.ttl_sec = ttl_sec

    def get(self, session_id: str) -> Optional[SearchSession]:
        self._cleanup()
        if not session_id or session_id not in self._sessions:
            return None
        self._last_access[session_id] = time.time()
        return self._sessions[session_id]

    def get_or_create(self, session_id: str) -> SearchSession:
        session = self.get(session_id)
        if session is None:
            session = SearchSession()
            if session_id:
                self._sessions[session_id] = session
                self._last_access[session_id] = time.time()
        return session

    def store_results(
        self, session_id: str, results: List[AmenityRecord], center: Optional[Coordinate]
    ) -> None:
        """Replace the session's result set; whichever search finishes last wins."""
        if not session_id:
            return
        session = self.get_or_create(session_id)
        session.results = list(results)
        session.center = center
        session.searched_at = time.time()

    def reset(self, session_id: str) -> None:
        """Forget a session's filters and results."""
        if not session_id:
            return
        self._sessions.pop(session_id, None)
        self._last_access.pop(session_id, None)

    def _cleanup(self) -> None:
        """Remove expired sessions."""
        now = time.time()
        expired = [
            sid for sid, last in self._last_access.items()
            if now - last > self.ttl_sec
        ]
        for sid in expired:
            del self._sessions[sid]
            del self._last_access[sid]
