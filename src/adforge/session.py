"""Ad session — analysis and script carried between requests.

The core never persists anything itself; callers hand it a ``SessionStore``.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Optional, Protocol

from adforge.models.analysis import ImageAnalysis, ImageAnalysisItem


@dataclass
class AdSession:
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    niche: str = "real-estate"
    analysis: ImageAnalysis = field(default_factory=dict)
    script: Optional[str] = None
    updated_at: float = field(default_factory=time.time)

    def record_analysis(self, file_name: str, item: ImageAnalysisItem) -> None:
        self.analysis[file_name] = item
        self.updated_at = time.time()

    def set_script(self, script: str) -> None:
        self.script = script
        self.updated_at = time.time()


class SessionStore(Protocol):
    async def load(self, session_id: str) -> Optional[AdSession]: ...

    async def save(self, session: AdSession) -> None: ...

    async def delete(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """In-memory store for ad sessions. Replace with a database-backed implementation."""

    def __init__(self, max_sessions: int = 1000):
        self._store: dict[str, AdSession] = {}
        self.max_sessions = max_sessions

    async def load(self, session_id: str) -> Optional[AdSession]:
        return self._store.get(session_id)

    async def save(self, session: AdSession) -> None:
        self._store[session.session_id] = session
        if len(self._store) > self.max_sessions:
            oldest = min(self._store.values(), key=lambda s: s.updated_at)
            self._store.pop(oldest.session_id, None)

    async def delete(self, session_id: str) -> None:
        self._store.pop(session_id, None)
