from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from trivia.api.models import GameTemplate
from trivia.core.broadcast import BroadcastLoop
from trivia.core.session import Session
from trivia.errors import SessionCodeExhaustedError, SessionNotFoundError
from trivia.session_codes import generate_session_code
from trivia.settings import Settings

logger = logging.getLogger(__name__)

CodeFactory = Callable[[int], str]


class SessionDirectory:
    """Process-wide registry of live sessions keyed by session code.

    Built once at startup and handed to request handlers. Lookups are plain
    dict reads; creation and removal are serialized by `self._lock`.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        code_factory: CodeFactory = generate_session_code,
        max_code_attempts: int = 32,
    ) -> None:
        self._settings = settings
        self._code_factory = code_factory
        self._max_code_attempts = max_code_attempts
        self._sessions: dict[str, Session] = {}
        self._loops: dict[str, BroadcastLoop] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def _new_code_locked(self) -> str:
        for _ in range(self._max_code_attempts):
            code = self._code_factory(self._settings.session_code_length)
            if code not in self._sessions:
                return code
        raise SessionCodeExhaustedError(
            f"No free session code after {self._max_code_attempts} attempts"
        )

    async def create_session(self, template: GameTemplate) -> Session:
        """Copy the template into a new session, register it, then start its loop."""

        async with self._lock:
            code = self._new_code_locked()
            session = Session(session_id=code, template=template)
            self._sessions[code] = session

            loop = BroadcastLoop(session, interval_s=self._settings.tick_interval_s)
            self._loops[code] = loop
            loop.start()
            session.mark_running()

        logger.info("session %s created from game %s (%s)", code, template.id, template.name)
        return session

    def lookup(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def require(self, session_id: str) -> Session:
        session = self.lookup(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def close_session(self, session_id: str) -> bool:
        """Stop the session's loop and evict it. Returns False if unknown."""

        async with self._lock:
            session = self._sessions.pop(session_id, None)
            loop = self._loops.pop(session_id, None)
        if session is None:
            return False

        if loop is not None:
            await loop.stop()
        session.mark_closed()
        logger.info("session %s closed", session_id)
        return True

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close_session(session_id)
