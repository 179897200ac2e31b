from __future__ import annotations

import asyncio
import contextlib
import logging

from trivia.core.session import Session

logger = logging.getLogger(__name__)


class BroadcastLoop:
    """Periodic tick that promotes a session's pending players.

    Runs until `stop()` cancels it. A failing tick is logged and the next tick
    still fires; the loop itself is the retry mechanism.
    """

    def __init__(self, session: Session, *, interval_s: float) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.session = session
        self.interval_s = interval_s
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError(f"Broadcast loop for session {self.session.id} already started")
        self._task = asyncio.create_task(self._run(), name=f"broadcast:{self.session.id}")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def tick(self) -> int:
        try:
            return await self.session.promote_pending()
        except Exception:
            logger.exception("session %s: broadcast tick failed", self.session.id)
            return 0

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            await self.tick()
