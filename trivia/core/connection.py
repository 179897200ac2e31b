from __future__ import annotations

from typing import Protocol


class Connection(Protocol):
    """Outbound half of a client channel.

    Starlette's `WebSocket` satisfies this. The session only references a
    connection for sending; it never opens or closes it.
    """

    async def send_text(self, data: str) -> None: ...
