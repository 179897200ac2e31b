from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from trivia.errors import HandshakeError

_PLAYER_ID_RE = re.compile(r"[0-9]+")


def parse_player_id(raw: str) -> int:
    """Parse the admin's first socket message: a decimal player id.

    Anything else is rejected rather than read as 0, which could bind the
    connection to an unrelated player.
    """

    text = raw.strip()
    if not _PLAYER_ID_RE.fullmatch(text):
        raise HandshakeError(f"Expected a decimal player id, got {raw[:32]!r}")
    return int(text)


def frame_text(message: Mapping[str, Any]) -> str:
    """Payload of an ASGI `websocket.receive` message as text.

    Binary frames are accepted when they hold UTF-8, like text frames.
    """

    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is None:
        raise HandshakeError("Empty websocket frame")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HandshakeError("Binary frame is not valid UTF-8") from e
