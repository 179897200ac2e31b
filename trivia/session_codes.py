from __future__ import annotations

import random
import string

_ALPHABET = string.ascii_lowercase


def generate_session_code(length: int = 3, *, rng: random.Random | None = None) -> str:
    """Short, human-typeable session code, e.g. "qzb".

    Uniqueness is not guaranteed here; the session directory retries on collision.
    """

    if length < 1:
        raise ValueError("length must be >= 1")
    r = rng or random.SystemRandom()
    return "".join(r.choice(_ALPHABET) for _ in range(length))
