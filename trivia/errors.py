from __future__ import annotations


class SessionNotFoundError(LookupError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class GameNotFoundError(LookupError):
    def __init__(self, game_id: int) -> None:
        super().__init__(f"Game not found: {game_id}")
        self.game_id = game_id


class HandshakeError(ValueError):
    """The first message on an admin connection was not a decimal player id."""


class InvalidPhaseError(ValueError):
    pass


class SessionCodeExhaustedError(RuntimeError):
    pass
