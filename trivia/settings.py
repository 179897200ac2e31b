from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def project_root() -> Path:
    # trivia/settings.py -> trivia/ -> project root
    return Path(__file__).resolve().parents[1]


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    tick_interval_ms: int = 500
    admin_name: str = "admin"
    default_player_name: str = "[NO NAME]"
    session_code_length: int = 3
    log_level: str = "INFO"

    @property
    def tick_interval_s(self) -> float:
        return self.tick_interval_ms / 1000


def load_settings(*, env_file: Path | None = None) -> Settings:
    """Build settings from the environment.

    A `.env` file at the project root (or `env_file`) is loaded first, without
    overriding variables that are already set.
    """

    env_path = env_file if env_file is not None else project_root() / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)

    defaults = Settings()
    return Settings(
        tick_interval_ms=_env_int("TRIVIA_TICK_INTERVAL_MS", defaults.tick_interval_ms),
        admin_name=os.environ.get("TRIVIA_ADMIN_NAME") or defaults.admin_name,
        default_player_name=os.environ.get("TRIVIA_DEFAULT_PLAYER_NAME") or defaults.default_player_name,
        session_code_length=_env_int("TRIVIA_SESSION_CODE_LENGTH", defaults.session_code_length),
        log_level=(os.environ.get("TRIVIA_LOG_LEVEL") or defaults.log_level).upper(),
    )
