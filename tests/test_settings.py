from __future__ import annotations

from pathlib import Path

import pytest

from trivia.settings import Settings, load_settings

_VARS = (
    "TRIVIA_TICK_INTERVAL_MS",
    "TRIVIA_ADMIN_NAME",
    "TRIVIA_DEFAULT_PLAYER_NAME",
    "TRIVIA_SESSION_CODE_LENGTH",
    "TRIVIA_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        # recorded, so teardown also undoes whatever load_dotenv sets
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(tmp_path: Path) -> None:
    s = load_settings(env_file=tmp_path / "missing.env")
    assert s == Settings()
    assert s.tick_interval_s == 0.5


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRIVIA_TICK_INTERVAL_MS", "100")
    monkeypatch.setenv("TRIVIA_SESSION_CODE_LENGTH", "5")
    monkeypatch.setenv("TRIVIA_LOG_LEVEL", "debug")

    s = load_settings(env_file=tmp_path / "missing.env")
    assert s.tick_interval_ms == 100
    assert s.session_code_length == 5
    assert s.log_level == "DEBUG"


def test_env_file_does_not_override_real_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("TRIVIA_ADMIN_NAME=host\nTRIVIA_TICK_INTERVAL_MS=250\n", encoding="utf-8")
    monkeypatch.setenv("TRIVIA_TICK_INTERVAL_MS", "75")

    s = load_settings(env_file=env_file)
    assert s.admin_name == "host"
    assert s.tick_interval_ms == 75


@pytest.mark.parametrize("bad", ["fast", "0", "-10"])
def test_invalid_tick_interval_raises(bad: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRIVIA_TICK_INTERVAL_MS", bad)
    with pytest.raises(ValueError):
        load_settings(env_file=tmp_path / "missing.env")
