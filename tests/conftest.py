from __future__ import annotations

import json
import time
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from trivia.settings import Settings


class RecordingConnection:
    """In-memory stand-in for a client socket."""

    def __init__(self, *, fail: bool = False) -> None:
        self.sent: list[str] = []
        self.fail = fail

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise ConnectionResetError("peer went away")
        self.sent.append(data)

    def events(self) -> list[dict[str, Any]]:
        return [json.loads(s) for s in self.sent]


@pytest.fixture()
def make_connection() -> Callable[..., RecordingConnection]:
    return RecordingConnection


@pytest.fixture()
def settings() -> Settings:
    return Settings(tick_interval_ms=20)


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """TestClient with a fast broadcast tick; startup builds a fresh directory per test."""

    monkeypatch.setenv("TRIVIA_TICK_INTERVAL_MS", "20")

    from trivia.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def wait_for_summary(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _wait(session_id: str, predicate: Callable[[dict[str, Any]], bool], timeout: float = 3.0) -> dict[str, Any]:
        deadline = time.monotonic() + timeout
        while True:
            data = client.get(f"/sessions/{session_id}").json()
            if predicate(data):
                return data
            if time.monotonic() > deadline:
                raise AssertionError(f"session {session_id} never reached expected state: {data}")
            time.sleep(0.02)

    return _wait
