from __future__ import annotations

import pytest

from trivia.api.models import SessionPhase
from trivia.catalog import SIMPLE_GAME
from trivia.core.directory import SessionDirectory
from trivia.errors import SessionCodeExhaustedError, SessionNotFoundError
from trivia.settings import Settings


def _codes(*codes: str):  # type: ignore[no-untyped-def]
    it = iter(codes)
    return lambda _length: next(it)


@pytest.mark.asyncio
async def test_create_then_lookup_returns_fresh_session(settings: Settings) -> None:
    directory = SessionDirectory(settings=settings)
    try:
        session = await directory.create_session(SIMPLE_GAME)

        found = directory.lookup(session.id)
        assert found is session
        assert len(session.id) == settings.session_code_length
        assert found.name == "Simple Game"
        assert found.phase is SessionPhase.running
        assert await found.current_question_index() == 0
        assert await found.players() == []
        assert await found.pending_players() == []
    finally:
        await directory.close_all()


@pytest.mark.asyncio
async def test_code_collisions_are_retried(settings: Settings) -> None:
    directory = SessionDirectory(settings=settings, code_factory=_codes("aaa", "aaa", "bbb"))
    try:
        first = await directory.create_session(SIMPLE_GAME)
        second = await directory.create_session(SIMPLE_GAME)
        assert (first.id, second.id) == ("aaa", "bbb")
        assert len(directory) == 2
    finally:
        await directory.close_all()


@pytest.mark.asyncio
async def test_gives_up_when_no_free_code(settings: Settings) -> None:
    directory = SessionDirectory(settings=settings, code_factory=lambda _n: "aaa", max_code_attempts=3)
    try:
        await directory.create_session(SIMPLE_GAME)
        with pytest.raises(SessionCodeExhaustedError):
            await directory.create_session(SIMPLE_GAME)
        assert len(directory) == 1
    finally:
        await directory.close_all()


@pytest.mark.asyncio
async def test_close_session_stops_loop_and_evicts(settings: Settings) -> None:
    directory = SessionDirectory(settings=settings)
    session = await directory.create_session(SIMPLE_GAME)

    assert await directory.close_session(session.id) is True

    assert session.id not in directory
    assert directory.lookup(session.id) is None
    assert session.phase is SessionPhase.closed
    assert await directory.close_session(session.id) is False


def test_require_unknown_session_raises(settings: Settings) -> None:
    directory = SessionDirectory(settings=settings)
    with pytest.raises(SessionNotFoundError):
        directory.require("nope")
