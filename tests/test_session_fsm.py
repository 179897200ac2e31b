from __future__ import annotations

import pytest
from statemachine.exceptions import TransitionNotAllowed

from trivia.api.models import SessionPhase
from trivia.fsm import SessionFSM


def test_session_fsm_happy_path() -> None:
    fsm = SessionFSM()
    assert fsm.phase is SessionPhase.created

    fsm.launch()
    assert fsm.phase is SessionPhase.running

    fsm.terminate()
    assert fsm.phase is SessionPhase.closed


def test_session_fsm_can_close_before_running() -> None:
    fsm = SessionFSM()
    fsm.terminate()
    assert fsm.phase is SessionPhase.closed


def test_session_fsm_closed_is_final() -> None:
    fsm = SessionFSM()
    fsm.launch()
    fsm.terminate()

    with pytest.raises(TransitionNotAllowed):
        fsm.launch()
    with pytest.raises(TransitionNotAllowed):
        fsm.terminate()
