from __future__ import annotations

from statemachine import State, StateMachine

from trivia.api.models import SessionPhase


class SessionFSM(StateMachine):
    """Lifecycle guard for a live session.

    - created: registered in the directory, broadcast loop not started yet.
    - running: broadcast loop active, question index may advance.
    - closed: loop cancelled, session evicted. Final.
    """

    created = State(SessionPhase.created.value, value=SessionPhase.created.value, initial=True)
    running = State(SessionPhase.running.value, value=SessionPhase.running.value)
    closed = State(SessionPhase.closed.value, value=SessionPhase.closed.value, final=True)

    launch = created.to(running)
    terminate = running.to(closed) | created.to(closed)

    @property
    def phase(self) -> SessionPhase:
        return SessionPhase(str(self.current_state.value))
