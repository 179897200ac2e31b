from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from trivia.api.models import (
    GameTemplate,
    InitGameEvent,
    PlayersAddedEvent,
    PlayerView,
    Question,
    SessionPhase,
    SessionSummary,
)
from trivia.core.connection import Connection
from trivia.errors import InvalidPhaseError
from trivia.fsm import SessionFSM

logger = logging.getLogger(__name__)


class PlayerRole(StrEnum):
    player = "player"
    admin = "admin"


class Membership(StrEnum):
    pending = "pending"
    active = "active"


@dataclass(slots=True)
class PlayerRecord:
    id: int
    name: str
    role: PlayerRole = PlayerRole.player
    membership: Membership = Membership.pending
    connection: Connection | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is PlayerRole.admin

    def view(self) -> PlayerView:
        return PlayerView(id=self.id, name=self.name, admin=self.is_admin)


class Session:
    """One trivia game in progress.

    Every player lives in a single id-keyed record tagged with its membership,
    so "pending or active, never both" holds structurally. Records are kept in
    id order; since promotion moves every pending player at once, active
    records always precede pending ones.

    All mutable state is guarded by `self._lock`. Connection writes happen while
    holding it, so sends are ordered with respect to every other mutation.
    """

    def __init__(self, *, session_id: str, template: GameTemplate) -> None:
        self.id = session_id
        self.name = template.name
        self.questions: tuple[Question, ...] = tuple(q.model_copy(deep=True) for q in template.questions)

        self._lock = asyncio.Lock()
        self._fsm = SessionFSM()
        self._current_question_index = 0
        self._next_player_id = 0
        self._records: dict[int, PlayerRecord] = {}

    @property
    def phase(self) -> SessionPhase:
        return self._fsm.phase

    def mark_running(self) -> None:
        self._fsm.launch()

    def mark_closed(self) -> None:
        if self._fsm.phase is not SessionPhase.closed:
            self._fsm.terminate()

    # -- roster -------------------------------------------------------------

    async def add_player(self, name: str, *, admin: bool = False) -> int:
        """Queue a new player for admission at the next broadcast tick."""

        async with self._lock:
            self._next_player_id += 1
            pid = self._next_player_id
            role = PlayerRole.admin if admin else PlayerRole.player
            self._records[pid] = PlayerRecord(id=pid, name=name, role=role)
        logger.debug("session %s: player %s (%s) pending", self.id, pid, role.value)
        return pid

    async def attach_connection(self, player_id: int, connection: Connection) -> bool:
        """Point a pending or active player at `connection`.

        Unknown ids are a logged no-op; returns whether a player was updated.
        """

        async with self._lock:
            return self._attach_locked(player_id, connection)

    async def connect_player(self, player_id: int, connection: Connection) -> bool:
        """Send INIT_GAME with the current roster, then attach.

        Both happen in one critical section, so no promotion can slip between
        the snapshot the client receives and the moment it starts receiving
        PLAYERS_ADDED events.
        """

        async with self._lock:
            init = InitGameEvent(players=self._views(Membership.active))
            await connection.send_text(init.model_dump_json())
            return self._attach_locked(player_id, connection)

    async def detach_connection(self, player_id: int, connection: Connection) -> bool:
        async with self._lock:
            record = self._records.get(player_id)
            if record is None or record.connection is not connection:
                return False
            record.connection = None
        logger.debug("session %s: player %s disconnected", self.id, player_id)
        return True

    def _attach_locked(self, player_id: int, connection: Connection) -> bool:
        record = self._records.get(player_id)
        if record is None:
            logger.warning("session %s: connection for unknown player id %s ignored", self.id, player_id)
            return False
        record.connection = connection
        logger.debug("session %s: player %s connected (%s)", self.id, player_id, record.membership.value)
        return True

    def _views(self, membership: Membership) -> list[PlayerView]:
        return [r.view() for r in self._records.values() if r.membership is membership]

    # -- promotion ----------------------------------------------------------

    async def promote_pending(self) -> int:
        """Admit pending players and tell already-active connections about them.

        Returns the number of players promoted. With nothing pending this sends
        nothing and changes nothing.
        """

        async with self._lock:
            pending = [r for r in self._records.values() if r.membership is Membership.pending]
            if not pending:
                return 0

            payload = PlayersAddedEvent(players=[r.view() for r in pending]).model_dump_json()
            recipients = [
                r for r in self._records.values() if r.membership is Membership.active and r.connection is not None
            ]
            for record in recipients:
                await self._deliver(record, payload)

            for record in pending:
                record.membership = Membership.active

        logger.info(
            "session %s: promoted %d player(s), notified %d connection(s)",
            self.id,
            len(pending),
            len(recipients),
        )
        return len(pending)

    async def _deliver(self, record: PlayerRecord, payload: str) -> None:
        # One broken client must not stop delivery to the rest.
        connection = record.connection
        if connection is None:
            return
        try:
            await connection.send_text(payload)
        except Exception:
            logger.warning("session %s: send to player %s failed; detaching", self.id, record.id, exc_info=True)
            record.connection = None

    # -- questions ----------------------------------------------------------

    async def advance_question(self) -> int:
        """Move the question cursor forward by one, never past len(questions)."""

        async with self._lock:
            if self.phase is not SessionPhase.running:
                raise InvalidPhaseError(f"Session {self.id} is {self.phase.value}, not running")
            if self._current_question_index < len(self.questions):
                self._current_question_index += 1
            return self._current_question_index

    # -- reads --------------------------------------------------------------

    async def players(self) -> list[PlayerView]:
        async with self._lock:
            return self._views(Membership.active)

    async def pending_players(self) -> list[PlayerView]:
        async with self._lock:
            return self._views(Membership.pending)

    async def current_question_index(self) -> int:
        async with self._lock:
            return self._current_question_index

    async def connection_for(self, player_id: int) -> Connection | None:
        async with self._lock:
            record = self._records.get(player_id)
            return record.connection if record is not None else None

    async def summary(self) -> SessionSummary:
        async with self._lock:
            return SessionSummary(
                id=self.id,
                name=self.name,
                phase=self.phase,
                question_count=len(self.questions),
                current_question_index=self._current_question_index,
                players=self._views(Membership.active),
                pending_count=sum(1 for r in self._records.values() if r.membership is Membership.pending),
            )
