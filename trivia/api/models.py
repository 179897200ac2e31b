from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Answer(BaseModel):
    id: int
    text: str


class Question(BaseModel):
    id: int
    text: str
    correct_answer_id: int
    answers: list[Answer] = Field(default_factory=list)


class GameTemplate(BaseModel):
    """Static, read-only description of a game a session can be started from."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    questions: list[Question] = Field(default_factory=list)


class SessionPhase(StrEnum):
    created = "created"
    running = "running"
    closed = "closed"


class PlayerView(BaseModel):
    # Wire shape of a player; the connection is never serialized.
    id: int
    name: str
    admin: bool


class InitGameEvent(BaseModel):
    type: Literal["INIT_GAME"] = "INIT_GAME"
    players: list[PlayerView]


class PlayersAddedEvent(BaseModel):
    type: Literal["PLAYERS_ADDED"] = "PLAYERS_ADDED"
    players: list[PlayerView]


class GameSummary(BaseModel):
    id: int
    name: str
    question_count: int


class GameListResponse(BaseModel):
    games: list[GameSummary]


class StartGameResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    active_game_id: str = Field(..., alias="activeGameId")


class AdminPageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    active_game_id: str = Field(..., alias="activeGameId")
    player_id: int = Field(..., alias="playerId")


class QuestionIndexResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_question_index: int = Field(..., alias="currentQuestionIndex")


class SessionSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    phase: SessionPhase
    question_count: int = Field(..., alias="questionCount")
    current_question_index: int = Field(..., alias="currentQuestionIndex")
    players: list[PlayerView]
    pending_count: int = Field(..., alias="pendingCount")
