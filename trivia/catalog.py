from __future__ import annotations

from collections.abc import Iterable

from trivia.api.models import Answer, GameTemplate, Question
from trivia.errors import GameNotFoundError


class GameCatalog:
    """Read-only lookup of game templates by id.

    Templates are immutable; sessions copy what they need at creation time.
    """

    def __init__(self, templates: Iterable[GameTemplate]) -> None:
        self._by_id: dict[int, GameTemplate] = {}
        for t in templates:
            if t.id in self._by_id:
                raise ValueError(f"Duplicate game id: {t.id}")
            self._by_id[t.id] = t

    def get(self, game_id: int) -> GameTemplate | None:
        return self._by_id.get(game_id)

    def require(self, game_id: int) -> GameTemplate:
        template = self.get(game_id)
        if template is None:
            raise GameNotFoundError(game_id)
        return template

    def list_games(self) -> list[GameTemplate]:
        return sorted(self._by_id.values(), key=lambda t: t.id)


SIMPLE_GAME = GameTemplate(
    id=1,
    name="Simple Game",
    questions=[
        Question(
            id=1,
            text="What is the first letter of the Alphabet?",
            correct_answer_id=3,
            answers=[
                Answer(id=1, text="C"),
                Answer(id=2, text="Z"),
                Answer(id=3, text="A"),
                Answer(id=4, text="X"),
            ],
        )
    ],
)


def default_catalog() -> GameCatalog:
    return GameCatalog([SIMPLE_GAME])
