from __future__ import annotations

from fastapi.requests import HTTPConnection

from trivia.catalog import GameCatalog
from trivia.core.directory import SessionDirectory
from trivia.settings import Settings

# HTTPConnection covers both Request and WebSocket, so these work on either kind of route.


def get_directory(conn: HTTPConnection) -> SessionDirectory:
    return conn.app.state.directory


def get_catalog(conn: HTTPConnection) -> GameCatalog:
    return conn.app.state.catalog


def get_settings(conn: HTTPConnection) -> Settings:
    return conn.app.state.settings
