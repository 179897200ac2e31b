from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status

from trivia.api.deps import get_catalog, get_directory, get_settings
from trivia.api.models import (
    AdminPageResponse,
    GameListResponse,
    GameSummary,
    QuestionIndexResponse,
    SessionSummary,
    StartGameResponse,
)
from trivia.catalog import GameCatalog
from trivia.core.directory import SessionDirectory
from trivia.core.handshake import frame_text, parse_player_id
from trivia.core.session import Session
from trivia.errors import (
    GameNotFoundError,
    HandshakeError,
    InvalidPhaseError,
    SessionCodeExhaustedError,
    SessionNotFoundError,
)
from trivia.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_session(directory: SessionDirectory, session_id: str) -> Session:
    try:
        return directory.require(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found") from e


async def _receive_frame(websocket: WebSocket) -> str:
    # Text or UTF-8 binary; anything else raises HandshakeError.
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE), message.get("reason"))
    return frame_text(message)


async def _connect(session: Session, player_id: int, websocket: WebSocket) -> bool:
    """Send INIT_GAME and attach; False if the socket broke on the way."""

    try:
        await session.connect_player(player_id, websocket)
    except WebSocketDisconnect:
        logger.warning("session %s: player %s left before INIT_GAME", session.id, player_id)
        return False
    except Exception:
        logger.warning("session %s: INIT_GAME to player %s failed", session.id, player_id, exc_info=True)
        try:
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        except Exception:
            logger.debug("session %s: close after failed INIT_GAME also failed", session.id, exc_info=True)
        return False
    return True


async def _hold_open(websocket: WebSocket, *, session_id: str, player_id: int) -> None:
    # Clients don't send anything after the handshake yet; keep reading until they leave.
    while True:
        try:
            text = await _receive_frame(websocket)
        except HandshakeError as e:
            logger.debug("session %s: player %s sent an unreadable frame: %s", session_id, player_id, e)
            continue
        logger.debug("session %s: player %s sent %r", session_id, player_id, text[:64])


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/admin/", response_model=GameListResponse)
async def list_games_route(catalog: GameCatalog = Depends(get_catalog)) -> GameListResponse:
    return GameListResponse(
        games=[GameSummary(id=t.id, name=t.name, question_count=len(t.questions)) for t in catalog.list_games()]
    )


@router.post("/admin/start/{game_id}", response_model=StartGameResponse, status_code=status.HTTP_201_CREATED)
async def start_game_route(
    game_id: str,
    catalog: GameCatalog = Depends(get_catalog),
    directory: SessionDirectory = Depends(get_directory),
) -> StartGameResponse:
    try:
        gid = int(game_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="gameId must be an integer.") from e

    try:
        template = catalog.require(gid)
    except GameNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found") from e

    try:
        session = await directory.create_session(template)
    except SessionCodeExhaustedError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e

    return StartGameResponse(active_game_id=session.id)


@router.get("/admin/{session_id}", response_model=AdminPageResponse)
async def admin_page_route(
    session_id: str,
    directory: SessionDirectory = Depends(get_directory),
    settings: Settings = Depends(get_settings),
) -> AdminPageResponse:
    """Host page data. Each call registers a fresh admin player for the host's socket."""

    session = _require_session(directory, session_id)
    player_id = await session.add_player(settings.admin_name, admin=True)
    return AdminPageResponse(name=session.name, active_game_id=session.id, player_id=player_id)


@router.post("/admin/{session_id}/next", response_model=QuestionIndexResponse)
async def next_question_route(
    session_id: str,
    directory: SessionDirectory = Depends(get_directory),
) -> QuestionIndexResponse:
    session = _require_session(directory, session_id)
    try:
        index = await session.advance_question()
    except InvalidPhaseError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return QuestionIndexResponse(current_question_index=index)


@router.delete("/admin/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session_route(
    session_id: str,
    directory: SessionDirectory = Depends(get_directory),
) -> Response:
    if not await directory.close_session(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/sessions/{session_id}", response_model=SessionSummary)
async def session_summary_route(
    session_id: str,
    directory: SessionDirectory = Depends(get_directory),
) -> SessionSummary:
    return await _require_session(directory, session_id).summary()


@router.websocket("/join/{session_id}")
async def player_join_ws(
    websocket: WebSocket,
    session_id: str,
    name: str | None = None,
    directory: SessionDirectory = Depends(get_directory),
    settings: Settings = Depends(get_settings),
) -> None:
    session = directory.lookup(session_id)
    if session is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Session not found")
        return

    try:
        await websocket.accept()
    except Exception:
        logger.warning("session %s: websocket upgrade failed", session_id, exc_info=True)
        return

    player_id = await session.add_player((name or "").strip() or settings.default_player_name)
    try:
        if not await _connect(session, player_id, websocket):
            return
        await _hold_open(websocket, session_id=session_id, player_id=player_id)
    except WebSocketDisconnect:
        pass
    finally:
        await session.detach_connection(player_id, websocket)


@router.websocket("/admin/join/{session_id}")
async def admin_join_ws(
    websocket: WebSocket,
    session_id: str,
    directory: SessionDirectory = Depends(get_directory),
) -> None:
    session = directory.lookup(session_id)
    if session is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Session not found")
        return

    try:
        await websocket.accept()
    except Exception:
        logger.warning("session %s: admin websocket upgrade failed", session_id, exc_info=True)
        return

    try:
        player_id = parse_player_id(await _receive_frame(websocket))
    except WebSocketDisconnect:
        logger.warning("session %s: admin left before sending a player id", session_id)
        return
    except HandshakeError as e:
        logger.warning("session %s: rejected admin handshake: %s", session_id, e)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Invalid player id")
        return

    try:
        if not await _connect(session, player_id, websocket):
            return
        await _hold_open(websocket, session_id=session_id, player_id=player_id)
    except WebSocketDisconnect:
        pass
    finally:
        await session.detach_connection(player_id, websocket)
