from __future__ import annotations

import logging

from fastapi import FastAPI

from trivia.api.routes import router
from trivia.catalog import default_catalog
from trivia.core.directory import SessionDirectory
from trivia.settings import load_settings

app = FastAPI(title="trivia-live", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)

    app.state.settings = settings
    app.state.catalog = default_catalog()
    app.state.directory = SessionDirectory(settings=settings)
    logger.info("trivia-live ready (tick every %d ms)", settings.tick_interval_ms)


@app.on_event("shutdown")
async def _shutdown() -> None:
    directory: SessionDirectory | None = getattr(app.state, "directory", None)
    if directory is not None:
        await directory.close_all()


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "trivia-live", "version": "0.1.0"}
