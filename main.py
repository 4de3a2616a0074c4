import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.database import SessionLocal, init_db
from core.errors import handle_errors
from repositories.kv_repo import SqlKeyValueStore
from routers import (
    dictionary as dictionary_router,
    sentences as sentences_router,
    session as session_router,
)
from services.trainer_service import TrainerService

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def build_trainer() -> TrainerService:
    init_db()
    trainer = TrainerService(
        SqlKeyValueStore(SessionLocal),
        settle_delay=settings.SETTLE_DELAY_SECONDS,
    )
    if trainer.sentences.preload_default(settings.DEFAULT_SENTENCES_PATH):
        logger.info("Pre-loaded %d default sentences", len(trainer.sentences))
    return trainer


def create_app(trainer: TrainerService | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "trainer", None) is None:
            app.state.trainer = build_trainer()
        yield

    app = FastAPI(title="VocabDrill", lifespan=lifespan)
    app.state.trainer = trainer
    handle_errors(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(dictionary_router.router)
    app.include_router(session_router.router)
    app.include_router(sentences_router.router)

    @app.get("/status")
    async def status():
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", reload=True, host="127.0.0.1", port=8000)
