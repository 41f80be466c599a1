from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.message_service import MessageService
from ..application.services.setting_service import SettingService
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import messages as messages_router
from ..presentation.api.routers import setting as setting_router

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="TradingView Chart Dispatcher", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(setting_router.router)
    app.include_router(messages_router.router)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        container: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        heartbeat = container.setting_service.heartbeat_status(settings.heartbeat_stale_seconds)
        return {"ok": True, "heartbeat": heartbeat}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        persistence = SQLitePersistence(settings.database_path)
        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            setting_service=SettingService(persistence),
            message_service=MessageService(persistence),
        )
        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Admin API ready (database=%s)", settings.database_path)

        try:
            yield
        finally:
            persistence.close()

    return lifespan
