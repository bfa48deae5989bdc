"""
Credential Service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from auth.engine import CredentialEngine
from auth.password import CredentialHasher
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.session import build_engine, build_session_factory, init_schema

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncpg", "aiosqlite"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Validating password hashing parameters…")
        hasher = CredentialHasher.from_settings(settings)

        logger.info("Connecting to the database…")
        engine = build_engine(settings)
        try:
            await init_schema(engine)
        except Exception:
            await engine.dispose()
            raise

        app.state.db_engine = engine
        app.state.session_factory = build_session_factory(engine)
        app.state.credential_engine = CredentialEngine(hasher)
        logger.info("Application ready to accept requests.")
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("Database connections closed")

    app = FastAPI(
        title="Credential Service",
        version="1.0.0",
        description="User registration and password verification.",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
