"""
Shared fixtures: cheap Argon2 parameters and a throwaway SQLite store.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.engine import CredentialEngine
from auth.password import CredentialHasher
from config.settings import Settings
from database.session import build_engine, build_session_factory, init_schema


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'credentials.db'}",
        db_pool_size=1,
        db_max_overflow=0,
        argon2_time_cost=1,
        argon2_memory_cost=64,
        argon2_parallelism=1,
    )


@pytest.fixture
def hasher(settings) -> CredentialHasher:
    return CredentialHasher.from_settings(settings)


@pytest.fixture
def credential_engine(hasher) -> CredentialEngine:
    return CredentialEngine(hasher)


@pytest_asyncio.fixture
async def session_factory(settings):
    engine = build_engine(settings)
    await init_schema(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def client(settings):
    from main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client
