"""
FastAPI dependencies for the credential routes.

Provides ``db_session`` and ``get_credential_engine``; both read the
process-wide state that ``main.create_app`` builds at startup.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.engine import CredentialEngine
from database.session import get_db_session


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_credential_engine(request: Request) -> CredentialEngine:
    return request.app.state.credential_engine
