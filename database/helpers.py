"""
Store helpers for the ``users`` table.

Driver failures are translated into the service taxonomy here: a unique
violation on ``email`` becomes ``ConflictError``; anything else becomes
``StorageError`` after being logged with full detail.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import ConflictError, StorageError
from database.models import User

logger = logging.getLogger(__name__)


def _is_email_conflict(exc: IntegrityError) -> bool:
    # Postgres names the constraint, SQLite the column, MySQL the key.
    detail = str(exc.orig).lower()
    if "unique" not in detail and "duplicate" not in detail:
        return False
    return "uq_users_email" in detail or "email" in detail


async def insert_user(session: AsyncSession, row: User) -> None:
    """
    Insert and commit ``row``.

    The unique constraint is the only duplicate check: two concurrent
    inserts for one email leave exactly one row and one ``ConflictError``.
    """
    session.add(row)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if _is_email_conflict(exc):
            logger.warning("Registration conflict: email already registered (id %s)", row.id)
            raise ConflictError() from exc
        logger.exception("Integrity error inserting user %s", row.id)
        raise StorageError() from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Error inserting user %s", row.id)
        raise StorageError() from exc


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    try:
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.exception("Error fetching user by email")
        raise StorageError() from exc


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    try:
        result = await session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.exception("Error fetching user %s", user_id)
        raise StorageError() from exc


async def list_users(session: AsyncSession) -> List[User]:
    """All users in insertion order."""
    try:
        result = await session.execute(
            select(User).order_by(User.created_at.asc(), User.id.asc())
        )
        return list(result.scalars().all())
    except SQLAlchemyError as exc:
        logger.exception("Error fetching users")
        raise StorageError() from exc
