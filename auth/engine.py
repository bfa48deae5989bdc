"""
Credential engine — hashes passwords on register and verifies them on login.
Records are mapped to and from ``users`` rows here as well.

The engine is stateless apart from its hasher; the DB session is passed
in per call so concurrent requests share nothing but the pool.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import InvalidCredentialsError
from auth.models import LoginInput, RegistrationInput, UserRecord, UserView
from auth.password import CredentialHasher, MalformedHashError
from auth.validation import is_encodable
from database import helpers
from database.models import User

logger = logging.getLogger(__name__)


def record_to_row(record: UserRecord) -> User:
    return User(
        id=record.id,
        name=record.name,
        email=record.email,
        password_hash=record.password_hash,
        created_at=record.created_at,
    )


def row_to_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )


def to_view(record: UserRecord) -> UserView:
    return UserView(id=record.id, name=record.name, email=record.email)


class CredentialEngine:
    def __init__(self, hasher: CredentialHasher):
        self._hasher = hasher

    async def build_record(self, data: RegistrationInput) -> UserRecord:
        """Hash the password and mint an id; the plaintext goes no further."""
        password_hash = await self._hasher.hash_async(data.password)
        return UserRecord(
            id=str(uuid.uuid4()),
            name=data.name,
            email=data.email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )

    async def register(self, session: AsyncSession, data: RegistrationInput) -> UserView:
        """
        Hash, persist and return the non-secret view of a new user.

        Raises ``ConflictError`` on a duplicate email and ``StorageError``
        on any other store failure.
        """
        record = await self.build_record(data)
        await helpers.insert_user(session, record_to_row(record))
        logger.info("Registered user %s", record.id)
        return to_view(record)

    async def login(self, session: AsyncSession, data: LoginInput) -> UserView:
        """
        Verify ``data`` against the stored hash.

        Every failure raises the same ``InvalidCredentialsError``; only the
        log line tells the causes apart.
        """
        if not (is_encodable(data.email) and is_encodable(data.password)):
            logger.warning("Login failed: credentials contain non-UTF-8 characters")
            raise InvalidCredentialsError()

        row = await helpers.get_user_by_email(session, data.email)
        if row is None:
            await self._hasher.burn_async(data.password)
            logger.warning("Login failed: no user for the supplied email")
            raise InvalidCredentialsError()

        record = row_to_record(row)
        try:
            matched = await self._hasher.verify_async(record.password_hash, data.password)
        except MalformedHashError:
            logger.error("Login failed: stored hash for user %s is malformed", record.id)
            raise InvalidCredentialsError() from None

        if not matched:
            logger.warning("Login failed: wrong password for user %s", record.id)
            raise InvalidCredentialsError()

        logger.info("Login: %s", record.id)
        return to_view(record)

    async def list_users(self, session: AsyncSession) -> List[UserView]:
        rows = await helpers.list_users(session)
        return [to_view(row_to_record(row)) for row in rows]

    async def get_user(self, session: AsyncSession, user_id: str) -> Optional[UserView]:
        row = await helpers.get_user_by_id(session, user_id)
        if row is None:
            return None
        return to_view(row_to_record(row))
