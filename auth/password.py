"""
Password hashing and verification.

Uses Argon2id (argon2-cffi) with fixed cost parameters taken from
``config.settings``.  Each hash gets a fresh random salt; the encoded PHC
string carries algorithm, parameters, salt and digest, so verification
needs nothing but the stored string.

Both operations are CPU-bound and deliberately slow, so the async
variants run them on a worker thread via ``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
import logging
import secrets

from argon2 import PasswordHasher, Type
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from auth.errors import ConfigurationError
from config.settings import Settings

logger = logging.getLogger(__name__)


class MalformedHashError(ValueError):
    """A stored hash could not be decoded or checked."""


class CredentialHasher:
    """Argon2id hasher validated once at construction."""

    def __init__(
        self,
        time_cost: int,
        memory_cost: int,
        parallelism: int,
        hash_len: int,
        salt_len: int,
    ):
        try:
            self._hasher = PasswordHasher(
                time_cost=time_cost,
                memory_cost=memory_cost,
                parallelism=parallelism,
                hash_len=hash_len,
                salt_len=salt_len,
                type=Type.ID,
            )
            # Probe the parameters; the result doubles as the hash checked
            # against when a login names an unknown email.
            self._dummy_hash = self._hasher.hash(secrets.token_urlsafe(32))
        except (HashingError, TypeError, ValueError, OverflowError) as exc:
            raise ConfigurationError(
                "argon2",
                f"invalid parameters (t={time_cost}, m={memory_cost}, "
                f"p={parallelism}, hash_len={hash_len}, salt_len={salt_len}): {exc}",
            ) from exc

        logger.info(
            "Argon2id hasher ready (t=%d, m=%d KiB, p=%d)",
            time_cost, memory_cost, parallelism,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialHasher":
        return cls(**settings.get_hasher_params())

    def hash(self, password: str) -> str:
        """Hash ``password`` with a fresh salt.  Failure is a configuration fault."""
        try:
            return self._hasher.hash(password)
        except HashingError as exc:
            raise ConfigurationError("argon2", f"hashing failed: {exc}") from exc

    def verify(self, password_hash: str, password: str) -> bool:
        """
        Constant-time check of ``password`` against ``password_hash``.

        Returns ``False`` on mismatch; raises ``MalformedHashError`` when the
        stored string cannot be decoded.
        """
        try:
            return self._hasher.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as exc:
            raise MalformedHashError(str(exc)) from exc

    def burn(self, password: str) -> None:
        """Spend one verification's worth of work against the dummy hash."""
        try:
            self._hasher.verify(self._dummy_hash, password)
        except VerifyMismatchError:
            pass

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password_hash: str, password: str) -> bool:
        return await asyncio.to_thread(self.verify, password_hash, password)

    async def burn_async(self, password: str) -> None:
        await asyncio.to_thread(self.burn, password)
