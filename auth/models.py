"""
Domain records for the credential lifecycle.

``RegistrationInput`` and ``LoginInput`` are request-scoped and carry the
plaintext password; it is excluded from ``repr`` so it cannot leak into a
log line.  ``UserRecord`` is the durable entity and ``UserView`` the only
shape that ever leaves the service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class RegistrationInput:
    name: str
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime


class LoginInput(BaseModel):
    email: str
    password: str = Field(..., repr=False)


class UserView(BaseModel):
    id: str
    name: str
    email: str
