"""
Credential API routes — register, login, user listing and lookup.

Domain errors raised below are turned into responses by the handlers in
``api.middleware``.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_credential_engine
from auth.engine import CredentialEngine
from auth.errors import NotFoundError
from auth.models import LoginInput, UserView
from auth.validation import validate_registration

router = APIRouter(tags=["auth"])


# ── Response schemas ───────────────────────────────────────────────────


class RegisterResponse(BaseModel):
    message: str
    id: str


class MessageResponse(BaseModel):
    message: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(db_session),
    engine: CredentialEngine = Depends(get_credential_engine),
) -> Dict[str, Any]:
    """Register a new user."""
    data = validate_registration(payload)
    user = await engine.register(session, data)
    return {"message": "User registered successfully", "id": user.id}


@router.post("/login", response_model=MessageResponse)
async def login(
    req: LoginInput,
    session: AsyncSession = Depends(db_session),
    engine: CredentialEngine = Depends(get_credential_engine),
) -> Dict[str, Any]:
    """Login with email + password."""
    await engine.login(session, req)
    return {"message": "Login successful"}


@router.get("/users", response_model=List[UserView])
async def get_users(
    session: AsyncSession = Depends(db_session),
    engine: CredentialEngine = Depends(get_credential_engine),
) -> List[UserView]:
    return await engine.list_users(session)


@router.get("/users/{user_id}", response_model=UserView)
async def get_user(
    user_id: str,
    session: AsyncSession = Depends(db_session),
    engine: CredentialEngine = Depends(get_credential_engine),
) -> UserView:
    user = await engine.get_user(session, user_id)
    if user is None:
        raise NotFoundError()
    return user
