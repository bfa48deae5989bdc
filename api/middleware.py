"""
Global middleware and exception handlers.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from auth.errors import (
    ConfigurationError,
    CredentialServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response


def register_exception_handlers(app: FastAPI) -> None:
    """Map the service error taxonomy onto JSON responses."""

    @app.exception_handler(CredentialServiceError)
    async def service_error(request: Request, exc: CredentialServiceError):
        if isinstance(exc, ConfigurationError):
            logger.critical("%s %s — %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        # Only locations and messages; pydantic's ``input`` may hold a password.
        fields: Dict[str, List[str]] = {}
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
            field = ".".join(loc) or "body"
            fields.setdefault(field, []).append(err.get("msg", "Invalid value"))
        body = ValidationError(fields).to_dict()
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)
