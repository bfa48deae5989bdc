"""
Error taxonomy for the credential service.

Every error carries the HTTP status and the public message the transport
layer reports.  Internal detail stays in the log, never in ``message``.

    CredentialServiceError
    ├── ValidationError          400
    ├── InvalidCredentialsError  401
    ├── NotFoundError            404
    ├── ConflictError            409
    ├── StorageError             500
    └── ConfigurationError       500 (fatal at startup)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class CredentialServiceError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(CredentialServiceError):
    """Registration input failed one or more field rules."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, fields: Dict[str, List[str]]):
        super().__init__()
        self.fields = fields

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "fields": self.fields}


class InvalidCredentialsError(CredentialServiceError):
    """Unknown email, wrong password or unreadable stored hash: all look the same."""

    status_code = 401
    default_message = "Invalid email or password"


class NotFoundError(CredentialServiceError):
    status_code = 404
    default_message = "User not found"


class ConflictError(CredentialServiceError):
    """The store rejected a duplicate email."""

    status_code = 409
    default_message = "Email already registered"


class StorageError(CredentialServiceError):
    status_code = 500
    default_message = "Something went wrong"


class ConfigurationError(CredentialServiceError):
    """Bad hashing parameters or an unreachable store."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, setting_name: str, issue: str):
        super().__init__()
        self.setting_name = setting_name
        self.issue = issue

    def __str__(self) -> str:
        return f"Configuration error for '{self.setting_name}': {self.issue}"
