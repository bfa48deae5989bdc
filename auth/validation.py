"""
Structural validation of registration input.

Every rule is checked so the caller sees all violations at once.  Messages
name the rule, never the submitted value.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from email_validator import EmailNotValidError, validate_email

from auth.errors import ValidationError
from auth.models import RegistrationInput

MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 255  # users.name column width
MIN_PASSWORD_LENGTH = 8

NAME_REQUIRED = "Name is required"
NAME_TOO_LONG = f"Name must be at most {MAX_NAME_LENGTH} characters long"
INVALID_EMAIL = "Invalid email address"
PASSWORD_TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
INVALID_CHARACTERS = "Contains characters that cannot be encoded as UTF-8"


def is_encodable(value: str) -> bool:
    """False for strings carrying lone surrogates, which JSON allows but UTF-8 does not."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_registration(data: Mapping[str, Any]) -> RegistrationInput:
    """
    Check ``data`` against the registration rules.

    Returns a ``RegistrationInput`` on success; raises ``ValidationError``
    with a ``field -> [messages]`` mapping otherwise.
    """
    name = data.get("name")
    email = data.get("email")
    password = data.get("password")

    errors: Dict[str, List[str]] = {}

    if not isinstance(name, str) or len(name) < MIN_NAME_LENGTH:
        errors.setdefault("name", []).append(NAME_REQUIRED)
    elif len(name) > MAX_NAME_LENGTH:
        errors.setdefault("name", []).append(NAME_TOO_LONG)
    elif not is_encodable(name):
        errors.setdefault("name", []).append(INVALID_CHARACTERS)

    if not isinstance(email, str) or not is_encodable(email) or not _is_valid_email(email):
        errors.setdefault("email", []).append(INVALID_EMAIL)

    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.setdefault("password", []).append(PASSWORD_TOO_SHORT)
    elif not is_encodable(password):
        errors.setdefault("password", []).append(INVALID_CHARACTERS)

    if errors:
        raise ValidationError(errors)

    return RegistrationInput(name=name, email=email, password=password)
