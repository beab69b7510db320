"""Field validation for identity requests.

Pure, stateless checks run by the request boundary before any service call.
Each ``validate_*`` function returns the value unchanged when it is valid
and raises an :class:`~flag_identity.exceptions.IdentityError` with code
``INVALID_INPUT`` otherwise. The error's ``details`` name the offending
``field`` and the ``rule`` that failed.
"""

from __future__ import annotations

import re
from enum import Enum

from email_validator import EmailNotValidError
from email_validator import validate_email as _parse_email

from flag_identity.exceptions import IdentityError

# Password requirements
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt ignores/rejects input beyond 72 bytes

# Nickname requirements
NICKNAME_MIN_LENGTH = 3
NICKNAME_MAX_LENGTH = 32

_LETTER = re.compile(r"[^\W\d_]")
_DIGIT = re.compile(r"\d")
_WHITESPACE = re.compile(r"\s")
_NICKNAME = re.compile(r"^[A-Za-z0-9]+$")


class ValidationRule(str, Enum):
    """Identifiers of the individual validation rules."""

    INVALID_FORMAT = "invalid_format"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    NO_LETTER = "no_letter"
    NO_NUMBER = "no_number"
    HAS_WHITESPACE = "has_whitespace"
    INVALID_CHARACTER = "invalid_character"
    MISMATCH = "mismatch"


def _fail(field: str, rule: ValidationRule, message: str) -> IdentityError:
    return IdentityError.invalid_input(field, rule.value, message)


def validate_email(value: str, field: str = "email") -> str:
    """Validate an email address (``local@domain.tld``).

    Deliverability (DNS) is not checked.
    """
    try:
        _parse_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise _fail(field, ValidationRule.INVALID_FORMAT, str(e)) from e
    return value


def validate_password(value: str, field: str = "password") -> str:
    """Validate password strength.

    Current requirements:
    - At least 8 characters
    - At least one letter
    - At least one digit
    - At most 72 bytes once UTF-8 encoded

    Rules are checked in that order and the first failure is reported.
    """
    if len(value) < PASSWORD_MIN_LENGTH:
        raise _fail(
            field,
            ValidationRule.TOO_SHORT,
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
        )
    if not _LETTER.search(value):
        raise _fail(
            field,
            ValidationRule.NO_LETTER,
            "Password must contain at least one letter",
        )
    if not _DIGIT.search(value):
        raise _fail(
            field,
            ValidationRule.NO_NUMBER,
            "Password must contain at least one number",
        )
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise _fail(
            field,
            ValidationRule.TOO_LONG,
            f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes",
        )
    return value


def validate_nickname(value: str, field: str = "nickname") -> str:
    """Validate a nickname: 3-32 ASCII letters or digits, nothing else."""
    if len(value) < NICKNAME_MIN_LENGTH:
        raise _fail(
            field,
            ValidationRule.TOO_SHORT,
            f"Nickname must be at least {NICKNAME_MIN_LENGTH} characters",
        )
    if len(value) > NICKNAME_MAX_LENGTH:
        raise _fail(
            field,
            ValidationRule.TOO_LONG,
            f"Nickname cannot exceed {NICKNAME_MAX_LENGTH} characters",
        )
    if _WHITESPACE.search(value):
        raise _fail(
            field,
            ValidationRule.HAS_WHITESPACE,
            "Nickname cannot contain spaces",
        )
    if not _NICKNAME.match(value):
        raise _fail(
            field,
            ValidationRule.INVALID_CHARACTER,
            "Nickname can only contain letters and numbers",
        )
    return value


def validate_confirmation(
    value: str,
    confirmation: str,
    field: str = "password_confirmation",
) -> str:
    """Check that ``confirmation`` repeats ``value`` exactly."""
    if value != confirmation:
        raise _fail(field, ValidationRule.MISMATCH, "Confirmation does not match")
    return confirmation


# -----------------------------------------------------------------------------
# Request-level helpers
# -----------------------------------------------------------------------------


def validate_registration(
    email: str,
    password: str,
    password_confirmation: str,
    nickname: str,
) -> None:
    validate_email(email)
    validate_password(password)
    validate_confirmation(password, password_confirmation)
    validate_nickname(nickname)


def validate_login(email: str, password: str) -> None:
    validate_email(email)
    validate_password(password)


def validate_password_change(
    current_password: str,
    new_password: str,
    new_password_confirmation: str,
) -> None:
    validate_password(current_password, field="current_password")
    validate_password(new_password, field="new_password")
    validate_confirmation(
        new_password,
        new_password_confirmation,
        field="new_password_confirmation",
    )


def validate_nickname_change(password: str, new_nickname: str) -> None:
    validate_password(password)
    validate_nickname(new_nickname, field="new_nickname")
