"""Identity domain errors.

All identity failures are raised as a single exception type,
:class:`IdentityError`, tagged with an :class:`ErrorCode`. The request
boundary branches on ``code`` (or the coarser ``kind``) rather than on
exception subclasses.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Broad failure categories."""

    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    AUTHENTICATION_FAILURE = "authentication_failure"


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    INVALID_INPUT = "INVALID_INPUT"
    EMAIL_ALREADY_TAKEN = "EMAIL_ALREADY_TAKEN"
    NICKNAME_ALREADY_TAKEN = "NICKNAME_ALREADY_TAKEN"
    EMAIL_NOT_FOUND = "EMAIL_NOT_FOUND"
    INCORRECT_PASSWORD = "INCORRECT_PASSWORD"

    @property
    def kind(self) -> ErrorKind:
        return _KIND_BY_CODE[self]


_KIND_BY_CODE: dict[ErrorCode, ErrorKind] = {
    ErrorCode.INVALID_INPUT: ErrorKind.INVALID_INPUT,
    ErrorCode.EMAIL_ALREADY_TAKEN: ErrorKind.CONFLICT,
    ErrorCode.NICKNAME_ALREADY_TAKEN: ErrorKind.CONFLICT,
    ErrorCode.EMAIL_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.INCORRECT_PASSWORD: ErrorKind.AUTHENTICATION_FAILURE,
}


class IdentityError(Exception):
    """An expected, per-request identity failure.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Which failure occurred
    details
        Additional context for diagnostics, e.g. the ``field`` and
        ``rule`` of an input validation failure
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    @property
    def field(self) -> str | None:
        return self.details.get("field")

    @property
    def rule(self) -> str | None:
        return self.details.get("rule")

    @classmethod
    def invalid_input(cls, field: str, rule: str, message: str) -> IdentityError:
        return cls(
            ErrorCode.INVALID_INPUT,
            message,
            {"field": field, "rule": rule},
        )

    @classmethod
    def email_already_taken(cls, email: str) -> IdentityError:
        return cls(
            ErrorCode.EMAIL_ALREADY_TAKEN,
            "Email address is already registered",
            {"email": email},
        )

    @classmethod
    def nickname_already_taken(cls, nickname: str) -> IdentityError:
        return cls(
            ErrorCode.NICKNAME_ALREADY_TAKEN,
            "Nickname is already taken",
            {"nickname": nickname},
        )

    @classmethod
    def email_not_found(cls, email: str) -> IdentityError:
        return cls(
            ErrorCode.EMAIL_NOT_FOUND,
            "No account is registered with this email address",
            {"email": email},
        )

    @classmethod
    def incorrect_password(cls, **details: Any) -> IdentityError:
        return cls(ErrorCode.INCORRECT_PASSWORD, "Password is incorrect", details)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.value!r}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )
