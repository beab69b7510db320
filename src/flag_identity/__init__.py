"""Flag Identity - user accounts, login and account changes.

This package handles:
- Field validation (email, password, nickname, confirmations)
- Registration with email and nickname uniqueness
- Login by email and password
- Password and nickname changes for the current user
- The HTTP boundary mapping identity failures to client errors

Session and token issuance is not part of this package; the current user
is established upstream.
"""

from flag_identity.exceptions import ErrorCode, ErrorKind, IdentityError
from flag_identity.infrastructure.persistence import UserModel
from flag_identity.schemas import NicknameChanged, OperationResult
from flag_identity.services import (
    IdentityService,
    PasswordHasher,
    PasswordHashingService,
)
from flag_identity.validation import (
    ValidationRule,
    validate_confirmation,
    validate_email,
    validate_nickname,
    validate_password,
)

__all__ = [
    # Exceptions
    "ErrorCode",
    "ErrorKind",
    "IdentityError",
    # Persistence
    "UserModel",
    # Schemas
    "NicknameChanged",
    "OperationResult",
    # Services
    "IdentityService",
    "PasswordHasher",
    "PasswordHashingService",
    # Validation
    "ValidationRule",
    "validate_confirmation",
    "validate_email",
    "validate_nickname",
    "validate_password",
]
