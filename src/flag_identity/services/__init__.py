"""Identity services - password hashing and account operations."""

from flag_identity.services.identity_service import IdentityService
from flag_identity.services.password_service import (
    PasswordHasher,
    PasswordHashingService,
)

__all__ = [
    "IdentityService",
    "PasswordHasher",
    "PasswordHashingService",
]
