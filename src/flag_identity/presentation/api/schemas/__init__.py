"""API request and response schemas."""

from flag_identity.presentation.api.schemas.users import (
    ChangeNicknameRequest,
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    NicknameResponse,
    RegisterRequest,
    SuccessResponse,
)

__all__ = [
    "ChangeNicknameRequest",
    "ChangePasswordRequest",
    "ErrorResponse",
    "LoginRequest",
    "NicknameResponse",
    "RegisterRequest",
    "SuccessResponse",
]
