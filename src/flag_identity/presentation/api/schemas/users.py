"""User account schemas for request/response models.

Request models only enforce the shape of the payload. Field rules are
applied by :mod:`flag_identity.validation` in the route handlers so that a
rejected request never reaches the identity service.
"""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: str = Field(..., description="User's email address")
    password: str = Field(
        ...,
        description="At least 8 characters with a letter and a number",
    )
    password_confirmation: str
    nickname: str = Field(..., description="3-32 letters or numbers")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "password123",
                "password_confirmation": "password123",
                "nickname": "jane",
            },
        },
    )


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: str
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "password123",
            },
        },
    )


class ChangePasswordRequest(BaseModel):
    """Request schema for changing the current user's password."""

    current_password: str
    new_password: str
    new_password_confirmation: str


class ChangeNicknameRequest(BaseModel):
    """Request schema for changing the current user's nickname."""

    password: str
    new_nickname: str


class SuccessResponse(BaseModel):
    """Response schema for operations without a payload."""

    success: bool = True


class NicknameResponse(BaseModel):
    """Response schema for a nickname change."""

    nickname: str


class ErrorResponse(BaseModel):
    """Uniform client error body."""

    detail: str
    code: str
