"""User account router: registration, login, password and nickname changes.

Each handler validates the request's fields before touching the service,
calls the service exactly once, and owns the transaction: commit on
success, rollback on failure. Identity failures propagate to the exception
handlers, which turn them into uniform 400 responses.
"""

import logging

from fastapi import APIRouter, status

from flag_identity.exceptions import IdentityError
from flag_identity.presentation.api.dependencies import (
    CurrentUserId,
    DBSession,
    IdentityServiceDep,
)
from flag_identity.presentation.api.schemas import (
    ChangeNicknameRequest,
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    NicknameResponse,
    RegisterRequest,
    SuccessResponse,
)
from flag_identity.validation import (
    validate_login,
    validate_nickname_change,
    validate_password_change,
    validate_registration,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CLIENT_ERROR = {400: {"model": ErrorResponse, "description": "Invalid request"}}


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered successfully"},
        **CLIENT_ERROR,
    },
)
async def register(
    request: RegisterRequest,
    identity_service: IdentityServiceDep,
    session: DBSession,
) -> SuccessResponse:
    validate_registration(
        request.email,
        request.password,
        request.password_confirmation,
        request.nickname,
    )

    try:
        await identity_service.register(
            email=request.email,
            password=request.password,
            password_confirmation=request.password_confirmation,
            nickname=request.nickname,
        )
        await session.commit()
    except IdentityError:
        await session.rollback()
        raise

    return SuccessResponse()


@router.post(
    "/login",
    summary="Check a user's credentials",
    responses={
        200: {"description": "Credentials are valid"},
        **CLIENT_ERROR,
    },
)
async def login(
    request: LoginRequest,
    identity_service: IdentityServiceDep,
) -> SuccessResponse:
    """
    Verify email and password.

    No session or token is issued here.
    """
    validate_login(request.email, request.password)

    await identity_service.login(email=request.email, password=request.password)
    return SuccessResponse()


@router.post(
    "/me/password",
    summary="Change password",
    responses={
        200: {"description": "Password changed successfully"},
        401: {"description": "Not authenticated"},
        **CLIENT_ERROR,
    },
)
async def change_password(
    request: ChangePasswordRequest,
    user_id: CurrentUserId,
    identity_service: IdentityServiceDep,
    session: DBSession,
) -> SuccessResponse:
    """Change the current user's password after checking the current one."""
    validate_password_change(
        request.current_password,
        request.new_password,
        request.new_password_confirmation,
    )

    try:
        await identity_service.change_password(
            user_id=user_id,
            current_password=request.current_password,
            new_password=request.new_password,
            new_password_confirmation=request.new_password_confirmation,
        )
        await session.commit()
    except IdentityError:
        await session.rollback()
        raise

    return SuccessResponse()


@router.patch(
    "/me/nickname",
    summary="Change nickname",
    responses={
        200: {"description": "Nickname changed successfully"},
        401: {"description": "Not authenticated"},
        **CLIENT_ERROR,
    },
)
async def change_nickname(
    request: ChangeNicknameRequest,
    user_id: CurrentUserId,
    identity_service: IdentityServiceDep,
    session: DBSession,
) -> NicknameResponse:
    """Change the current user's nickname after checking their password."""
    validate_nickname_change(request.password, request.new_nickname)

    try:
        result = await identity_service.change_nickname(
            user_id=user_id,
            password=request.password,
            new_nickname=request.new_nickname,
        )
        await session.commit()
    except IdentityError:
        await session.rollback()
        raise

    logger.debug("Nickname updated for user %s", user_id)
    return NicknameResponse(nickname=result.nickname)
