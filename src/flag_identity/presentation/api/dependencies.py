"""FastAPI dependency injection for the identity API.

Provides dependencies for:
- Database sessions
- The current user's id (established upstream)
- Service instances
"""

import logging
from typing import Annotated, AsyncGenerator
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from flag_config.settings import Settings, get_settings
from flag_identity.infrastructure.persistence import UserModel
from flag_identity.services import IdentityService, PasswordHashingService
from flag_store import DocumentRepository
from flag_store.database import get_session_maker

logger = logging.getLogger(__name__)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request using the shared engine/pool.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_password_service(
    settings: Settings = Depends(get_settings),
) -> PasswordHashingService:
    """Get the bcrypt password service with the configured work factor."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_identity_service(
    session: DBSession,
    password_service: PasswordHashingService = Depends(get_password_service),
) -> IdentityService:
    """Get an identity service bound to the request's session."""
    return IdentityService(
        user_repository=DocumentRepository(session, UserModel),
        password_service=password_service,
    )


IdentityServiceDep = Annotated[IdentityService, Depends(get_identity_service)]


async def get_current_user_id(request: Request) -> UUID:
    """
    Resolve the id of the authenticated user making the request.

    Authentication happens upstream (gateway or middleware), which is
    expected to set ``request.state.user_id``.

    Raises
    ------
    HTTPException
        401 if no authenticated user is attached to the request
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except ValueError as e:
        logger.warning("Malformed user id on request state: %r", user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        ) from e


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
