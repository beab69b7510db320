"""Identity service for registration, login and account changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from flag_identity.exceptions import IdentityError
from flag_identity.infrastructure.persistence import UserModel
from flag_identity.schemas import NicknameChanged, OperationResult
from flag_identity.validation import validate_confirmation
from flag_store import DuplicateKeyError

if TYPE_CHECKING:
    from flag_identity.services.password_service import PasswordHasher
    from flag_store import DocumentRepository

logger = logging.getLogger(__name__)


class IdentityService:
    """
    Application service for user identity.

    Enforces the business rules that need the store (email and nickname
    uniqueness, password correctness) and orchestrates persistence. Field
    syntax is validated by the caller before any method is invoked.

    Failures are raised as :class:`IdentityError` and never retried or
    suppressed here. Uniqueness is pre-checked for a precise error, but the
    store's unique constraints are the final arbiter: a duplicate reported
    by the repository is remapped to the same error as the pre-check.
    """

    def __init__(
        self,
        user_repository: DocumentRepository[UserModel],
        password_service: PasswordHasher,
    ):
        self._user_repo = user_repository
        self._password_service = password_service

    async def register(
        self,
        email: str,
        password: str,
        password_confirmation: str,
        nickname: str,
    ) -> OperationResult:
        validate_confirmation(password, password_confirmation)

        # Email is checked first: only the first applicable error is raised
        if await self._user_repo.find_one({"email": email}) is not None:
            raise IdentityError.email_already_taken(email)
        if await self._user_repo.find_one({"nickname": nickname}) is not None:
            raise IdentityError.nickname_already_taken(nickname)

        password_hash = self._password_service.hash(password)
        try:
            user = await self._user_repo.create_and_return(
                {
                    "email": email,
                    "nickname": nickname,
                    "password_hash": password_hash,
                },
            )
        except DuplicateKeyError as e:
            conflict = self._conflict_from(e, email=email, nickname=nickname)
            if conflict is None:
                raise
            raise conflict from e

        logger.info("User registered: %s (nickname: %s)", user.id, nickname)
        return OperationResult()

    async def login(self, email: str, password: str) -> OperationResult:
        user = await self._user_repo.find_one({"email": email})
        if user is None:
            raise IdentityError.email_not_found(email)

        if not self._password_service.verify(password, user.password_hash):
            raise IdentityError.incorrect_password()

        logger.debug("User authenticated: %s", user.id)
        return OperationResult()

    async def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
        new_password_confirmation: str,
    ) -> OperationResult:
        validate_confirmation(
            new_password,
            new_password_confirmation,
            field="new_password_confirmation",
        )
        await self._authenticate(user_id, current_password)

        new_hash = self._password_service.hash(new_password)
        updated = await self._user_repo.update_and_return_one(
            {"id": user_id},
            {"password_hash": new_hash},
        )
        if updated is None:
            raise IdentityError.incorrect_password(user_id=str(user_id))

        logger.info("Password changed for user: %s", user_id)
        return OperationResult()

    async def change_nickname(
        self,
        user_id: UUID,
        password: str,
        new_nickname: str,
    ) -> NicknameChanged:
        await self._authenticate(user_id, password)

        holder = await self._user_repo.find_one({"nickname": new_nickname})
        if holder is not None and holder.id != user_id:
            raise IdentityError.nickname_already_taken(new_nickname)

        try:
            updated = await self._user_repo.update_and_return_one(
                {"id": user_id},
                {"nickname": new_nickname},
            )
        except DuplicateKeyError as e:
            conflict = self._conflict_from(e, nickname=new_nickname)
            if conflict is None:
                raise
            raise conflict from e
        if updated is None:
            raise IdentityError.incorrect_password(user_id=str(user_id))

        logger.info("Nickname changed for user: %s -> %s", user_id, new_nickname)
        return NicknameChanged(nickname=updated.nickname)

    async def _authenticate(self, user_id: UUID, password: str) -> UserModel:
        user = await self._user_repo.find_one({"id": user_id})
        # An unknown user cannot have a matching credential
        if user is None:
            raise IdentityError.incorrect_password(user_id=str(user_id))
        if not self._password_service.verify(password, user.password_hash):
            raise IdentityError.incorrect_password(user_id=str(user_id))
        return user

    @staticmethod
    def _conflict_from(
        error: DuplicateKeyError,
        email: str | None = None,
        nickname: str | None = None,
    ) -> IdentityError | None:
        if "email" in error.fields and email is not None:
            return IdentityError.email_already_taken(email)
        if "nickname" in error.fields and nickname is not None:
            return IdentityError.nickname_already_taken(nickname)
        return None
