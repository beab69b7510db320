"""Tests for the users router and its error mapping."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from flag_identity.exceptions import ErrorCode, IdentityError
from flag_identity.presentation.api import create_app
from flag_identity.presentation.api.dependencies import (
    get_current_user_id,
    get_db_session,
    get_identity_service,
)
from flag_identity.schemas import NicknameChanged, OperationResult
from flag_identity.services import IdentityService

USERS = "/api/v1/users"
USER_ID = uuid4()

REGISTER_BODY = {
    "email": "jane@example.com",
    "password": "password123",
    "password_confirmation": "password123",
    "nickname": "jane",
}
LOGIN_BODY = {"email": "jane@example.com", "password": "password123"}
CHANGE_PASSWORD_BODY = {
    "current_password": "password123",
    "new_password": "newpass456",
    "new_password_confirmation": "newpass456",
}
CHANGE_NICKNAME_BODY = {"password": "password123", "new_nickname": "jane2"}


class _RouterTestBase:
    def setup_method(self):
        self.service = Mock(spec=IdentityService)
        self.service.register = AsyncMock(return_value=OperationResult())
        self.service.login = AsyncMock(return_value=OperationResult())
        self.service.change_password = AsyncMock(return_value=OperationResult())
        self.service.change_nickname = AsyncMock(
            return_value=NicknameChanged(nickname="jane2"),
        )
        self.session = AsyncMock()

        async def _session_override():
            yield self.session

        self.app = create_app()
        self.app.dependency_overrides[get_identity_service] = lambda: self.service
        self.app.dependency_overrides[get_db_session] = _session_override
        self.app.dependency_overrides[get_current_user_id] = lambda: USER_ID
        # Lifespan is not entered, so no database is touched
        self.client = TestClient(self.app)


class TestRegisterEndpoint(_RouterTestBase):
    def test_success(self):
        response = self.client.post(f"{USERS}/register", json=REGISTER_BODY)

        assert response.status_code == 201
        assert response.json() == {"success": True}
        self.service.register.assert_awaited_once_with(**REGISTER_BODY)
        self.session.commit.assert_awaited_once()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": "not a valid email address"},
            {"password": "abc12", "password_confirmation": "abc12"},
            {"password": "password", "password_confirmation": "password"},
            {
                "password": "1239009384657493",
                "password_confirmation": "1239009384657493",
            },
            {"password_confirmation": "password123 incorrect"},
            {"nickname": "ab"},
            {"nickname": " has spaces "},
            {"nickname": "nick!name"},
        ],
    )
    def test_invalid_fields_never_reach_service(self, overrides):
        response = self.client.post(
            f"{USERS}/register",
            json={**REGISTER_BODY, **overrides},
        )

        assert response.status_code == 400
        assert response.json()["code"] == ErrorCode.INVALID_INPUT.value
        self.service.register.assert_not_awaited()

    @pytest.mark.parametrize(
        "error",
        [
            IdentityError.email_already_taken("jane@example.com"),
            IdentityError.nickname_already_taken("jane"),
        ],
    )
    def test_conflicts_are_client_errors(self, error):
        self.service.register.side_effect = error

        response = self.client.post(f"{USERS}/register", json=REGISTER_BODY)

        assert response.status_code == 400
        assert response.json() == {"detail": error.message, "code": error.code.value}
        self.session.rollback.assert_awaited_once()
        self.session.commit.assert_not_awaited()

    def test_missing_field_is_invalid_input(self):
        body = {key: value for key, value in REGISTER_BODY.items() if key != "nickname"}

        response = self.client.post(f"{USERS}/register", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == ErrorCode.INVALID_INPUT.value
        self.service.register.assert_not_awaited()


class TestLoginEndpoint(_RouterTestBase):
    def test_success(self):
        response = self.client.post(f"{USERS}/login", json=LOGIN_BODY)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        self.service.login.assert_awaited_once_with(**LOGIN_BODY)

    @pytest.mark.parametrize(
        "error",
        [
            IdentityError.email_not_found("jane@example.com"),
            IdentityError.incorrect_password(),
        ],
    )
    def test_failures_are_client_errors(self, error):
        self.service.login.side_effect = error

        response = self.client.post(f"{USERS}/login", json=LOGIN_BODY)

        assert response.status_code == 400
        assert response.json()["code"] == error.code.value

    def test_weak_password_never_reaches_service(self):
        response = self.client.post(
            f"{USERS}/login",
            json={**LOGIN_BODY, "password": "abc12"},
        )

        assert response.status_code == 400
        self.service.login.assert_not_awaited()


class TestChangePasswordEndpoint(_RouterTestBase):
    def test_success(self):
        response = self.client.post(
            f"{USERS}/me/password",
            json=CHANGE_PASSWORD_BODY,
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        self.service.change_password.assert_awaited_once_with(
            user_id=USER_ID,
            **CHANGE_PASSWORD_BODY,
        )
        self.session.commit.assert_awaited_once()

    def test_incorrect_password(self):
        self.service.change_password.side_effect = IdentityError.incorrect_password()

        response = self.client.post(
            f"{USERS}/me/password",
            json=CHANGE_PASSWORD_BODY,
        )

        assert response.status_code == 400
        assert response.json()["code"] == ErrorCode.INCORRECT_PASSWORD.value
        self.session.rollback.assert_awaited_once()

    def test_confirmation_mismatch_never_reaches_service(self):
        response = self.client.post(
            f"{USERS}/me/password",
            json={**CHANGE_PASSWORD_BODY, "new_password_confirmation": "newpass457"},
        )

        assert response.status_code == 400
        self.service.change_password.assert_not_awaited()

    def test_requires_authenticated_user(self):
        del self.app.dependency_overrides[get_current_user_id]

        response = self.client.post(
            f"{USERS}/me/password",
            json=CHANGE_PASSWORD_BODY,
        )

        assert response.status_code == 401
        self.service.change_password.assert_not_awaited()


class TestChangeNicknameEndpoint(_RouterTestBase):
    def test_success_returns_new_nickname(self):
        response = self.client.patch(
            f"{USERS}/me/nickname",
            json=CHANGE_NICKNAME_BODY,
        )

        assert response.status_code == 200
        assert response.json() == {"nickname": "jane2"}
        self.service.change_nickname.assert_awaited_once_with(
            user_id=USER_ID,
            password="password123",
            new_nickname="jane2",
        )

    def test_nickname_taken(self):
        self.service.change_nickname.side_effect = (
            IdentityError.nickname_already_taken("jane2")
        )

        response = self.client.patch(
            f"{USERS}/me/nickname",
            json=CHANGE_NICKNAME_BODY,
        )

        assert response.status_code == 400
        assert response.json()["code"] == ErrorCode.NICKNAME_ALREADY_TAKEN.value

    def test_invalid_nickname_never_reaches_service(self):
        response = self.client.patch(
            f"{USERS}/me/nickname",
            json={**CHANGE_NICKNAME_BODY, "new_nickname": "nick name"},
        )

        assert response.status_code == 400
        self.service.change_nickname.assert_not_awaited()


class TestCurrentUserResolution(_RouterTestBase):
    def test_reads_user_id_from_request_state(self):
        del self.app.dependency_overrides[get_current_user_id]

        @self.app.middleware("http")
        async def attach_user(request, call_next):
            request.state.user_id = str(USER_ID)
            return await call_next(request)

        client = TestClient(self.app)
        response = client.patch(f"{USERS}/me/nickname", json=CHANGE_NICKNAME_BODY)

        assert response.status_code == 200
        assert self.service.change_nickname.await_args.kwargs["user_id"] == USER_ID

    def test_malformed_user_id_is_unauthenticated(self):
        del self.app.dependency_overrides[get_current_user_id]

        @self.app.middleware("http")
        async def attach_user(request, call_next):
            request.state.user_id = "not-a-uuid"
            return await call_next(request)

        client = TestClient(self.app)
        response = client.patch(f"{USERS}/me/nickname", json=CHANGE_NICKNAME_BODY)

        assert response.status_code == 401


class TestUnexpectedErrors(_RouterTestBase):
    def test_internal_error_is_opaque(self):
        self.service.login.side_effect = RuntimeError("store unreachable")
        client = TestClient(self.app, raise_server_exceptions=False)

        response = client.post(f"{USERS}/login", json=LOGIN_BODY)

        assert response.status_code == 500
        assert response.json() == {
            "detail": "An internal error occurred",
            "code": "INTERNAL_ERROR",
        }


class TestHealth(_RouterTestBase):
    def test_health(self):
        response = self.client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
