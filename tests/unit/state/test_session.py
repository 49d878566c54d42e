"""Unit tests for the user session and operation results."""

from uuid import UUID

import pytest

from core.exceptions import AuthRequiredError, ErrorCode, ServiceError
from state.results import OperationResult
from state.session import CurrentUser, UserSession


class TestUserSession:
    def test_anonymous(self, anonymous: UserSession):
        assert anonymous.user is None
        assert anonymous.user_id is None
        assert anonymous.is_authenticated is False
        assert anonymous.access_token() is None
        with pytest.raises(AuthRequiredError):
            anonymous.require_user()

    def test_sign_in_and_out(self, anonymous: UserSession, user_id: UUID):
        anonymous.sign_in(CurrentUser(id=user_id, access_token="jwt"))

        assert anonymous.user_id == user_id
        assert anonymous.access_token() == "jwt"
        assert anonymous.require_user().id == user_id

        anonymous.sign_out()

        assert anonymous.is_authenticated is False


class TestOperationResult:
    def test_ok(self):
        result = OperationResult.ok([1, 2])

        assert result.success
        assert result.data == [1, 2]
        assert result.error_code is None

    def test_fail(self):
        result = OperationResult.fail(ServiceError("down"))

        assert not result.success
        assert result.data is None
        assert result.error_code == ErrorCode.SERVICE_ERROR
        assert result.error_message == "down"
