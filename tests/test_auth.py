"""
Tests for session management.

Supabase is replaced by patching `create_client`; session storage is a
plain dict passed to the manager.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from storyloom.auth.session import SESSION_KEY, USER_KEY, SessionManager
from storyloom.errors import TransientNetworkError, UserInputError


def auth_response(user_id="user-123", email="test@example.com", name="Tess"):
    return MagicMock(
        user=MagicMock(id=user_id, email=email, user_metadata={"name": name}),
        session=MagicMock(access_token="access-123", refresh_token="refresh-123"),
    )


class TestSessionManager:

    @pytest.fixture
    def mock_supabase(self):
        mock = MagicMock()
        mock.auth = MagicMock()
        return mock

    @pytest.fixture
    def storage(self):
        return {}

    @pytest.fixture
    def manager(self, mock_supabase, storage):
        with patch('storyloom.auth.session.create_client') as mock_create_client:
            mock_create_client.return_value = mock_supabase
            yield SessionManager(
                supabase_url="https://test.supabase.co",
                supabase_key="test-key",
                api_client=MagicMock(),
                storage=storage,
            )

    @patch('storyloom.auth.session.create_client')
    def test_init_creates_client(self, mock_create_client):
        manager = SessionManager(supabase_url="https://test.supabase.co", supabase_key="test-key", storage={})
        assert manager.is_available is True
        mock_create_client.assert_called_once_with("https://test.supabase.co", "test-key")

    @patch('storyloom.auth.session.create_client')
    def test_not_configured(self, mock_create_client):
        manager = SessionManager(storage={})
        assert manager.is_available is False
        mock_create_client.assert_not_called()
        assert manager.login("a@b.c", "pw")["success"] is False

    def test_login_success(self, manager, mock_supabase, storage):
        mock_supabase.auth.sign_in_with_password.return_value = auth_response()

        result = manager.login("test@example.com", "password123")

        assert result["success"] is True
        assert result["user"] == {"id": "user-123", "email": "test@example.com", "name": "Tess"}
        assert storage[USER_KEY]["id"] == "user-123"
        assert manager.get_session_token() == "access-123"

    def test_login_failure(self, manager, mock_supabase, storage):
        mock_supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        result = manager.login("test@example.com", "wrong")

        assert result["success"] is False
        assert "Invalid login credentials" in result["error"]
        assert storage == {}

    def test_name_falls_back_to_email(self, manager, mock_supabase):
        response = auth_response()
        response.user.user_metadata = {}
        mock_supabase.auth.sign_in_with_password.return_value = response
        assert manager.login("test@example.com", "pw")["user"]["name"] == "test"

    def test_create_account_then_login(self, manager, mock_supabase):
        manager._api_client.signup.return_value = {"id": "user-123", "email": "test@example.com", "name": "Tess"}
        mock_supabase.auth.sign_in_with_password.return_value = auth_response()

        created = manager.create_account("test@example.com", "password123", "Tess")

        manager._api_client.signup.assert_called_once_with("test@example.com", "password123", "Tess")
        assert created["success"] is True
        assert created["user"]["id"] == "user-123"
        assert manager.login("test@example.com", "password123")["success"] is True
        assert manager.get_current_user()["name"] == "Tess"

    def test_create_account_rejected(self, manager, mock_supabase):
        manager._api_client.signup.side_effect = UserInputError("A user with this email address has already been registered")

        result = manager.create_account("test@example.com", "password123", "Tess")

        assert result["success"] is False
        assert "already been registered" in result["error"]
        mock_supabase.auth.sign_in_with_password.assert_not_called()

    def test_create_account_service_down(self, manager):
        manager._api_client.signup.side_effect = TransientNetworkError()
        assert manager.create_account("a@b.c", "pw1234", "A")["success"] is False

    def test_logout_clears_storage(self, manager, mock_supabase, storage):
        mock_supabase.auth.sign_in_with_password.return_value = auth_response()
        manager.login("test@example.com", "password123")

        manager.logout()

        mock_supabase.auth.sign_out.assert_called_once()
        assert SESSION_KEY not in storage
        assert manager.get_current_user() is None

    def test_get_current_user_no_session(self, manager):
        assert manager.get_current_user() is None
        assert manager.get_session_token() is None

    def test_expired_session(self, manager, mock_supabase, storage):
        mock_supabase.auth.sign_in_with_password.return_value = auth_response()
        manager.login("test@example.com", "password123")
        storage[SESSION_KEY]["expires_at"] = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()

        assert manager.get_current_user() is None
        assert USER_KEY not in storage

    def test_restore_valid_token(self, manager, mock_supabase):
        mock_supabase.auth.sign_in_with_password.return_value = auth_response()
        manager.login("test@example.com", "password123")
        mock_supabase.auth.get_user.return_value = auth_response()

        assert manager.restore()["id"] == "user-123"
        mock_supabase.auth.get_user.assert_called_once_with("access-123")

    def test_restore_refreshes_rejected_token(self, manager, mock_supabase):
        mock_supabase.auth.sign_in_with_password.return_value = auth_response()
        manager.login("test@example.com", "password123")
        mock_supabase.auth.get_user.side_effect = Exception("JWT expired")
        refreshed = auth_response()
        refreshed.session.access_token = "access-456"
        mock_supabase.auth.refresh_session.return_value = refreshed

        assert manager.restore() is not None
        assert manager.get_session_token() == "access-456"

    def test_restore_gives_up(self, manager, mock_supabase, storage):
        mock_supabase.auth.sign_in_with_password.return_value = auth_response()
        manager.login("test@example.com", "password123")
        mock_supabase.auth.get_user.side_effect = Exception("JWT expired")
        mock_supabase.auth.refresh_session.side_effect = Exception("refresh token revoked")

        assert manager.restore() is None
        assert storage == {}
