"""
Tests for the hosted backend client.
"""
import time
from unittest.mock import MagicMock

import pytest
import requests

from backend_service.client import HostedBackendClient, _parse_content_range
from backend_service.errors import AuthError, BackendError, SessionExpiredError
from backend_service.models import AuthSession


def make_response(status_code=200, json_data=None, headers=None, text=""):
    """Build a fake requests response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.text = text
    if json_data is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_data
    return resp


TOKEN_ANSWER = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "expires_in": 3600,
    "token_type": "bearer",
    "user": {"id": "user-1", "email": "admin@example.com", "aud": "authenticated"},
}


class TestHostedBackendClient:
    """Test the request/answer handling of the client."""

    def setup_method(self):
        """Set up test fixtures."""
        self.http = MagicMock()
        self.client = HostedBackendClient(
            base_url="https://project.example.co/",
            api_key="anon-key",
            timeout=5.0,
            session=self.http,
        )

    def last_call(self):
        args, kwargs = self.http.request.call_args
        return args, kwargs

    def test_sign_in_success(self):
        """Test that a token answer becomes an AuthSession."""
        self.http.request.return_value = make_response(200, TOKEN_ANSWER)

        auth_session = self.client.sign_in("admin@example.com", "pw")

        assert auth_session.access_token == "access-1"
        assert auth_session.refresh_token == "refresh-1"
        assert auth_session.user.id == "user-1"
        assert auth_session.user.email == "admin@example.com"
        assert auth_session.expires_at > time.time()

        args, kwargs = self.last_call()
        assert args == ("POST", "https://project.example.co/auth/v1/token")
        assert kwargs["params"] == {"grant_type": "password"}
        assert kwargs["json"] == {"email": "admin@example.com", "password": "pw"}
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
        assert kwargs["timeout"] == 5.0

    def test_sign_in_without_user(self):
        """Test that a token answer without a user yields no identity."""
        answer = dict(TOKEN_ANSWER)
        answer.pop("user")
        self.http.request.return_value = make_response(200, answer)

        auth_session = self.client.sign_in("admin@example.com", "pw")
        assert auth_session.user is None

    @pytest.mark.parametrize("error_body,message", [
        ({"error": "invalid_grant", "error_description": "Invalid login credentials"}, "Invalid login credentials"),
        ({"code": 400, "error_code": "invalid_credentials", "msg": "Invalid login credentials"}, "Invalid login credentials"),
        ({"message": "Email not confirmed"}, "Email not confirmed"),
    ])
    def test_sign_in_rejected(self, error_body, message):
        """Test that auth errors carry the backend message."""
        self.http.request.return_value = make_response(400, error_body)

        with pytest.raises(AuthError) as exc_info:
            self.client.sign_in("admin@example.com", "bad")

        assert exc_info.value.message == message
        assert exc_info.value.status_code == 400

    def test_network_failure_is_backend_error(self):
        """Test that transport failures are wrapped."""
        self.http.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(BackendError) as exc_info:
            self.client.sign_in("admin@example.com", "pw")

        assert not isinstance(exc_info.value, AuthError)

    def test_garbled_token_answer(self):
        """Test that an unusable token answer raises BackendError."""
        self.http.request.return_value = make_response(200, {"unexpected": True})

        with pytest.raises(BackendError):
            self.client.sign_in("admin@example.com", "pw")

    def test_refresh_session(self):
        """Test the refresh token grant."""
        self.http.request.return_value = make_response(200, TOKEN_ANSWER)

        auth_session = self.client.refresh_session("refresh-0")

        assert auth_session.access_token == "access-1"
        _, kwargs = self.last_call()
        assert kwargs["params"] == {"grant_type": "refresh_token"}
        assert kwargs["json"] == {"refresh_token": "refresh-0"}

    def test_sign_out_uses_user_token(self):
        """Test that sign-out sends the user's access token."""
        self.http.request.return_value = make_response(204)

        self.client.sign_out("access-1")

        args, kwargs = self.last_call()
        assert args == ("POST", "https://project.example.co/auth/v1/logout")
        assert kwargs["headers"]["Authorization"] == "Bearer access-1"

    @pytest.mark.parametrize("status_code", [401, 403, 404])
    def test_sign_out_already_gone(self, status_code):
        """Test that an already revoked session is not an error."""
        self.http.request.return_value = make_response(status_code, {"msg": "gone"})
        self.client.sign_out("access-1")

    def test_sign_out_failure(self):
        """Test that other sign-out failures raise."""
        self.http.request.return_value = make_response(500, text="boom")

        with pytest.raises(AuthError) as exc_info:
            self.client.sign_out("access-1")
        assert exc_info.value.message == "boom"

    def test_read_one_found(self):
        """Test reading a single row with filters."""
        self.http.request.return_value = make_response(200, [{"role": "admin"}])

        row = self.client.read_one("profiles", {"id": "user-1"}, select="role", access_token="access-1")

        assert row == {"role": "admin"}
        args, kwargs = self.last_call()
        assert args == ("GET", "https://project.example.co/rest/v1/profiles")
        assert kwargs["params"] == {"select": "role", "limit": 2, "id": "eq.user-1"}
        assert kwargs["headers"]["Authorization"] == "Bearer access-1"

    def test_read_one_not_found(self):
        """Test that no matching row yields None."""
        self.http.request.return_value = make_response(200, [])
        assert self.client.read_one("profiles", {"id": "user-1"}) is None

    def test_read_one_ambiguous(self):
        """Test that several matching rows are an error."""
        self.http.request.return_value = make_response(200, [{"role": "admin"}, {"role": "user"}])

        with pytest.raises(BackendError):
            self.client.read_one("profiles", {"id": "user-1"})

    def test_read_all_ordered(self):
        """Test reading every row ordered by a column."""
        rows = [{"created_at": "2025-01-02T10:00:00+00:00"}, {"created_at": "2025-01-01T10:00:00+00:00"}]
        self.http.request.return_value = make_response(200, rows)

        result = self.client.read_all("site_visits", order_by="created_at", descending=True)

        assert result == rows
        _, kwargs = self.last_call()
        assert kwargs["params"] == {"select": "*", "order": "created_at.desc"}

    def test_read_all_expired_token(self):
        """Test that HTTP 401 on the row API means an expired session."""
        self.http.request.return_value = make_response(401, {"message": "JWT expired"})

        with pytest.raises(SessionExpiredError) as exc_info:
            self.client.read_all("site_visits")
        assert exc_info.value.message == "JWT expired"

    def test_read_all_server_error(self):
        """Test that other row API errors raise BackendError."""
        self.http.request.return_value = make_response(500, {"message": "relation does not exist"})

        with pytest.raises(BackendError) as exc_info:
            self.client.read_all("site_visits")
        assert not isinstance(exc_info.value, SessionExpiredError)
        assert exc_info.value.status_code == 500

    def test_read_all_not_a_list(self):
        """Test that a non-list answer is rejected."""
        self.http.request.return_value = make_response(200, {"rows": []})

        with pytest.raises(BackendError):
            self.client.read_all("site_visits")

    def test_count_all(self):
        """Test counting rows through the Content-Range header."""
        self.http.request.return_value = make_response(200, headers={"Content-Range": "0-24/42"})

        assert self.client.count_all("searches") == 42
        args, kwargs = self.last_call()
        assert args == ("HEAD", "https://project.example.co/rest/v1/searches")
        assert kwargs["headers"]["Prefer"] == "count=exact"

    def test_count_all_empty_table(self):
        """Test counting an empty table."""
        self.http.request.return_value = make_response(200, headers={"Content-Range": "*/0"})
        assert self.client.count_all("searches") == 0


class TestContentRange:
    """Test Content-Range parsing."""

    @pytest.mark.parametrize("value", [None, "", "0-24", "0-24/*"])
    def test_unusable_values(self, value):
        with pytest.raises(BackendError):
            _parse_content_range(value)


class TestAuthSession:
    """Test the AuthSession model."""

    def test_expiry(self):
        fresh = AuthSession(access_token="a", expires_at=int(time.time()) + 3600)
        stale = AuthSession(access_token="a", expires_at=int(time.time()) - 1)
        unknown = AuthSession(access_token="a")

        assert fresh.is_expired() is False
        assert stale.is_expired() is True
        assert unknown.is_expired() is False

    def test_expires_at_preferred_over_expires_in(self):
        session = AuthSession.from_token_response({"access_token": "a", "expires_at": 123, "expires_in": 3600})
        assert session.expires_at == 123
