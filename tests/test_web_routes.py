"""
Web integration tests for the login page, the dashboard and the JSON API.
"""
import json
import os
from unittest.mock import MagicMock, patch

import pytest

from app.main import create_app
from backend_service.errors import AuthError, SessionExpiredError
from backend_service.models import AuthSession, Identity
from config_manager import ConfigManager


VISIT_ROWS = [
    {"id": 3, "created_at": "2025-03-02T18:00:00+00:00"},
    {"id": 2, "created_at": "2025-03-02T09:00:00+00:00"},
    {"id": 1, "created_at": "2025-03-01T12:00:00+00:00"},
]


def make_auth_session():
    return AuthSession(
        access_token="access-1",
        refresh_token="refresh-1",
        user=Identity(id="user-1", email="admin@example.com"),
    )


class TestDashboardRoutes:
    """Exercise the routes through the Flask test client."""

    @pytest.fixture(autouse=True)
    def setup_app(self, tmp_path):
        """Set up the app with a mocked backend."""
        config_file = tmp_path / "dashboard_config.json"
        config_file.write_text(json.dumps({
            "app": {"secret_key": "test-secret", "default_login_email": "contact@example.com"},
            "dashboard": {"display_timezone": "UTC"}
        }))
        with patch.dict(os.environ, {}, clear=True):
            config_manager = ConfigManager(str(config_file))

        self.backend_client = MagicMock()
        self.backend_client.sign_in.return_value = make_auth_session()
        self.backend_client.read_one.return_value = {"role": "admin"}
        self.backend_client.read_all.return_value = VISIT_ROWS
        self.backend_client.count_all.return_value = 42

        self.app = create_app(config_manager=config_manager, backend_client=self.backend_client)
        self.app.config["TESTING"] = True
        self.client = self.app.test_client()

    def login(self, email="admin@example.com", password="pw"):
        return self.client.post("/auth", data={"email": email, "password": password})

    def test_health(self):
        response = self.client.get("/api/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}

    def test_base_css(self):
        response = self.client.get("/assets/base.css")
        assert response.status_code == 200
        assert response.mimetype == "text/css"

    def test_dashboard_requires_session(self):
        """Test that the dashboard redirects to the gate without a session."""
        response = self.client.get("/")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/auth")
        self.backend_client.read_all.assert_not_called()

    def test_api_requires_session(self):
        response = self.client.get("/api/stats")

        assert response.status_code == 401
        assert response.get_json() == {"error": "not-authenticated"}

    def test_login_page(self):
        response = self.client.get("/auth")

        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert 'name="password"' in body
        assert 'value="contact@example.com"' in body

    def test_login_missing_fields(self):
        response = self.client.post("/auth", data={"email": "admin@example.com", "password": ""})

        assert response.status_code == 400
        assert "Email and password are required" in response.get_data(as_text=True)
        self.backend_client.sign_in.assert_not_called()

    def test_login_invalid_credentials(self):
        self.backend_client.sign_in.side_effect = AuthError("Invalid login credentials", status_code=400)

        response = self.login(password="wrong")

        assert response.status_code == 401
        assert "Invalid login credentials" in response.get_data(as_text=True)
        self.backend_client.read_one.assert_not_called()
        self.backend_client.sign_out.assert_not_called()
        assert self.client.get("/").status_code == 302

    def test_login_not_admin(self):
        self.backend_client.read_one.return_value = {"role": "user"}

        response = self.login()

        assert response.status_code == 403
        assert "Only administrators can sign in" in response.get_data(as_text=True)
        self.backend_client.sign_out.assert_called_once_with("access-1")
        assert self.client.get("/").status_code == 302

    def test_login_profile_not_found(self):
        self.backend_client.read_one.return_value = None

        response = self.login()

        assert response.status_code == 403
        assert "Profile not found" in response.get_data(as_text=True)
        self.backend_client.sign_out.assert_called_once_with("access-1")

    def test_admin_login_and_dashboard(self):
        """Test the full admitted path down to the rendered dashboard."""
        response = self.login()

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/")
        self.backend_client.sign_out.assert_not_called()

        response = self.client.get("/")
        body = response.get_data(as_text=True)

        assert response.status_code == 200
        assert "Welcome admin@example.com" in body
        assert "Welcome, administrator" in body
        assert '<p class="figure" id="total-searches">42</p>' in body
        assert '<p class="figure" id="total-visits">3</p>' in body
        assert body.index("01/03/2025") < body.index("02/03/2025")
        self.backend_client.read_all.assert_called_with(
            "site_visits", order_by="created_at", descending=True, access_token="access-1"
        )

    def test_api_stats(self):
        self.login()

        response = self.client.get("/api/stats")

        assert response.status_code == 200
        assert response.get_json() == {
            "buckets": [
                {"date": "01/03/2025", "count": 1},
                {"date": "02/03/2025", "count": 2},
            ],
            "total_visits": 3,
            "total_searches": 42,
            "error": None
        }

    def test_expired_token_redirects_to_gate(self):
        self.login()
        self.backend_client.count_all.side_effect = RuntimeError("unused")
        self.backend_client.read_all.side_effect = SessionExpiredError("JWT expired", status_code=401)

        response = self.client.get("/")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/auth")
        # The session was dropped with the expired token
        assert self.client.get("/").status_code == 302

    def test_auth_page_redirects_when_signed_in(self):
        self.login()

        response = self.client.get("/auth")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/")

    def test_logout(self):
        self.login()

        response = self.client.post("/logout")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/auth")
        self.backend_client.sign_out.assert_called_once_with("access-1")
        assert self.client.get("/").status_code == 302
