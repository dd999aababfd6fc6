"""
client.py - Hosted backend client

This module talks to the hosted backend over HTTP: the auth API for signing in
and out, and the row API for reading profiles, visits and search counts.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import AuthError, BackendError, SessionExpiredError
from .models import AuthSession

_LOG = logging.getLogger("backend_client")

# Sign-out answers meaning the session is already gone on the backend side
_SIGNED_OUT_STATUSES = (401, 403, 404)


def build_session() -> requests.Session:
    """Build a requests session for the backend APIs."""
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


def _error_message(resp: requests.Response) -> str:
    """Extract the human readable message from an error answer."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip() or f"HTTP {resp.status_code}"

    if isinstance(data, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {resp.status_code}"


def _parse_content_range(value: Optional[str]) -> int:
    """Return the total from a ``Content-Range`` header such as ``0-9/42``."""
    if not value or "/" not in value:
        raise BackendError(f"Missing row count in Content-Range: {value!r}")
    total = value.rsplit("/", 1)[1]
    if not total.isdigit():
        raise BackendError(f"Unknown row count in Content-Range: {value!r}")
    return int(total)


class HostedBackendClient:
    """Client for the hosted backend's auth and row APIs."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or build_session()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, access_token: Optional[str] = None,
                 params: Optional[Dict[str, Any]] = None,
                 json: Optional[Dict[str, Any]] = None,
                 headers: Optional[Dict[str, str]] = None) -> requests.Response:
        request_headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
        }
        if headers:
            request_headers.update(headers)

        url = f"{self.base_url}{path}"
        _LOG.debug("%s %s params=%s", method, path, params)
        try:
            return self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=request_headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendError(f"Backend request failed: {e}") from e

    def _check_rows_response(self, resp: requests.Response, table: str) -> None:
        if resp.status_code == 401:
            raise SessionExpiredError(_error_message(resp), status_code=401)
        if resp.status_code >= 400:
            raise BackendError(
                f"Reading '{table}' failed: {_error_message(resp)}",
                status_code=resp.status_code,
            )

    # ------------------------------------------------------------------
    # Auth API
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password.

        Raises:
            AuthError: The credentials were rejected.
            BackendError: The backend could not be reached or answered garbage.
        """
        resp = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if resp.status_code >= 400:
            raise AuthError(_error_message(resp), status_code=resp.status_code)
        return self._session_from(resp)

    def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""
        resp = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        if resp.status_code >= 400:
            raise AuthError(_error_message(resp), status_code=resp.status_code)
        return self._session_from(resp)

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind *access_token*."""
        resp = self._request("POST", "/auth/v1/logout", access_token=access_token)
        if resp.status_code in _SIGNED_OUT_STATUSES:
            _LOG.debug("Session already signed out (HTTP %d)", resp.status_code)
            return
        if resp.status_code >= 400:
            raise AuthError(_error_message(resp), status_code=resp.status_code)

    def _session_from(self, resp: requests.Response) -> AuthSession:
        try:
            return AuthSession.from_token_response(resp.json())
        except (ValueError, KeyError, TypeError) as e:
            raise BackendError(f"Unexpected auth answer: {e}") from e

    # ------------------------------------------------------------------
    # Row API
    # ------------------------------------------------------------------

    def read_one(self, table: str, filters: Dict[str, Any], select: str = "*",
                 access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Read the single row matching *filters*.

        Returns None when no row matches. More than one match is an error.
        """
        params = {"select": select, "limit": 2}
        for column, value in filters.items():
            params[column] = f"eq.{value}"

        resp = self._request("GET", f"/rest/v1/{table}", access_token=access_token, params=params)
        self._check_rows_response(resp, table)
        rows = self._rows_from(resp, table)

        if not rows:
            return None
        if len(rows) > 1:
            raise BackendError(f"Expected one row in '{table}', got {len(rows)}")
        return rows[0]

    def read_all(self, table: str, order_by: Optional[str] = None, descending: bool = False,
                 select: str = "*", access_token: Optional[str] = None) -> List[Dict[str, Any]]:
        """Read every row of *table*, optionally ordered."""
        params = {"select": select}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"

        resp = self._request("GET", f"/rest/v1/{table}", access_token=access_token, params=params)
        self._check_rows_response(resp, table)
        return self._rows_from(resp, table)

    def count_all(self, table: str, access_token: Optional[str] = None) -> int:
        """Count the rows of *table* without fetching them."""
        resp = self._request(
            "HEAD",
            f"/rest/v1/{table}",
            access_token=access_token,
            params={"select": "*"},
            headers={"Prefer": "count=exact"},
        )
        self._check_rows_response(resp, table)
        return _parse_content_range(resp.headers.get("Content-Range"))

    def _rows_from(self, resp: requests.Response, table: str) -> List[Dict[str, Any]]:
        try:
            rows = resp.json()
        except ValueError as e:
            raise BackendError(f"Unexpected answer reading '{table}': {e}") from e
        if not isinstance(rows, list):
            raise BackendError(f"Unexpected answer reading '{table}': not a list")
        return rows
