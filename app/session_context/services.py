"""
Session context services: build a SessionContext per request from the signed
Flask session cookie and write changes back into it.
"""
import logging
from typing import Optional

from flask import g, session
from pydantic import ValidationError

from backend_service.client import HostedBackendClient
from backend_service.errors import BackendError
from backend_service.models import AuthSession
from .context import SessionContext

logger = logging.getLogger(__name__)

SESSION_COOKIE_KEY = "auth_session"


class SessionContextService:
    """Service for loading and persisting the per-request session context."""

    def __init__(self, backend_client: HostedBackendClient):
        self.backend_client = backend_client

    def get_context(self) -> SessionContext:
        """Get the session context of the current request, creating it once."""
        context = g.get("session_context")
        if context is None:
            context = self.load_context()
            g.session_context = context
        return context

    def load_context(self) -> SessionContext:
        """Build a session context from the cookie, refreshing an expired token."""
        auth_session = self._read_cookie()
        refreshed = False

        if auth_session is not None and auth_session.is_expired():
            auth_session = self._refresh(auth_session)
            refreshed = True

        context = SessionContext(auth_session)
        context.subscribe(self._persist)
        if refreshed:
            self._persist(auth_session)
        return context

    def _read_cookie(self) -> Optional[AuthSession]:
        data = session.get(SESSION_COOKIE_KEY)
        if not data:
            return None
        try:
            return AuthSession.model_validate(data)
        except ValidationError:
            logger.warning("Discarding malformed session cookie")
            return None

    def _refresh(self, auth_session: AuthSession) -> Optional[AuthSession]:
        if not auth_session.refresh_token:
            logger.info("Access token expired and no refresh token is held")
            return None
        try:
            refreshed = self.backend_client.refresh_session(auth_session.refresh_token)
        except BackendError as e:
            logger.info("Session refresh failed: %s", e.message)
            return None
        if refreshed.user is None:
            refreshed.user = auth_session.user
        return refreshed

    def _persist(self, auth_session: Optional[AuthSession]) -> None:
        if auth_session is None:
            session.pop(SESSION_COOKIE_KEY, None)
        else:
            session[SESSION_COOKIE_KEY] = auth_session.model_dump(mode="json")
