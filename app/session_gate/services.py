"""
Session gate services for sign-in, admin role checks and sign-out.
"""
import logging
from typing import Optional

from pydantic import ValidationError

from backend_service.client import HostedBackendClient
from backend_service.errors import AuthError, BackendError
from backend_service.models import AuthSession, Profile
from config_manager import DashboardConfig
from app.session_context.context import SessionContext
from app.session_context.services import SessionContextService
from .models import GateOutcome, GateResult, Notice

logger = logging.getLogger(__name__)


class SessionGate:
    """Admits a sign-in only when the identity's profile carries the admin role.

    One gate serves one sign-in attempt; ``loading`` is True while the
    attempt is in flight and cleared on every exit path, so it can only be
    observed from inside ``login`` (for example by a backend callback).
    """

    def __init__(self, backend_client: HostedBackendClient, context: SessionContext,
                 dashboard_config: DashboardConfig):
        self.backend_client = backend_client
        self.context = context
        self.dashboard_config = dashboard_config
        self.loading = False

    def login(self, email: str, password: str) -> GateResult:
        """Sign in and check the admin role."""
        self.loading = True
        auth_session = None
        try:
            try:
                auth_session = self.backend_client.sign_in(email, password)
            except AuthError as e:
                logger.info("Sign-in rejected for %s: %s", email, e.message)
                return GateResult(GateOutcome.INVALID_CREDENTIALS,
                                  Notice.error("Sign-in failed", e.message))

            if auth_session.user is None:
                self._sign_out(auth_session)
                logger.warning("Sign-in for %s returned no identity", email)
                return GateResult(GateOutcome.IDENTITY_MISSING,
                                  Notice.error("Error", "User not found"))

            profile = self._read_profile(auth_session)
            if profile is None:
                self._sign_out(auth_session)
                logger.warning("No profile for identity %s", auth_session.user.id)
                return GateResult(GateOutcome.PROFILE_NOT_FOUND,
                                  Notice.error("Access denied", "Profile not found"))

            if profile.role != self.dashboard_config.admin_role:
                self._sign_out(auth_session)
                logger.warning("Identity %s has role %r, access denied",
                               auth_session.user.id, profile.role)
                return GateResult(GateOutcome.NOT_ADMIN,
                                  Notice.error("Access denied", "Only administrators can sign in"))

            self.context.set_session(auth_session)
            logger.info("Administrator %s signed in", auth_session.user.email or auth_session.user.id)
            return GateResult(GateOutcome.ADMITTED,
                              Notice("Signed in", "Welcome, administrator"))
        except Exception:
            logger.exception("Unexpected error during sign-in for %s", email)
            if auth_session is not None and self.context.session is not auth_session:
                self._sign_out(auth_session)
            return GateResult(GateOutcome.UNEXPECTED,
                              Notice.error("Error", "An error occurred"))
        finally:
            self.loading = False

    def _read_profile(self, auth_session: AuthSession) -> Optional[Profile]:
        try:
            row = self.backend_client.read_one(
                self.dashboard_config.profiles_table,
                {"id": auth_session.user.id},
                select="role",
                access_token=auth_session.access_token,
            )
        except BackendError as e:
            logger.warning("Profile read failed: %s", e.message)
            return None
        if row is None:
            return None
        try:
            return Profile.model_validate(row)
        except ValidationError as e:
            logger.warning("Unreadable profile row for identity %s: %s", auth_session.user.id, e)
            return None

    def _sign_out(self, auth_session: AuthSession) -> None:
        """Undo a half-authorized session on the backend."""
        try:
            self.backend_client.sign_out(auth_session.access_token)
        except BackendError as e:
            logger.warning("Sign-out after rejection failed: %s", e.message)


class SessionGateService:
    """Service wiring the gate to the per-request session context."""

    def __init__(self, backend_client: HostedBackendClient,
                 session_context_service: SessionContextService,
                 dashboard_config: DashboardConfig,
                 default_login_email: str = ""):
        self.backend_client = backend_client
        self.session_context_service = session_context_service
        self.dashboard_config = dashboard_config
        self.default_login_email = default_login_email

    def get_context(self) -> SessionContext:
        """Get the session context of the current request."""
        return self.session_context_service.get_context()

    def create_gate(self) -> SessionGate:
        """Create a gate bound to the current request's session context."""
        return SessionGate(self.backend_client, self.get_context(), self.dashboard_config)

    def logout(self) -> None:
        """Sign out on the backend and drop the local session.

        The local session is cleared even when the backend call fails.
        """
        context = self.get_context()
        auth_session = context.session
        if auth_session is not None:
            try:
                self.backend_client.sign_out(auth_session.access_token)
            except BackendError as e:
                logger.warning("Backend sign-out failed: %s", e.message)
        context.clear()
