"""
Stats View

Lifecycle of the stats dashboard for one request: mount checks the session,
subscribes to session changes and loads statistics; unmount releases the
subscription so later notifications are ignored.
"""

import logging
from typing import Optional

from backend_service.models import AuthSession, Identity
from app.session_context.context import SessionContext, Subscription
from .models import StatsSnapshot

logger = logging.getLogger(__name__)


class StatsView:
    """Stats dashboard state owned by a single request."""

    def __init__(self, context: SessionContext, stats_service):
        self.context = context
        self.stats_service = stats_service
        self.identity: Optional[Identity] = None
        self.snapshot = StatsSnapshot()
        self.redirect_to_gate = False
        self.loading = True
        self.alive = False
        self._subscription: Optional[Subscription] = None

    def mount(self) -> "StatsView":
        """Check the session and load statistics, or ask for the gate."""
        self.alive = True
        self._subscription = self.context.subscribe(self._on_session_change)

        try:
            auth_session = self.context.session
            if auth_session is None:
                self.redirect_to_gate = True
                return self

            self.identity = auth_session.user
            self.stats_service.load_stats(self.context, self.snapshot)
            return self
        finally:
            self.loading = False

    def unmount(self) -> None:
        """Release the session subscription."""
        self.alive = False
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None

    def _on_session_change(self, auth_session: Optional[AuthSession]) -> None:
        if not self.alive:
            return
        if auth_session is None:
            logger.debug("Session ended while the stats view was mounted")
            self.redirect_to_gate = True
        else:
            self.identity = auth_session.user

    def __enter__(self) -> "StatsView":
        return self.mount()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.unmount()
