"""
Session Context

Holds the current auth session for one request and notifies subscribers when
it changes. Views receive the context explicitly instead of reaching for a
global auth client.
"""

import logging
from typing import Callable, List, Optional

from backend_service.models import AuthSession, Identity

logger = logging.getLogger(__name__)

SessionCallback = Callable[[Optional[AuthSession]], None]


class Subscription:
    """Handle returned by :meth:`SessionContext.subscribe`."""

    def __init__(self, context: "SessionContext", callback: SessionCallback):
        self._context = context
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        """Stop receiving notifications. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._context._remove(self)

    def _notify(self, session: Optional[AuthSession]) -> None:
        if self._active:
            self._callback(session)


class SessionContext:
    """Current session plus subscribe/release for session changes."""

    def __init__(self, session: Optional[AuthSession] = None):
        self._session = session
        self._subscriptions: List[Subscription] = []

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._session.user if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def set_session(self, session: Optional[AuthSession]) -> None:
        """Replace the current session and notify every live subscriber.

        The last write wins; subscribers are called in subscription order.
        """
        self._session = session
        logger.debug("Session changed (authenticated=%s)", session is not None)
        for subscription in list(self._subscriptions):
            subscription._notify(session)

    def clear(self) -> None:
        """Drop the current session."""
        self.set_session(None)

    def subscribe(self, callback: SessionCallback) -> Subscription:
        """Register *callback* for session changes."""
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
