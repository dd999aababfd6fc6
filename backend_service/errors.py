"""
Exceptions raised by the hosted backend client.
"""

from typing import Optional


class BackendError(Exception):
    """A request to the hosted backend failed or returned an unusable answer."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(BackendError):
    """The auth API rejected the request (bad credentials, revoked token, ...)."""


class SessionExpiredError(BackendError):
    """The row API refused the access token."""
