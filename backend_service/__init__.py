# Hosted backend service package: HTTP client, record models and logging

from .client import HostedBackendClient, build_session
from .errors import BackendError, AuthError, SessionExpiredError
from .models import Identity, AuthSession, Profile, VisitRecord
from .logging_config import setup_logging, stop_logging

__all__ = [
    "HostedBackendClient",
    "build_session",
    "BackendError",
    "AuthError",
    "SessionExpiredError",
    "Identity",
    "AuthSession",
    "Profile",
    "VisitRecord",
    "setup_logging",
    "stop_logging",
]
