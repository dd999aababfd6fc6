"""
Session Context Module

Per-request session state with subscribe/release for session changes.
"""

from .context import SessionContext, Subscription
from .factory import create_session_context_module

__all__ = ["SessionContext", "Subscription", "create_session_context_module"]
