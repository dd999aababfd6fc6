"""
Session Gate Module

Email/password sign-in restricted to identities whose profile has the admin role.
"""

from .factory import create_session_gate_module

__all__ = ["create_session_gate_module"]
