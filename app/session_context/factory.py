"""
Factory for creating session context module.
"""
from backend_service.client import HostedBackendClient
from .services import SessionContextService


def create_session_context_module(backend_client: HostedBackendClient) -> dict:
    """Create session context module with its service.

    Args:
        backend_client: Hosted backend client used to refresh expired sessions

    Returns:
        Dictionary containing the service
    """
    session_context_service = SessionContextService(backend_client)

    return {
        "service": session_context_service
    }
