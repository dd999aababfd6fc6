"""
Factory for creating session gate module.
"""
from backend_service.client import HostedBackendClient
from config_manager import DashboardConfig
from app.session_context.services import SessionContextService
from .services import SessionGateService
from .routes import create_session_gate_routes


def create_session_gate_module(
    backend_client: HostedBackendClient,
    session_context_service: SessionContextService,
    dashboard_config: DashboardConfig,
    default_login_email: str = ""
) -> dict:
    """Create session gate module with service and routes.

    Args:
        backend_client: Hosted backend client for sign-in and profile reads
        session_context_service: Provides the per-request session context
        dashboard_config: Dashboard settings (admin role, profiles table)
        default_login_email: Email pre-filled in the login form

    Returns:
        Dictionary containing the service and blueprint
    """
    gate_service = SessionGateService(
        backend_client=backend_client,
        session_context_service=session_context_service,
        dashboard_config=dashboard_config,
        default_login_email=default_login_email
    )

    blueprint = create_session_gate_routes(gate_service)

    return {
        "service": gate_service,
        "blueprint": blueprint
    }
