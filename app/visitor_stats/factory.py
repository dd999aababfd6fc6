"""
Factory for creating visitor stats module.
"""
from backend_service.client import HostedBackendClient
from config_manager import DashboardConfig
from app.session_context.services import SessionContextService
from .services import VisitorStatsService
from .routes import create_visitor_stats_blueprint


def create_visitor_stats_module(
    backend_client: HostedBackendClient,
    session_context_service: SessionContextService,
    dashboard_config: DashboardConfig
) -> dict:
    """Create visitor stats module with service and routes.

    Args:
        backend_client: Hosted backend client for the row API
        session_context_service: Provides the per-request session context
        dashboard_config: Table names and bucket settings

    Returns:
        Dictionary containing the service and blueprint
    """
    visitor_stats_service = VisitorStatsService(
        backend_client=backend_client,
        session_context_service=session_context_service,
        dashboard_config=dashboard_config
    )

    blueprint = create_visitor_stats_blueprint(visitor_stats_service)

    return {
        "service": visitor_stats_service,
        "blueprint": blueprint
    }
