import logging
from pathlib import Path
from typing import Optional

# Import configuration management
import sys
sys.path.append(str(Path(__file__).parent.parent))
from config_manager import ConfigManager

from flask import Flask, Response, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from backend_service.client import HostedBackendClient
from app.session_context.factory import create_session_context_module
from app.session_gate.factory import create_session_gate_module
from app.visitor_stats.factory import create_visitor_stats_module

logger = logging.getLogger(__name__)

UI_DIR = Path(__file__).parent.parent / "ui"


def create_app(config_manager: Optional[ConfigManager] = None,
               backend_client: Optional[HostedBackendClient] = None) -> Flask:
    """Create the dashboard Flask application.

    Args:
        config_manager: Configuration source (loads ``dashboard_config.json`` by default)
        backend_client: Hosted backend client (built from the backend config by default)

    Returns:
        Configured Flask application
    """
    app = Flask(__name__, template_folder=str(UI_DIR), static_folder=None)
    app.wsgi_app = ProxyFix(
        app.wsgi_app,
        x_proto=1,      # trust 1 hop for X-Forwarded-Proto
        x_host=1,       # trust 1 hop for X-Forwarded-Host
        x_prefix=1)     # trust 1 hop for X-Forwarded-Prefix

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    backend_config = config_manager.get_backend_config()
    dashboard_config = config_manager.get_dashboard_config()

    app.secret_key = app_config.secret_key
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"

    if backend_client is None:
        backend_client = HostedBackendClient(
            base_url=backend_config.url,
            api_key=backend_config.api_key,
            timeout=backend_config.timeout
        )

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    session_context_module = create_session_context_module(backend_client)

    session_gate_module = create_session_gate_module(
        backend_client=backend_client,
        session_context_service=session_context_module["service"],
        dashboard_config=dashboard_config,
        default_login_email=app_config.default_login_email
    )

    visitor_stats_module = create_visitor_stats_module(
        backend_client=backend_client,
        session_context_service=session_context_module["service"],
        dashboard_config=dashboard_config
    )

    app.register_blueprint(session_gate_module["blueprint"])
    app.register_blueprint(visitor_stats_module["blueprint"])

    app.extensions["session_gate"] = session_gate_module["service"]
    app.extensions["visitor_stats"] = visitor_stats_module["service"]

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.get("/assets/base.css")
    def base_css():
        """Serve base.css with cache control headers."""
        response = Response((UI_DIR / "base.css").read_text(encoding="utf-8"), mimetype="text/css")
        response.headers['Cache-Control'] = 'public, max-age=31536000, must-revalidate'
        return response

    @app.get("/api/health")
    def health_check():
        """Health check endpoint."""
        return jsonify({"status": "ok"})

    return app


app = create_app()
