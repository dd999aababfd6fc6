#!/usr/bin/env python3
"""
Simple runner script for the dashboard.
This script ensures the correct Python path is set and runs the app.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from app.main import app
from backend_service.logging_config import setup_logging
from config_manager import get_app_config, get_backend_config

logger = logging.getLogger("run_app")


def main():
    parser = argparse.ArgumentParser(description="Admin stats dashboard")
    parser.add_argument("--port", type=int, help="Port to run the server on")
    parser.add_argument("--host", type=str, help="Host to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    app_config = get_app_config()
    if args.port:
        app_config.port = args.port
    if args.host:
        app_config.host = args.host
    if args.debug:
        app_config.debug = True

    setup_logging(app_config.debug)
    logger.info("Starting dashboard from %s", current_dir)
    logger.info("Hosted backend: %s", get_backend_config().url)

    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug
    )


if __name__ == "__main__":
    main()
