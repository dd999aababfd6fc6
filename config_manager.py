"""
Configuration management for the admin dashboard.
Handles loading, validating, and providing access to application settings.
"""

import copy
import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    secret_key: str
    default_login_email: str


@dataclass
class BackendConfig:
    """Hosted backend connection settings."""
    url: str
    api_key: str
    timeout: float


@dataclass
class DashboardConfig:
    """Stats dashboard settings."""
    admin_role: str
    profiles_table: str
    visits_table: str
    searches_table: str
    max_days: int
    date_format: str
    display_timezone: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "dashboard_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        # Start with default config
        self._config = self._get_default_config()

        # Load base config from file
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 8080,
                "debug": False,
                "secret_key": "dev-secret-change-in-production",
                "default_login_email": ""
            },
            "backend": {
                "url": "http://localhost:54321",
                "api_key": "",
                "timeout": 10.0
            },
            "dashboard": {
                "admin_role": "admin",
                "profiles_table": "profiles",
                "visits_table": "site_visits",
                "searches_table": "searches",
                "max_days": 7,
                "date_format": "%d/%m/%Y",
                "display_timezone": ""
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        if os.getenv("APP_SECRET_KEY"):
            self._config["app"]["secret_key"] = os.getenv("APP_SECRET_KEY")

        if os.getenv("ADMIN_LOGIN_EMAIL"):
            self._config["app"]["default_login_email"] = os.getenv("ADMIN_LOGIN_EMAIL")

        # Backend settings
        if os.getenv("BACKEND_URL"):
            self._config["backend"]["url"] = os.getenv("BACKEND_URL")

        if os.getenv("BACKEND_API_KEY"):
            self._config["backend"]["api_key"] = os.getenv("BACKEND_API_KEY")

        if os.getenv("BACKEND_TIMEOUT"):
            self._config["backend"]["timeout"] = float(os.getenv("BACKEND_TIMEOUT"))

        # Dashboard settings
        if os.getenv("DASHBOARD_MAX_DAYS"):
            self._config["dashboard"]["max_days"] = int(os.getenv("DASHBOARD_MAX_DAYS"))

        if os.getenv("DASHBOARD_TIMEZONE"):
            self._config["dashboard"]["display_timezone"] = os.getenv("DASHBOARD_TIMEZONE")

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            secret_key=app_config["secret_key"],
            default_login_email=app_config["default_login_email"]
        )

    def get_backend_config(self) -> BackendConfig:
        """Get hosted backend configuration."""
        backend_config = self._config["backend"]
        return BackendConfig(
            url=backend_config["url"].rstrip("/"),
            api_key=backend_config["api_key"],
            timeout=float(backend_config["timeout"])
        )

    def get_dashboard_config(self) -> DashboardConfig:
        """Get dashboard configuration."""
        dashboard_config = self._config["dashboard"]
        return DashboardConfig(
            admin_role=dashboard_config["admin_role"],
            profiles_table=dashboard_config["profiles_table"],
            visits_table=dashboard_config["visits_table"],
            searches_table=dashboard_config["searches_table"],
            max_days=int(dashboard_config["max_days"]),
            date_format=dashboard_config["date_format"],
            display_timezone=dashboard_config["display_timezone"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return copy.deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_backend_config() -> BackendConfig:
    """Get hosted backend configuration."""
    return config_manager.get_backend_config()


def get_dashboard_config() -> DashboardConfig:
    """Get dashboard configuration."""
    return config_manager.get_dashboard_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()
