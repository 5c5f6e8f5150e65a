"""Configuration management for the MindsDB client.

This module handles loading configuration from YAML files and environment variables.
Environment variables take precedence over YAML configuration.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from dotenv import load_dotenv


_TRUTHY = {"1", "true", "yes", "on"}


class Settings:
    """Singleton configuration manager for the client."""

    _instance: Optional['Settings'] = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        """Ensure only one instance of Settings exists."""
        if cls._instance is None:
            cls._instance = super(Settings, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Initialize configuration by loading from YAML and environment."""
        # Load environment variables from .env file if it exists
        load_dotenv()

        config_path = Path(__file__).parent / "config.yaml"
        if config_path.exists():
            with open(config_path, 'r') as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {}

        self._apply_env_overrides()
        self._validate_config()

    def _apply_env_overrides(self) -> None:
        """Override configuration with environment variables."""
        if host := os.getenv("MINDSDB_HOST"):
            self._config.setdefault("connection", {})["host"] = host
        if user := os.getenv("MINDSDB_USER"):
            self._config.setdefault("connection", {})["user"] = user
        if password := os.getenv("MINDSDB_PASSWORD"):
            self._config.setdefault("connection", {})["password"] = password
        if managed := os.getenv("MINDSDB_MANAGED"):
            self._config.setdefault("connection", {})["managed"] = (
                managed.strip().lower() in _TRUTHY
            )

        if timeout := os.getenv("MINDSDB_HTTP_TIMEOUT"):
            self._config.setdefault("http", {})["timeout"] = timeout

        if level := os.getenv("MINDSDB_LOG_LEVEL"):
            self._config.setdefault("logging", {})["level"] = level

    def _validate_config(self) -> None:
        """Validate and normalize configuration values."""
        timeout = self.get("http.timeout", 60)
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ValueError(
                f"Invalid http.timeout: {timeout!r} (env: MINDSDB_HTTP_TIMEOUT). "
                "Expected a number of seconds."
            )
        if timeout <= 0:
            raise ValueError(
                f"Invalid http.timeout: {timeout} (env: MINDSDB_HTTP_TIMEOUT). "
                "Timeout must be positive."
            )
        self.set("http.timeout", timeout)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'connection.host').

        Args:
            key_path: Dot-separated path to configuration value
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section.

        Args:
            section: Top-level section name (e.g., 'connection', 'http')

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to configuration value
            value: Value to set
        """
        keys = key_path.split('.')
        config = self._config

        for key in keys[:-1]:
            config = config.setdefault(key, {})

        config[keys[-1]] = value

    def reload(self) -> None:
        """Reload configuration from file and environment."""
        self._initialize()

    @property
    def connection(self) -> Dict[str, Any]:
        """Get connection configuration."""
        return self.get_section("connection")

    @property
    def http(self) -> Dict[str, Any]:
        """Get HTTP transport configuration."""
        return self.get_section("http")

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get_section("logging")


# Global settings instance
settings = Settings()
