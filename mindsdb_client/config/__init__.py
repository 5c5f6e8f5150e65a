"""Configuration module for the MindsDB client."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
