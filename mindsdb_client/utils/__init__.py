"""Utility modules for the MindsDB client."""

from .exceptions import *
from .logger import setup_logger, logger, mask_sensitive_data
from .escape import (
    escape_identifier,
    escape_identifier_unquoted,
    escape_json,
    escape_string,
    escape_value,
)

__all__ = [
    # Exceptions
    "MindsDbError",
    "ConfigurationError",
    "AuthenticationError",
    "QueryError",
    # Logger
    "setup_logger",
    "logger",
    "mask_sensitive_data",
    # Escaping
    "escape_identifier",
    "escape_identifier_unquoted",
    "escape_json",
    "escape_string",
    "escape_value",
]
