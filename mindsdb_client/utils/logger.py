"""Logging utilities for the MindsDB client."""

import logging
import re
import sys
from pathlib import Path
from typing import List, Optional
from ..config import settings


# Patterns masked before anything derived from user input is logged.
DEFAULT_SENSITIVE_PATTERNS = [
    r'(api[_-]?key["\'\s:=]+)([a-zA-Z0-9_\-]+)',
    r'(password["\'\s:=]+)([^\s"\',}]+)',
    r'(bearer\s+)([a-zA-Z0-9_\-\.]+)',
    r'(authorization["\'\s:=]+)([^\s"\']+)',
    r'(session=)([^;\s]+)',
]


def setup_logger(
    name: str,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Set up a logger with console and optional file handlers.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if level is None:
        level = settings.get("logging.level", "INFO")

    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    log_format = settings.get(
        "logging.format",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is None:
        log_file = settings.get("logging.log_file")

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def mask_sensitive_data(text: str, patterns: Optional[List[str]] = None) -> str:
    """Mask sensitive data in text for logging.

    Args:
        text: Text potentially containing sensitive data
        patterns: List of patterns to mask (e.g., API keys, passwords)

    Returns:
        Text with sensitive data masked
    """
    if not settings.get("logging.sensitive_data_masking", True):
        return text

    if patterns is None:
        patterns = DEFAULT_SENSITIVE_PATTERNS

    masked_text = text
    for pattern in patterns:
        masked_text = re.sub(
            pattern,
            r'\1***MASKED***',
            masked_text,
            flags=re.IGNORECASE,
        )

    return masked_text


# Global logger instance for the package
logger = setup_logger("mindsdb_client")
