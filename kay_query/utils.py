"""Utility functions for the KAY Query MCP Server."""

import logging
import sys

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


def setup_logging(log_level: str = "INFO", structured: bool = False) -> logging.Logger:
    """
    Setup logging configuration for the application.

    Logs go to stderr: stdout belongs to the MCP stdio transport.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Whether to use structured logging format (JSON)

    Returns:
        Logger instance for the root logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if structured:
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)

    return root_logger


def mask_database_url(database_url: str) -> str:
    """Return the connection string with its password replaced by ****."""
    try:
        url = make_url(database_url)
    except ArgumentError:
        return "<unparseable database url>"
    return url.render_as_string(hide_password=True).replace("***", "****")

