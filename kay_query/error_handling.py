"""Centralized error types and response helpers."""

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Standardized error types for consistent handling."""
    VALIDATION = "validation_error"
    CONFIGURATION = "configuration_error"
    CONNECTION = "connection_error"
    NOT_FOUND = "not_found_error"
    INTERNAL = "internal_error"


class KayQueryError(Exception):
    """Base exception class for the KAY Query MCP server."""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.INTERNAL,
                 details: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details
        self.original_error = original_error


class ConfigurationError(KayQueryError):
    """Raised when required settings (DATABASE_URL) are missing."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message, ErrorType.CONFIGURATION, details)


class ConnectionError(KayQueryError):
    """Exception for database connection errors."""

    def __init__(self, message: str, details: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorType.CONNECTION, details, original_error)


class UnknownToolError(KayQueryError):
    """Raised by the dispatcher for a tool name it does not route."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}", ErrorType.NOT_FOUND)
        self.tool_name = tool_name


def create_error_response(
    message: str,
    error_type: ErrorType,
    details: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a standardized error response.

    Args:
        message: Human-readable error message
        error_type: Type of error (from ErrorType enum)
        details: Additional error details

    Returns:
        Standardized error response dictionary
    """
    response = {
        "success": False,
        "error": message,
        "error_type": error_type.value,
        "timestamp": datetime.now().isoformat()
    }

    if details:
        response["details"] = details

    return response

