"""KAY Query - read-only MCP gateway into KAY's live system state."""

__version__ = "2.0.0"
__author__ = "KAY Contributors"
__description__ = "Read-only MCP tools for querying KAY's sync history, tasks, files and configuration"

# Export main components for easier imports
from .database_manager import DatabaseManager
from .config import config_manager
from .constants import SERVER_NAME, QueryEntity, ConfigComponent

__all__ = [
    "DatabaseManager",
    "config_manager",
    "SERVER_NAME",
    "QueryEntity",
    "ConfigComponent",
    "__version__",
    "__description__",
]
