"""Constants for the KAY Query MCP Server."""

from enum import Enum


class QueryEntity(str, Enum):
    """Live queries available through query_kay_system."""
    RECENT_SYNCS = "recent-syncs"
    SYNC_HEALTH = "sync-health"
    SAMPLE_TASK = "sample-task"
    TASKS_SUMMARY = "tasks-summary"
    FILES_SUMMARY = "files-summary"
    TELEGRAM_STATS = "telegram-stats"
    DATABASE_SCHEMA = "database-schema"
    NOTION_DATABASES = "notion-databases"
    CALENDAR_SUMMARY = "calendar-summary"
    LLM_MODELS = "llm-models"


class ConfigComponent(str, Enum):
    """Configuration snippets available through get_kay_config."""
    CRON_SCHEDULE = "cron-schedule"
    SYNC_CONFIGURATION = "sync-configuration"
    TELEGRAM_BOT = "telegram-bot"
    FILE_PROCESSING = "file-processing"
    INTEGRATIONS = "integrations"


QUERY_ENTITY_NAMES = [entity.value for entity in QueryEntity]
CONFIG_COMPONENT_NAMES = [component.value for component in ConfigComponent]

# Server identity reported to MCP clients
SERVER_NAME = "kay-query"

# Tool names advertised to MCP clients
TOOL_QUERY_SYSTEM = "query_kay_system"
TOOL_GET_CONFIG = "get_kay_config"
TOOL_MEMORY_TOPICS = "get_memory_topics"
TOOL_NAMES = (TOOL_QUERY_SYSTEM, TOOL_GET_CONFIG, TOOL_MEMORY_TOPICS)

# Environment variables
ENV_DATABASE_URL = "DATABASE_URL"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FORMAT = "LOG_FORMAT"
ENV_CONNECT_TIMEOUT = "KAY_QUERY_CONNECT_TIMEOUT"

# Connection settings
APPLICATION_NAME = SERVER_NAME
CONNECTION_TIMEOUT = 10  # seconds
POOL_SIZE = 2
MAX_OVERFLOW = 3
POOL_RECYCLE = 3600

# Logging
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "text"
LOG_FORMATS = ("text", "json")

# Diagnostics
DIAGNOSTIC_TABLES = ("tasks", "files", "sync_run_history", "file_chunks")
WRITE_PROBE_TABLE = "test_write_check"
EMBEDDING_DIMENSIONS = 1536

# Reported when sync-health has no runs to divide by
SUCCESS_RATE_UNAVAILABLE = "N/A"
