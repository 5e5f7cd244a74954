"""Main MCP server application using FastMCP."""

import logging
from typing import Annotated, Optional

from fastmcp import FastMCP, Context
from fastmcp.exceptions import ToolError
from pydantic import Field

from .config import ServerConfig, config_manager
from .constants import (
    SERVER_NAME,
    CONFIG_COMPONENT_NAMES,
    QUERY_ENTITY_NAMES,
    TOOL_GET_CONFIG,
    TOOL_MEMORY_TOPICS,
    TOOL_QUERY_SYSTEM,
)
from .database_manager import DatabaseManager
from .dispatcher import ToolDispatcher
from .error_handling import ConfigurationError, ConnectionError
from .models import ToolOutcome
from .utils import mask_database_url
from . import __version__

logger = logging.getLogger(__name__)

# --- MCP Server Setup ---

mcp = FastMCP(
    name=SERVER_NAME,
    version=__version__,
    instructions="""
# KAY Query - read-only window into a running PAI

KAY is a personal-automation system: Notion sync, Google Calendar, Gmail
classification, a Telegram bot and a file pipeline that sorts documents into
PARA folders. This server lets you look at the live system while you build
your own. Nothing here can write.

## Tools

1. `query_kay_system(entity=...)` - live data from KAY's database:
   recent-syncs, sync-health, sample-task, tasks-summary, files-summary,
   telegram-stats, database-schema, notion-databases, calendar-summary,
   llm-models
2. `get_kay_config(component=...)` - how KAY is set up:
   cron-schedule, sync-configuration, telegram-bot, file-processing,
   integrations
3. `get_memory_topics()` - topics of KAY's accumulated learnings. The
   markdown itself lives in the pai-blueprints repository.

Every result is JSON. Unknown entity or component names return the list of
accepted values instead of running anything.
""",
)


# --- Dependency Management ---

class ServerState:
    """Owns the database handle for the lifetime of the server process."""

    def __init__(self):
        self._db_manager: Optional[DatabaseManager] = None
        self.dispatcher = ToolDispatcher(self.get_db_manager)

    def attach(self, db_manager: DatabaseManager):
        """Install the database manager the tools will use."""
        self._db_manager = db_manager

    def get_db_manager(self) -> DatabaseManager:
        """Return the database manager acquired at startup."""
        if self._db_manager is None:
            raise ConnectionError(
                "No database connection established",
                details="The server was started without a working DATABASE_URL",
            )
        return self._db_manager

    def cleanup(self):
        """Clean up resources."""
        if self._db_manager:
            self._db_manager.disconnect()
            self._db_manager = None


# Global server state
_server_state = ServerState()


def initialize_server(config: Optional[ServerConfig] = None) -> DatabaseManager:
    """Acquire the database connection once, before serving any tool call."""
    config = config or config_manager.get_server_config()
    validation = config_manager.validate_db_config(config)
    if not validation["valid"]:
        raise ConfigurationError(
            f"{', '.join(validation['missing_params'])} is not set",
            details="Add a read-only PostgreSQL connection string to the MCP server env",
        )

    db_manager = DatabaseManager(connect_timeout=config.connect_timeout)
    if not db_manager.connect(config.database_url):
        raise ConnectionError(
            f"Could not connect to {mask_database_url(config.database_url)}",
            details="Run kay-query-diagnose to check the credentials",
        )

    _server_state.attach(db_manager)
    return db_manager


def _respond(outcome: ToolOutcome) -> str:
    """Hand text back to FastMCP, flagging failed calls as tool errors."""
    if outcome.is_error:
        raise ToolError(outcome.text)
    return outcome.text


# --- MCP Tools ---

@mcp.tool(
    name=TOOL_QUERY_SYSTEM,
    description=(
        "Query KAY's live system state. Get actual data from Oscar's running PAI - "
        "sync runs, tasks, files, Telegram usage, database stats, etc."
    ),
)
async def query_kay_system(
    ctx: Context,
    entity: Annotated[str, Field(
        description="What aspect of KAY's system to query",
        json_schema_extra={"enum": QUERY_ENTITY_NAMES},
    )],
) -> str:
    outcome = _server_state.dispatcher.handle(TOOL_QUERY_SYSTEM, {"entity": entity})
    if not outcome.is_error:
        await ctx.info(f"Live query '{entity}' completed")
    return _respond(outcome)


@mcp.tool(
    name=TOOL_GET_CONFIG,
    description=(
        "Get KAY's actual configuration - cron schedules, sync settings, integrations, "
        "file processing pipeline, etc."
    ),
)
async def get_kay_config(
    component: Annotated[str, Field(
        description="Which configuration to retrieve",
        json_schema_extra={"enum": CONFIG_COMPONENT_NAMES},
    )],
) -> str:
    return _respond(_server_state.dispatcher.handle(TOOL_GET_CONFIG, {"component": component}))


@mcp.tool(
    name=TOOL_MEMORY_TOPICS,
    description=(
        "Get list of MEMORY topics available. The actual learnings are in the GitHub repo "
        "markdown files that your Claude Code can read directly."
    ),
)
async def get_memory_topics() -> str:
    return _respond(_server_state.dispatcher.handle(TOOL_MEMORY_TOPICS, {}))


# --- Cleanup on shutdown ---

def cleanup_server():
    """Clean up server resources."""
    _server_state.cleanup()
