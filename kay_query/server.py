"""Startup entry point for the KAY Query MCP Server."""

import json
import logging
import sys

from .config import config_manager
from .error_handling import KayQueryError, create_error_response
from .main import mcp, initialize_server, cleanup_server
from .utils import setup_logging
from . import __version__

logger = logging.getLogger(__name__)


def main():
    """Start the MCP server on stdio."""
    config = config_manager.get_server_config()
    setup_logging(config.log_level, structured=config.structured_logging)

    logger.info(f"Starting KAY Query MCP Server v{__version__}...")
    logger.info("Available tools:")
    logger.info("  - query_kay_system: Live queries against KAY's database")
    logger.info("  - get_kay_config: Cron, sync, bot, file pipeline and integration settings")
    logger.info("  - get_memory_topics: List MEMORY learning topics")

    try:
        initialize_server(config)
    except KayQueryError as e:
        response = create_error_response(e.message, e.error_type, e.details)
        logger.error(f"Startup failed: {json.dumps(response)}")
        sys.exit(1)

    try:
        logger.info("KAY Query MCP Server (Direct Access) running")
        mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        logger.info("Cleaning up server resources...")
        cleanup_server()


if __name__ == "__main__":
    main()
