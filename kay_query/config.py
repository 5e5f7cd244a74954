"""Configuration management for the KAY Query MCP Server."""

import os
import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass
from dotenv import load_dotenv

from .constants import (
    ENV_DATABASE_URL,
    ENV_LOG_LEVEL,
    ENV_LOG_FORMAT,
    ENV_CONNECT_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_FORMAT,
    LOG_FORMATS,
    CONNECTION_TIMEOUT,
)

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    """Server configuration settings."""
    database_url: Optional[str]
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    connect_timeout: int = CONNECTION_TIMEOUT

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.log_level = self.log_level.upper()
        if self.log_format not in LOG_FORMATS:
            logger.warning(f"Unknown LOG_FORMAT '{self.log_format}', falling back to '{DEFAULT_LOG_FORMAT}'")
            self.log_format = DEFAULT_LOG_FORMAT
        if self.connect_timeout <= 0:
            self.connect_timeout = CONNECTION_TIMEOUT

    @property
    def structured_logging(self) -> bool:
        return self.log_format == "json"


def _read_timeout() -> int:
    raw = os.getenv(ENV_CONNECT_TIMEOUT)
    if not raw:
        return CONNECTION_TIMEOUT
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {ENV_CONNECT_TIMEOUT}={raw!r}")
        return CONNECTION_TIMEOUT


class ConfigManager:
    """Manages application configuration."""

    def __init__(self):
        """Initialize configuration manager."""
        load_dotenv()
        self._server_config: Optional[ServerConfig] = None

    def get_server_config(self) -> ServerConfig:
        """Get server configuration."""
        if self._server_config is None:
            self._server_config = ServerConfig(
                database_url=os.getenv(ENV_DATABASE_URL) or None,
                log_level=os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
                log_format=os.getenv(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT).lower(),
                connect_timeout=_read_timeout(),
            )
            logger.info("Server configuration loaded")
        return self._server_config

    def validate_db_config(self, config: Optional[ServerConfig] = None) -> Dict[str, Any]:
        """Check that a database connection string is available.

        Checks the given configuration, or the loaded one when none is passed.
        """
        config = config or self.get_server_config()
        missing_params = [] if config.database_url else [ENV_DATABASE_URL]

        return {
            "valid": len(missing_params) == 0,
            "missing_params": missing_params,
        }


# Global configuration manager instance
config_manager = ConfigManager()
