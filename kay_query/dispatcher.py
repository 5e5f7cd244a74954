"""Routes MCP tool calls to the catalogs and contains every failure."""

import json
import logging
from typing import Any, Callable, Dict, Optional

from .constants import TOOL_QUERY_SYSTEM, TOOL_GET_CONFIG, TOOL_MEMORY_TOPICS
from .database_manager import DatabaseManager
from .error_handling import ErrorType, KayQueryError, UnknownToolError
from .models import CatalogResult, ToolOutcome
from .tools import execute_query, lookup_config, get_memory_topics

logger = logging.getLogger(__name__)


def serialize_result(payload: Dict[str, Any]) -> str:
    """Indented JSON, meant to be read in the client transcript."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


class ToolDispatcher:
    """Maps the three tool names onto their catalogs.

    ``handle`` never raises: database faults, unknown tools and bad
    arguments all come back as an error-flagged ToolOutcome.
    """

    def __init__(self, db_provider: Callable[[], DatabaseManager]):
        self._db_provider = db_provider
        self._routes: Dict[str, Callable[[Dict[str, Any]], CatalogResult]] = {
            TOOL_QUERY_SYSTEM: self._query_system,
            TOOL_GET_CONFIG: self._get_config,
            TOOL_MEMORY_TOPICS: self._memory_topics,
        }

    def _query_system(self, arguments: Dict[str, Any]) -> CatalogResult:
        return execute_query(self._db_provider(), str(arguments.get("entity", "")))

    def _get_config(self, arguments: Dict[str, Any]) -> CatalogResult:
        return lookup_config(str(arguments.get("component", "")))

    def _memory_topics(self, arguments: Dict[str, Any]) -> CatalogResult:
        return get_memory_topics()

    def handle(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolOutcome:
        """Run one tool call and return its text, or the error that stopped it."""
        try:
            route = self._routes.get(tool_name)
            if route is None:
                raise UnknownToolError(tool_name)
            result = route(arguments or {})
            return ToolOutcome.success(serialize_result(result.to_payload()))
        except Exception as e:
            error_type = e.error_type if isinstance(e, KayQueryError) else ErrorType.INTERNAL
            logger.error(f"Tool {tool_name} failed ({error_type.value}): {type(e).__name__}: {e}")
            return ToolOutcome.failure(str(e))
