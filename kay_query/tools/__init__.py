"""Catalogs served by the KAY Query tools."""

from .system import execute_query, QUERY_CATALOG
from .configuration import lookup_config, CONFIG_CATALOG
from .memory import get_memory_topics

__all__ = [
    "execute_query",
    "QUERY_CATALOG",
    "lookup_config",
    "CONFIG_CATALOG",
    "get_memory_topics",
]
