"""Static configuration snippets behind the get_kay_config tool."""

import copy
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping

from ..constants import ConfigComponent, CONFIG_COMPONENT_NAMES
from ..models import CatalogMiss, CatalogResult, Envelope

logger = logging.getLogger(__name__)


CONFIG_CATALOG: Mapping[ConfigComponent, Dict[str, Any]] = MappingProxyType({
    ConfigComponent.CRON_SCHEDULE: {
        "description": "KAY's cron automation schedule",
        "vps_crons": [
            {"schedule": "*/15 * * * *", "script": "sync-to-github.sh", "description": "Git auto-sync"},
            {"schedule": "0 2 * * 1-6", "script": "health-check.sh", "description": "Health check (Mon-Sat)"},
            {"schedule": "0 2 * * 0", "script": "security-audit.sh", "description": "Security audit (Sunday)"},
            {"schedule": "0 3 * * *", "script": "rag-reindex.sh", "description": "RAG reindex (daily)"},
            {"schedule": "0 4 * * *", "script": "extract-missed-learnings.sh", "description": "Extract learnings (daily)"},
            {"schedule": "0 5 * * 0", "script": "memory-maintenance.sh", "description": "Memory maintenance (Sunday)"},
            {"schedule": "*/15 8-19 * * 1-5", "script": "meeting-check.sh", "description": "Meeting check (weekdays)"},
        ],
        "railway_crons": [
            {"schedule": "*/10 * * * *", "script": "cron-sync.ts", "description": "Full sync cycle"},
        ],
        "telegram_scheduler": [
            {"time": "8:00 AM", "type": "morning_summary"},
            {"time": "9:00 AM", "type": "overdue_tasks"},
            {"time": "2:00 PM", "type": "high_priority_reminder"},
            {"interval": "every minute", "type": "meeting_reminders"},
        ],
    },

    ConfigComponent.SYNC_CONFIGURATION: {
        "description": "KAY's sync configuration",
        "notion_sync": {
            "interval": "10 minutes",
            "databases": 11,
            "conflict_resolution": "last-write-wins",
            "retry_on_failure": True,
        },
        "google_calendar": {
            "sync_direction": "bidirectional",
            "interval": "10 minutes",
        },
        "git_auto_sync": {
            "interval": "15 minutes",
            "branch": "main",
            "auto_push": True,
        },
    },

    ConfigComponent.TELEGRAM_BOT: {
        "description": "KAY's Telegram bot configuration",
        "deployment": "VPS",
        "features": [
            "Natural language task management",
            "Voice transcription",
            "Image analysis",
            "File processing",
            "Scheduled notifications",
            "Real-time inbox watching",
        ],
        "commands": ["/help", "/clear", "/tasks", "/changes", "/costs", "/feedback", "/analyze", "/logs"],
    },

    ConfigComponent.FILE_PROCESSING: {
        "description": "KAY's file processing configuration",
        "pipeline_stages": [
            "1. Scan inbox",
            "2. Extract text (Dockling)",
            "3. Classify (LLM)",
            "4. Move to PARA folder",
            "5. Chunk",
            "6. Generate embeddings",
        ],
        "para_structure": ["Projects", "Areas", "Resources", "Archive"],
        "classification_threshold": 0.7,
        "embedding_model": "text-embedding-3-small",
    },

    ConfigComponent.INTEGRATIONS: {
        "description": "KAY's external integrations",
        "services": [
            {"name": "Notion", "purpose": "11 databases, bidirectional sync"},
            {"name": "Google Calendar", "purpose": "Event sync"},
            {"name": "Gmail", "purpose": "Email classification"},
            {"name": "Telegram", "purpose": "Bot interface"},
            {"name": "OpenRouter", "purpose": "LLM access (59 models)"},
            {"name": "Modal", "purpose": "Dockling for file parsing"},
            {"name": "Neon", "purpose": "PostgreSQL database"},
            {"name": "Railway", "purpose": "Sync service + LibreChat"},
        ],
    },
})


def lookup_config(component_name: str) -> CatalogResult:
    """Return the configuration snippet for ``component_name``."""
    try:
        component = ConfigComponent(component_name)
    except ValueError:
        logger.warning(f"Rejected unknown config component: {component_name!r}")
        return CatalogMiss(
            error=f"Unknown component: {component_name}",
            available=list(CONFIG_COMPONENT_NAMES),
        )

    # Deep copy so callers never share the catalog's nested lists
    return Envelope(**copy.deepcopy(CONFIG_CATALOG[component]))
