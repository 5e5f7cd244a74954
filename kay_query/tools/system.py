"""Live system queries behind the query_kay_system tool.

Every entry runs one fixed, parameterless SELECT against KAY's database.
Nothing the caller sends is ever placed into SQL text: the entity name only
selects which literal statement runs.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping

from ..constants import QueryEntity, QUERY_ENTITY_NAMES, SUCCESS_RATE_UNAVAILABLE
from ..database_manager import DatabaseManager
from ..models import CatalogMiss, CatalogResult, Envelope

logger = logging.getLogger(__name__)

QueryProducer = Callable[[DatabaseManager], Envelope]


RECENT_SYNCS_SQL = """
    SELECT
      script_name,
      started_at,
      completed_at,
      status,
      records_processed,
      duration_ms,
      errors
    FROM sync_run_history
    ORDER BY started_at DESC
    LIMIT 20
"""

SYNC_HEALTH_SQL = """
    SELECT
      script_name,
      COUNT(*) AS total_runs,
      COUNT(*) FILTER (WHERE status = 'success') AS successful,
      COUNT(*) FILTER (WHERE status = 'error') AS failed,
      AVG(duration_ms)::int AS avg_duration_ms,
      MAX(started_at) AS last_run
    FROM sync_run_history
    WHERE started_at > NOW() - INTERVAL '7 days'
    GROUP BY script_name
    ORDER BY last_run DESC
"""

SAMPLE_TASK_SQL = """
    SELECT
      name,
      status,
      priority,
      due_at,
      notion_page_id,
      sql_local_last_edited_at,
      notion_last_edited_at,
      sql_updated_at
    FROM tasks
    WHERE deleted_at IS NULL
    ORDER BY sql_updated_at DESC
    LIMIT 1
"""

TASKS_SUMMARY_SQL = """
    SELECT
      status,
      COUNT(*) AS count,
      COUNT(*) FILTER (WHERE priority = 'high') AS high_priority,
      COUNT(*) FILTER (WHERE due_at < NOW()) AS overdue,
      COUNT(*) FILTER (WHERE notion_page_id IS NOT NULL) AS synced_to_notion
    FROM tasks
    WHERE deleted_at IS NULL
    GROUP BY status
"""

FILES_SUMMARY_SQL = """
    SELECT
      suggested_para_type,
      COUNT(*) AS count,
      COUNT(*) FILTER (WHERE embedding IS NOT NULL) AS embedded,
      AVG(classification_confidence)::numeric(3,2) AS avg_confidence
    FROM files
    WHERE suggested_para_type IS NOT NULL
    GROUP BY suggested_para_type
    ORDER BY count DESC
"""

TELEGRAM_STATS_SQL = """
    SELECT
      operation_type,
      COUNT(*) AS count
    FROM bot_logs
    WHERE created_at > NOW() - INTERVAL '7 days'
    GROUP BY operation_type
    ORDER BY count DESC
    LIMIT 10
"""

DATABASE_SCHEMA_SQL = """
    SELECT
      table_name,
      (SELECT COUNT(*) FROM information_schema.columns c
        WHERE c.table_schema = t.table_schema AND c.table_name = t.table_name) AS column_count,
      pg_size_pretty(pg_total_relation_size(quote_ident(table_name))) AS size
    FROM information_schema.tables t
    WHERE table_schema = 'public'
    ORDER BY pg_total_relation_size(quote_ident(table_name)) DESC
"""

NOTION_DATABASES_SQL = """
    SELECT
      'tasks' AS database,
      COUNT(*) AS total_records,
      COUNT(*) FILTER (WHERE notion_page_id IS NOT NULL) AS synced,
      COUNT(*) FILTER (WHERE sql_local_last_edited_at IS NOT NULL) AS pending_sync
    FROM tasks WHERE deleted_at IS NULL
    UNION ALL
    SELECT
      'projects' AS database,
      COUNT(*) AS total_records,
      COUNT(*) FILTER (WHERE notion_page_id IS NOT NULL) AS synced,
      COUNT(*) FILTER (WHERE sql_local_last_edited_at IS NOT NULL) AS pending_sync
    FROM projects WHERE deleted_at IS NULL
    UNION ALL
    SELECT
      'notes' AS database,
      COUNT(*) AS total_records,
      COUNT(*) FILTER (WHERE notion_page_id IS NOT NULL) AS synced,
      COUNT(*) FILTER (WHERE sql_local_last_edited_at IS NOT NULL) AS pending_sync
    FROM notes WHERE deleted_at IS NULL
"""

CALENDAR_SUMMARY_SQL = """
    SELECT
      DATE(start_time) AS date,
      COUNT(*) AS events,
      string_agg(DISTINCT source, ', ') AS sources
    FROM calendar_events
    WHERE start_time BETWEEN NOW() - INTERVAL '7 days' AND NOW() + INTERVAL '7 days'
    GROUP BY DATE(start_time)
    ORDER BY date
"""

LLM_MODELS_SQL = """
    SELECT
      provider,
      COUNT(*) AS model_count,
      AVG(cost_per_1k_input)::numeric(10,5) AS avg_input_cost,
      AVG(cost_per_1k_output)::numeric(10,5) AS avg_output_cost
    FROM llm_models
    GROUP BY provider
    ORDER BY model_count DESC
"""


def overall_success_rate(rows: List[Dict[str, Any]]) -> str:
    """Percentage of successful runs across all scripts, e.g. '87.5%'.

    Returns 'N/A' when the window holds no runs at all.
    """
    total_runs = sum(int(row["total_runs"] or 0) for row in rows)
    if total_runs == 0:
        return SUCCESS_RATE_UNAVAILABLE
    successful = sum(int(row["successful"] or 0) for row in rows)
    return f"{successful / total_runs * 100:.1f}%"


def recent_syncs(db: DatabaseManager) -> Envelope:
    """Last 20 sync runs, newest first."""
    return Envelope(
        description="KAY's recent sync runs (last 20)",
        data=db.fetch_all(RECENT_SYNCS_SQL),
        note="This is live data from KAY's actual system",
    )


def sync_health(db: DatabaseManager) -> Envelope:
    """Per-script run counts for the past week, with an overall success rate."""
    health = db.fetch_all(SYNC_HEALTH_SQL)
    return Envelope(
        description="KAY's sync health (last 7 days)",
        data=health,
        metrics={
            "total_scripts": len(health),
            "overall_success_rate": overall_success_rate(health),
        },
    )


def sample_task(db: DatabaseManager) -> Envelope:
    """One live, non-deleted task showing the synced field layout."""
    return Envelope(
        description="A real task from KAY's database",
        data=db.fetch_one(SAMPLE_TASK_SQL),
        note="Shows actual field structure, sync timestamps, Notion page ID format",
    )


def tasks_summary(db: DatabaseManager) -> Envelope:
    """Task counts grouped by status, plus the overall total."""
    summary = db.fetch_all(TASKS_SUMMARY_SQL)
    return Envelope(
        description="KAY's task statistics",
        data=summary,
        total=sum(int(row["count"]) for row in summary),
    )


def files_summary(db: DatabaseManager) -> Envelope:
    """Files grouped by suggested PARA type with embedding coverage."""
    return Envelope(
        description="KAY's file organization (PARA distribution)",
        data=db.fetch_all(FILES_SUMMARY_SQL),
        note="Shows how KAY classifies files into Projects/Areas/Resources/Archive",
    )


def telegram_stats(db: DatabaseManager) -> Envelope:
    """Top ten bot operation types over the past week."""
    return Envelope(
        description="KAY's Telegram bot usage (last 7 days)",
        data=db.fetch_all(TELEGRAM_STATS_SQL),
        note="Shows which operations are most commonly used",
    )


def database_schema(db: DatabaseManager) -> Envelope:
    """Public tables with their column counts and on-disk sizes."""
    tables = db.fetch_all(DATABASE_SCHEMA_SQL)
    return Envelope(
        description="KAY's database schema",
        data=tables,
        total_tables=len(tables),
    )


def notion_databases(db: DatabaseManager) -> Envelope:
    """Sync coverage of the tasks, projects and notes tables."""
    return Envelope(
        description="KAY's Notion sync status",
        data=db.fetch_all(NOTION_DATABASES_SQL),
        note="Shows sync coverage for main databases",
    )


def calendar_summary(db: DatabaseManager) -> Envelope:
    """Calendar events per day, a week either side of today."""
    return Envelope(
        description="KAY's calendar (7 days back, 7 days forward)",
        data=db.fetch_all(CALENDAR_SUMMARY_SQL),
    )


def llm_models(db: DatabaseManager) -> Envelope:
    """Model counts and average per-1k token costs by provider."""
    return Envelope(
        description="LLM models in KAY's database (59 total)",
        data=db.fetch_all(LLM_MODELS_SQL),
    )


QUERY_CATALOG: Mapping[QueryEntity, QueryProducer] = MappingProxyType({
    QueryEntity.RECENT_SYNCS: recent_syncs,
    QueryEntity.SYNC_HEALTH: sync_health,
    QueryEntity.SAMPLE_TASK: sample_task,
    QueryEntity.TASKS_SUMMARY: tasks_summary,
    QueryEntity.FILES_SUMMARY: files_summary,
    QueryEntity.TELEGRAM_STATS: telegram_stats,
    QueryEntity.DATABASE_SCHEMA: database_schema,
    QueryEntity.NOTION_DATABASES: notion_databases,
    QueryEntity.CALENDAR_SUMMARY: calendar_summary,
    QueryEntity.LLM_MODELS: llm_models,
})


def execute_query(db: DatabaseManager, entity_name: str) -> CatalogResult:
    """Run the live query registered under ``entity_name``.

    Unknown names come back as a CatalogMiss listing every valid entity;
    database errors propagate to the caller untouched.
    """
    try:
        entity = QueryEntity(entity_name)
    except ValueError:
        logger.warning(f"Rejected unknown entity: {entity_name!r}")
        return CatalogMiss(
            error=f"Unknown entity: {entity_name}",
            available=list(QUERY_ENTITY_NAMES),
        )

    logger.info(f"Running live query: {entity.value}")
    return QUERY_CATALOG[entity](db)
