"""Tests for the query catalog, config catalog and memory topics."""

import unittest
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

from kay_query.constants import (
    ConfigComponent,
    QueryEntity,
    CONFIG_COMPONENT_NAMES,
    QUERY_ENTITY_NAMES,
)
from kay_query.database_manager import DatabaseManager
from kay_query.models import CatalogMiss, Envelope
from kay_query.tools.configuration import lookup_config
from kay_query.tools.memory import get_memory_topics
from kay_query.tools.system import QUERY_CATALOG, execute_query, overall_success_rate


def make_db(rows=None, row=None):
    """DatabaseManager stand-in returning fixed rows."""
    db = Mock(spec=DatabaseManager)
    db.fetch_all.return_value = rows if rows is not None else []
    db.fetch_one.return_value = row
    return db


class TestQueryCatalog(unittest.TestCase):
    """Live query entries, run against a mocked database manager."""

    def test_catalog_covers_every_entity(self):
        self.assertEqual(set(QUERY_CATALOG), set(QueryEntity))
        self.assertEqual(len(QUERY_CATALOG), 10)

    def test_every_entity_succeeds_with_description(self):
        for name in QUERY_ENTITY_NAMES:
            with self.subTest(entity=name):
                result = execute_query(make_db(), name)
                self.assertIsInstance(result, Envelope)
                payload = result.to_payload()
                self.assertTrue(payload["success"])
                self.assertTrue(payload["description"])

    def test_every_entity_issues_exactly_one_statement(self):
        for name in QUERY_ENTITY_NAMES:
            with self.subTest(entity=name):
                db = make_db()
                execute_query(db, name)
                self.assertEqual(db.fetch_all.call_count + db.fetch_one.call_count, 1)

    def test_statements_are_parameterless(self):
        for name in QUERY_ENTITY_NAMES:
            with self.subTest(entity=name):
                db = make_db()
                execute_query(db, name)
                for call in db.fetch_all.call_args_list + db.fetch_one.call_args_list:
                    self.assertEqual(len(call.args), 1)
                    self.assertEqual(call.kwargs, {})

    def test_unknown_entity_lists_available(self):
        db = make_db()
        result = execute_query(db, "all-passwords")

        self.assertIsInstance(result, CatalogMiss)
        payload = result.to_payload()
        self.assertFalse(payload["success"])
        self.assertEqual(payload["error"], "Unknown entity: all-passwords")
        self.assertEqual(payload["available"], QUERY_ENTITY_NAMES)
        db.fetch_all.assert_not_called()
        db.fetch_one.assert_not_called()

    def test_injection_shaped_entity_never_reaches_database(self):
        db = make_db()
        result = execute_query(db, "recent-syncs; DROP TABLE tasks")

        self.assertFalse(result.success)
        db.fetch_all.assert_not_called()

    def test_tasks_summary_totals_grouped_counts(self):
        rows = [
            {"status": "open", "count": 2, "high_priority": 1, "overdue": 0, "synced_to_notion": 2},
            {"status": "done", "count": 1, "high_priority": 0, "overdue": 0, "synced_to_notion": 1},
        ]
        payload = execute_query(make_db(rows), "tasks-summary").to_payload()

        self.assertEqual(payload["total"], 3)
        self.assertEqual(sum(row["count"] for row in payload["data"]), 3)

    def test_sync_health_reports_success_rate(self):
        rows = [
            {"script_name": "notion-sync", "total_runs": 8, "successful": 7, "failed": 1},
            {"script_name": "calendar-sync", "total_runs": 2, "successful": 1, "failed": 1},
        ]
        payload = execute_query(make_db(rows), "sync-health").to_payload()

        self.assertEqual(payload["metrics"]["total_scripts"], 2)
        self.assertEqual(payload["metrics"]["overall_success_rate"], "80.0%")

    def test_sync_health_without_runs_is_not_available(self):
        payload = execute_query(make_db([]), "sync-health").to_payload()

        self.assertEqual(payload["metrics"]["total_scripts"], 0)
        self.assertEqual(payload["metrics"]["overall_success_rate"], "N/A")

    def test_overall_success_rate_rounds_to_one_decimal(self):
        rows = [{"total_runs": 3, "successful": 2}]
        self.assertEqual(overall_success_rate(rows), "66.7%")

    def test_sample_task_returns_single_row(self):
        task = {"name": "Renew passport", "status": "open", "priority": "high"}
        db = make_db(row=task)
        payload = execute_query(db, "sample-task").to_payload()

        self.assertEqual(payload["data"], task)
        self.assertIn("note", payload)
        db.fetch_one.assert_called_once()

    def test_sample_task_with_no_rows_keeps_null_data(self):
        payload = execute_query(make_db(row=None), "sample-task").to_payload()

        self.assertIn("data", payload)
        self.assertIsNone(payload["data"])

    def test_database_schema_counts_tables(self):
        rows = [
            {"table_name": "tasks", "column_count": 14, "size": "2208 kB"},
            {"table_name": "files", "column_count": 21, "size": "1 MB"},
        ]
        payload = execute_query(make_db(rows), "database-schema").to_payload()

        self.assertEqual(payload["total_tables"], 2)

    def test_calendar_summary_has_no_note(self):
        payload = execute_query(make_db(), "calendar-summary").to_payload()

        self.assertNotIn("note", payload)
        self.assertNotIn("metrics", payload)

    def test_driver_types_serialize_to_json_values(self):
        rows = [{
            "suggested_para_type": "Resources",
            "count": 12,
            "embedded": 10,
            "avg_confidence": Decimal("0.85"),
            "last_seen": datetime(2026, 1, 2, 3, 4, 5),
        }]
        payload = execute_query(make_db(rows), "files-summary").to_payload()

        self.assertEqual(payload["data"][0]["avg_confidence"], "0.85")
        self.assertEqual(payload["data"][0]["last_seen"], "2026-01-02T03:04:05")

    def test_store_failure_propagates(self):
        db = make_db()
        db.fetch_all.side_effect = RuntimeError("relation \"bot_logs\" does not exist")

        with self.assertRaises(RuntimeError):
            execute_query(db, "telegram-stats")


class TestConfigCatalog(unittest.TestCase):
    """Static configuration snippets."""

    def test_every_component_succeeds_with_description(self):
        for name in CONFIG_COMPONENT_NAMES:
            with self.subTest(component=name):
                payload = lookup_config(name).to_payload()
                self.assertTrue(payload["success"])
                self.assertTrue(payload["description"])

    def test_integrations_lists_eight_services(self):
        payload = lookup_config("integrations").to_payload()
        names = [service["name"] for service in payload["services"]]

        self.assertEqual(len(names), 8)
        self.assertIn("Notion", names)
        self.assertIn("Telegram", names)

    def test_unknown_component(self):
        payload = lookup_config("nonexistent").to_payload()

        self.assertEqual(payload, {
            "success": False,
            "error": "Unknown component: nonexistent",
            "available": [
                "cron-schedule",
                "sync-configuration",
                "telegram-bot",
                "file-processing",
                "integrations",
            ],
        })

    def test_cron_schedule_sections(self):
        payload = lookup_config(ConfigComponent.CRON_SCHEDULE.value).to_payload()

        self.assertEqual(len(payload["vps_crons"]), 7)
        self.assertEqual(len(payload["railway_crons"]), 1)
        self.assertEqual(len(payload["telegram_scheduler"]), 4)

    def test_config_payload_has_no_data_key(self):
        payload = lookup_config("telegram-bot").to_payload()

        self.assertNotIn("data", payload)
        self.assertEqual(len(payload["commands"]), 8)

    def test_returned_snippets_are_copies(self):
        first = lookup_config("file-processing").to_payload()
        first["para_structure"].append("Inbox")

        second = lookup_config("file-processing").to_payload()
        self.assertEqual(second["para_structure"], ["Projects", "Areas", "Resources", "Archive"])


class TestMemoryTopics(unittest.TestCase):
    """MEMORY topic listing."""

    def test_topics_are_fixed(self):
        payload = get_memory_topics().to_payload()

        self.assertTrue(payload["success"])
        self.assertEqual(
            payload["learnings_topics"],
            ["Environment", "Infrastructure", "Security", "TypeScript", "PAI"],
        )
        self.assertIn("pai-extension-guide", payload["suggestion"])

    def test_repeated_calls_are_identical(self):
        self.assertEqual(get_memory_topics().to_payload(), get_memory_topics().to_payload())


if __name__ == '__main__':
    unittest.main(verbosity=2)
