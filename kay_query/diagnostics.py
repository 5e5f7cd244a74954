"""Pre-flight check for a KAY Query database connection.

Run this before handing a DATABASE_URL to someone else: it confirms the
credential can read the tables the tools use and cannot write.

Usage:
    DATABASE_URL="postgresql://..." kay-query-diagnose
    DATABASE_URL="postgresql://..." python diagnose.py --skip-vector-probe
"""

import argparse
import logging
import sys
from typing import Callable, Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import config_manager
from .constants import (
    CONNECTION_TIMEOUT,
    DIAGNOSTIC_TABLES,
    EMBEDDING_DIMENSIONS,
    WRITE_PROBE_TABLE,
)
from .database_manager import DatabaseManager
from .error_handling import ConnectionError, KayQueryError
from .tools.system import FILES_SUMMARY_SQL, RECENT_SYNCS_SQL, SAMPLE_TASK_SQL
from .utils import setup_logging

logger = logging.getLogger(__name__)

RULE = "━" * 40

CONNECTIVITY_SQL = 'SELECT NOW() AS time, current_database() AS db, current_user AS "user"'

EMBEDDED_CHUNKS_SQL = """
    SELECT COUNT(*) AS count
    FROM file_chunks
    WHERE embedding IS NOT NULL
"""

VECTOR_SEARCH_SQL = """
    SELECT
      f.filename,
      c.chunk_text,
      c.embedding <=> CAST(:probe AS vector) AS distance
    FROM file_chunks c
    JOIN files f ON c.file_id = f.id
    WHERE f.folder LIKE '%pai-documentation%'
      AND c.embedding IS NOT NULL
    ORDER BY distance ASC
    LIMIT 3
"""

TROUBLESHOOTING = (
    "- DATABASE_URL is correct",
    "- Database user has SELECT permissions",
    "- Network allows connection to database",
)


def zero_vector_literal(dimensions: int = EMBEDDING_DIMENSIONS) -> str:
    """pgvector text form of an all-zero probe vector."""
    return "[" + ",".join("0" for _ in range(dimensions)) + "]"


def check_connectivity(db: DatabaseManager) -> None:
    """Print server identity and time. Raises if the server cannot be reached."""
    identity = db.fetch_one(CONNECTIVITY_SQL) or {}
    print("✅ Connected successfully")
    print(f"   Database: {identity.get('db')}")
    print(f"   User: {identity.get('user')}")
    print(f"   Time: {identity.get('time')}")


def check_read_access(db: DatabaseManager, tables: Iterable[str] = DIAGNOSTIC_TABLES) -> List[str]:
    """Count rows in each table; returns the tables that could not be read."""
    unreadable = []
    for table in tables:
        try:
            # Table names come from DIAGNOSTIC_TABLES only; quote them anyway
            with db.get_connection() as conn:
                quoted = conn.dialect.identifier_preparer.quote(table)
                count = conn.execute(text(f"SELECT COUNT(*) FROM {quoted}")).scalar()
            print(f"✅ Can read {table}: {count} rows")
        except SQLAlchemyError as e:
            unreadable.append(table)
            print(f"❌ Cannot read {table}: {e}")
    return unreadable


def check_write_denied(db: DatabaseManager) -> bool:
    """Try to create a table; True when the connection refuses.

    A probe table that did get created is dropped and the transaction rolled
    back, so nothing is left behind either way.
    """
    with db.get_connection() as conn:
        transaction = conn.begin()
        try:
            conn.execute(text(f"CREATE TABLE {WRITE_PROBE_TABLE} (id int)"))
        except SQLAlchemyError as e:
            transaction.rollback()
            logger.debug(f"Write probe rejected: {e}")
            print("✅ Write denied (correct for read-only user)")
            return True

        try:
            print("⚠️  WARNING: User has WRITE access (should be read-only!)")
            conn.execute(text(f"DROP TABLE {WRITE_PROBE_TABLE}"))
        finally:
            transaction.rollback()
        return False


def run_sample_queries(db: DatabaseManager) -> List[str]:
    """Run a few catalog statements directly; returns the names that failed."""
    failed = []

    def sample(name: str, action: Callable[[], None]):
        print(f"Query: {name}")
        try:
            action()
        except SQLAlchemyError as e:
            failed.append(name)
            print(f"❌ {name} failed: {e}")
        print()

    def recent_syncs():
        syncs = db.fetch_all(RECENT_SYNCS_SQL)
        print(f"✅ Retrieved {len(syncs)} sync runs")
        if syncs:
            print(f"   Latest: {syncs[0]['script_name']} ({syncs[0]['status']})")

    def sample_task():
        task = db.fetch_one(SAMPLE_TASK_SQL)
        if task:
            print(f"✅ Retrieved task: \"{task['name']}\"")
            print(f"   Status: {task['status']}, Priority: {task['priority']}")
        else:
            print("⚠️  No tasks found")

    def files_summary():
        files = db.fetch_all(FILES_SUMMARY_SQL)
        print("✅ Files by PARA type:")
        for row in files:
            print(f"   {row['suggested_para_type']}: {row['count']}")

    sample("Recent Syncs", recent_syncs)
    sample("Sample Task", sample_task)
    sample("Files Summary", files_summary)
    return failed


def probe_vector_search(db: DatabaseManager) -> bool:
    """Check pgvector similarity search with a zero vector; False if unavailable."""
    try:
        chunks = db.fetch_one(EMBEDDED_CHUNKS_SQL) or {}
        print(f"✅ Found {chunks.get('count', 0)} chunks with embeddings")

        results = db.fetch_all(VECTOR_SEARCH_SQL, {"probe": zero_vector_literal()})
        print(f"✅ Vector search works (retrieved {len(results)} results)")
        if results:
            print("   Note: Need OPENAI_API_KEY for meaningful search results")
        return True
    except SQLAlchemyError as e:
        print(f"⚠️  Vector search unavailable: {e}")
        return False


def _print_troubleshooting():
    print("\nCheck:", file=sys.stderr)
    for line in TROUBLESHOOTING:
        print(line, file=sys.stderr)
    print(file=sys.stderr)


def run_diagnostics(database_url: str, skip_vector_probe: bool = False,
                    connect_timeout: int = CONNECTION_TIMEOUT) -> int:
    """Run the whole checklist and return the process exit code."""
    print("🔍 Testing KAY Query MCP Tool\n")
    print(f"{RULE}\n")

    db = DatabaseManager(connect_timeout=connect_timeout)
    try:
        print("TEST 1: Database Connection")
        try:
            if not db.connect(database_url):
                raise ConnectionError("Connection check failed, see log above")
            check_connectivity(db)
        except (SQLAlchemyError, KayQueryError) as e:
            print(f"\n❌ TEST FAILED: {e}", file=sys.stderr)
            _print_troubleshooting()
            return 1
        print()

        issues = []

        print("TEST 2: Read Permissions")
        issues += [f"cannot read {table}" for table in check_read_access(db)]
        print()

        print("TEST 3: Write Permissions (should fail for read-only)")
        try:
            if not check_write_denied(db):
                issues.append("user has write access")
        except SQLAlchemyError as e:
            issues.append("write probe failed")
            print(f"❌ Write probe could not complete: {e}")
        print()

        print("TEST 4: Sample Queries\n")
        issues += [f"sample query failed: {name}" for name in run_sample_queries(db)]

        if skip_vector_probe:
            print("TEST 5: Vector Search (skipped)")
        else:
            print("TEST 5: Vector Search (Embeddings)")
            probe_vector_search(db)
        print()

        print(f"{RULE}\n")
        if issues:
            print(f"⚠️  COMPLETED WITH {len(issues)} ISSUE(S)\n")
            for issue in issues:
                print(f"   - {issue}")
            print()
        else:
            print("✅ ALL TESTS PASSED\n")
            print("The MCP tool should work correctly with this database connection.\n")
        print("Next steps:")
        print("1. Copy this connection string into the user's claude_desktop_config.json")
        print("2. Restart the MCP client")
        print("3. Test the tools from the client\n")
        return 0
    finally:
        db.disconnect()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kay-query-diagnose",
        description="Check that a DATABASE_URL works for the KAY Query MCP server.",
    )
    parser.add_argument(
        "--skip-vector-probe",
        action="store_true",
        help="skip the pgvector similarity search check",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config_manager.get_server_config()
    setup_logging(config.log_level, structured=config.structured_logging)

    validation = config_manager.validate_db_config(config)
    if not validation["valid"]:
        missing = ", ".join(validation["missing_params"])
        print(f"❌ {missing} not set", file=sys.stderr)
        print(f'Usage: {missing}="postgresql://..." kay-query-diagnose', file=sys.stderr)
        return 1

    return run_diagnostics(
        config.database_url,
        skip_vector_probe=args.skip_vector_probe,
        connect_timeout=config.connect_timeout,
    )


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
