"""Database connection manager for KAY's read-only PostgreSQL store."""

import logging
from contextlib import contextmanager
from typing import Dict, List, Optional, Any, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

from .constants import (
    APPLICATION_NAME,
    CONNECTION_TIMEOUT,
    POOL_SIZE,
    MAX_OVERFLOW,
    POOL_RECYCLE,
)
from .error_handling import ConnectionError
from .utils import mask_database_url

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the process-wide engine used by every catalog query.

    Created once at server start and disposed once at shutdown. Store
    errors raised while querying are not caught here.
    """

    def __init__(self, connect_timeout: int = CONNECTION_TIMEOUT):
        self.engine: Optional[Engine] = None
        self.connection_info: Dict[str, Any] = {}
        self._connect_timeout = connect_timeout

    def _test_connection(self) -> bool:
        """Test if the current connection is healthy."""
        if not self.engine:
            return False

        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.warning(f"Connection health check failed: {e}")
            return False

    def _connect_args(self, backend: str) -> Dict[str, Any]:
        if backend == "postgresql":
            return {
                "connect_timeout": self._connect_timeout,
                "application_name": APPLICATION_NAME,
            }
        return {}

    def connect(self, database_url: str) -> bool:
        """Build the engine from a connection string and verify it with SELECT 1."""
        masked_url = mask_database_url(database_url)
        try:
            url = make_url(database_url)
            backend = url.get_backend_name()
            self.engine = create_engine(
                url,
                poolclass=QueuePool,
                pool_size=POOL_SIZE,
                max_overflow=MAX_OVERFLOW,
                pool_timeout=self._connect_timeout,
                pool_pre_ping=True,
                pool_recycle=POOL_RECYCLE,
                echo=False,
                connect_args=self._connect_args(backend),
            )
            self.connection_info = {
                "type": backend,
                "host": url.host,
                "port": url.port,
                "database": url.database,
                "username": url.username,
            }

            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()

            logger.info(f"Connected to {backend} database: {masked_url}")
            return True

        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to {masked_url}: {type(e).__name__}: {e}")
            self._dispose()
            return False
        except Exception as e:
            logger.error(f"Unexpected error connecting to {masked_url}: {type(e).__name__}: {e}")
            self._dispose()
            return False

    @contextmanager
    def get_connection(self) -> Iterator[Connection]:
        """Context manager handing out a pooled connection."""
        if not self.engine:
            raise ConnectionError(
                "No database connection established",
                details="Set DATABASE_URL and restart the server",
            )

        conn = self.engine.connect()
        try:
            yield conn
        finally:
            conn.close()

    def fetch_all(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Run one literal read-only statement and return every row as a dict."""
        with self.get_connection() as conn:
            result = conn.execute(text(sql), params or {})
            rows = [dict(row) for row in result.mappings().all()]
        logger.debug(f"Query returned {len(rows)} rows")
        return rows

    def fetch_one(self, sql: str) -> Optional[Dict[str, Any]]:
        """Run one literal read-only statement and return its first row, if any."""
        with self.get_connection() as conn:
            row = conn.execute(text(sql)).mappings().first()
        return dict(row) if row is not None else None

    def has_engine(self) -> bool:
        """Check if database engine exists (basic connection check)."""
        return self.engine is not None

    def is_connected(self) -> bool:
        """Check if database is currently connected and healthy."""
        return self.has_engine() and self._test_connection()

    def get_connection_status(self) -> Dict[str, Any]:
        """Get detailed connection status information."""
        if not self.engine:
            return {
                "connected": False,
                "connection_info": None,
            }

        return {
            "connected": self._test_connection(),
            "connection_info": self.connection_info.copy(),
            "engine_pool_size": self.engine.pool.size() if hasattr(self.engine.pool, 'size') else None,
        }

    def _dispose(self):
        if self.engine:
            self.engine.dispose()
        self.engine = None
        self.connection_info = {}

    def disconnect(self):
        """Close the database connection."""
        if self.engine:
            self._dispose()
            logger.info("Database connection closed")
