"""
Query executor — runs generated SQL under a wall-clock deadline.

The statement runs on a worker thread while the caller waits. When the
deadline passes first, the in-flight statement is cancelled through the
DB-API connection and QueryTimeoutError is raised.
"""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.db_connector import json_safe_row
from core.errors import ExecutionError, QueryTimeoutError
from models.query import QueryResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class _Cancellable:
    """Holds the DB-API connection of a running statement so another thread can abort it."""

    def __init__(self):
        self._lock = threading.Lock()
        self._dbapi_conn = None
        self.cancelled = False

    def attach(self, conn) -> None:
        with self._lock:
            self._dbapi_conn = conn.connection.dbapi_connection

    def cancel(self) -> bool:
        with self._lock:
            self.cancelled = True
            dbapi_conn = self._dbapi_conn
        if dbapi_conn is None:
            return False
        # psycopg2 exposes cancel(); sqlite3 exposes interrupt()
        abort = getattr(dbapi_conn, "cancel", None) or getattr(dbapi_conn, "interrupt", None)
        if abort is None:
            return False
        try:
            abort()
        except Exception as e:
            logger.warning("Could not cancel timed-out query: %s", e)
            return False
        return True


class QueryExecutor:

    def __init__(self, engine: Engine, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS, allow_writes: bool = False):
        self.engine = engine
        self.timeout_seconds = timeout_seconds
        self.allow_writes = allow_writes

    def execute(self, sql: str) -> QueryResult:
        handle = _Cancellable()
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sql-exec")
        t0 = time.monotonic()
        try:
            future = pool.submit(self._run, sql, handle)
            try:
                rows = future.result(timeout=self.timeout_seconds)
            except FutureTimeout:
                cancelled = handle.cancel()
                logger.warning("Query exceeded %ss (cancel requested: %s)", self.timeout_seconds, cancelled)
                raise QueryTimeoutError(f"Query timeout after {self.timeout_seconds:g} seconds")
            except SQLAlchemyError as e:
                logger.error("Error executing query: %s", e)
                raise ExecutionError(_driver_message(e)) from e
        finally:
            pool.shutdown(wait=False)

        logger.info("Query returned %d rows in %dms", len(rows), round((time.monotonic() - t0) * 1000))
        return QueryResult(columns=list(rows[0].keys()) if rows else [], rows=rows)

    def _run(self, sql: str, handle: _Cancellable) -> list[dict]:
        with self.engine.connect() as conn:
            handle.attach(conn)
            if handle.cancelled:
                raise QueryTimeoutError("Query cancelled before it started")
            # Sent to the driver as-is: no bind-parameter parsing of ':' or '%'.
            result = conn.exec_driver_sql(sql, execution_options={"no_parameters": True})
            rows = [json_safe_row(r) for r in result.mappings()] if result.returns_rows else []
            # Without a commit the transaction is rolled back when the connection closes.
            if self.allow_writes:
                conn.commit()
        return rows


def _driver_message(e: SQLAlchemyError) -> str:
    orig: Optional[BaseException] = getattr(e, "orig", None)
    return str(orig).strip() if orig is not None else str(e)
