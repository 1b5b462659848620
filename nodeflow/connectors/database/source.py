from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from nodeflow.connectors.base.connection_test_result import ConnectionTestResult
from nodeflow.connectors.base.preview_result import PreviewResult
from nodeflow.connectors.base.source_connector import SourceConnector
from nodeflow.connectors.database.utils import (
    apply_limit,
    create_sql_engine,
    describe_error,
    quote_identifier,
    resolve_query,
)
from nodeflow.core.models import ConnectionType, RecordSet
from nodeflow.core.node_configs import SqlQueryOptions
from nodeflow.exceptions import DatabasePreviewError, NodeflowError, SourceFetchError
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class DatabaseSource(SourceConnector):
    """
    Reads records from a SQL database (PostgreSQL, MySQL or SQLite).

    Queries are executed as-is with no bound parameters, and the engine is
    created and disposed within each call.
    """

    def __init__(
        self,
        connection_config: Dict[str, Any],
        connection_type: str = ConnectionType.POSTGRESQL.value,
    ):
        super().__init__(connection_config, connection_type)

    def _engine(self, timeout: float) -> Engine:
        return create_sql_engine(self.connection_type, self.connection_config, timeout)

    @staticmethod
    def _run_query(
        connection: Connection, query: str
    ) -> Tuple[RecordSet, List[Dict[str, Any]]]:
        result = connection.exec_driver_sql(query)
        description = result.cursor.description if result.cursor is not None else None
        columns = [
            {"name": column[0], "type": column[1]} for column in (description or [])
        ]
        records = [dict(row) for row in result.mappings()]
        return records, columns

    def execute(
        self, query: str, timeout: float
    ) -> Tuple[RecordSet, List[Dict[str, Any]]]:
        """Run a query on a fresh connection and return rows plus column metadata."""
        logger.debug(f"Executing query: {query}")
        engine = self._engine(timeout)
        try:
            with engine.connect() as connection:
                return self._run_query(connection, query)
        finally:
            engine.dispose()

    def read(self, options: Dict[str, Any], timeout: float) -> RecordSet:
        query = resolve_query(SqlQueryOptions.from_dict(options), self.connection_config)
        logger.info(f"Fetching from {self.connection_type}: {query}")

        try:
            records, _ = self.execute(query, timeout)
        except (SQLAlchemyError, ImportError) as e:
            raise SourceFetchError(f"Database query failed: {describe_error(e)}") from e

        logger.info(f"Query returned {len(records)} rows")
        return records

    def _preview_query(
        self, connection: Connection, query: Optional[str], limit: int
    ) -> str:
        if query:
            # Custom queries are used exactly as given, case included
            if "limit" in query.lower():
                return query
            return f"{query} LIMIT {limit}"

        table = str(self.connection_config.get("table") or "").strip()
        if not table:
            tables = inspect(connection).get_table_names()
            if not tables:
                raise DatabasePreviewError("No tables found in database")
            table = tables[0]
        return apply_limit(f"SELECT * FROM {quote_identifier(table)}", limit)

    def preview(
        self, query: Optional[str], limit: int, timeout: float
    ) -> PreviewResult:
        try:
            engine = self._engine(timeout)
            try:
                with engine.connect() as connection:
                    final_query = self._preview_query(connection, query, limit)
                    logger.debug(f"Executing preview query: {final_query}")
                    records, columns = self._run_query(connection, final_query)
            finally:
                engine.dispose()
        except (SQLAlchemyError, ImportError, NodeflowError) as e:
            raise DatabasePreviewError(
                f"Database preview error: {describe_error(e)}"
            ) from e

        return PreviewResult(
            data=records, columns=columns, connection_type=self.connection_type
        )

    def test_connection(self, timeout: float) -> ConnectionTestResult:
        try:
            self.execute("SELECT 1", timeout)
        except (SQLAlchemyError, ImportError, NodeflowError) as e:
            return ConnectionTestResult(success=False, message=describe_error(e))
        return ConnectionTestResult(success=True, message="Connection successful")
