from __future__ import annotations

from typing import Any, Dict

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from nodeflow.connectors.base.destination_connector import DestinationConnector
from nodeflow.connectors.database.utils import create_sql_engine, describe_error
from nodeflow.core.models import ConnectionType, PassthroughResult, RecordSet
from nodeflow.core.node_configs import SqlWriteOptions
from nodeflow.exceptions import DestinationWriteError
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class DatabaseDestination(DestinationConnector):
    """
    Writes records to a table of a SQL database.

    Without a ``table`` in the node config the records are only acknowledged,
    which keeps pipelines that merely end on a database connection working.
    """

    def __init__(
        self,
        connection_config: Dict[str, Any],
        connection_type: str = ConnectionType.POSTGRESQL.value,
    ):
        super().__init__(connection_config, connection_type)

    def write(
        self, records: RecordSet, options: Dict[str, Any], timeout: float
    ) -> PassthroughResult:
        write_options = SqlWriteOptions.from_dict(options)

        if not write_options.table:
            logger.info(
                f"No target table for {self.connection_type} destination; "
                f"acknowledging {len(records)} records"
            )
            return PassthroughResult(self.connection_type, len(records))

        if not records:
            logger.info(f"No records to write to {write_options.table}")
            return PassthroughResult(self.connection_type, 0)

        df = pd.DataFrame.from_records(records)
        engine = None
        try:
            engine = create_sql_engine(
                self.connection_type, self.connection_config, timeout
            )
            df.to_sql(
                write_options.table,
                engine,
                if_exists=write_options.write_mode,
                index=False,
            )
        except (SQLAlchemyError, ImportError, ValueError) as e:
            raise DestinationWriteError(
                f"Failed to write to {write_options.table}: {describe_error(e)}"
            ) from e
        finally:
            if engine is not None:
                engine.dispose()

        logger.info(
            f"Wrote {len(df)} records to {write_options.table} "
            f"({write_options.write_mode})"
        )
        return PassthroughResult(self.connection_type, len(df))
