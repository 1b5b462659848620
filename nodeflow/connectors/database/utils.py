from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.pool import NullPool

from nodeflow.core.models import ConnectionType
from nodeflow.core.node_configs import SqlQueryOptions
from nodeflow.exceptions import ConfigError, NoQueryOrTableError, UnsupportedTypeError
from nodeflow.logging import get_logger

logger = get_logger(__name__)

DRIVERS = {
    ConnectionType.POSTGRESQL.value: "postgresql+psycopg2",
    ConnectionType.MYSQL.value: "mysql+pymysql",
    ConnectionType.SQLITE.value: "sqlite",
}

DEFAULT_PORTS = {
    ConnectionType.POSTGRESQL.value: 5432,
    ConnectionType.MYSQL.value: 3306,
}


def translate_connection_parameters(config: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize connection parameter names.

    Connections may be registered with either the industry-standard names
    (``database``, ``username``) or the driver-style ones (``dbname``,
    ``user``). The industry-standard names are what the rest of this module
    reads.

    Args:
        config: Decrypted connection config

    Returns:
        Copy of the config with ``database``/``username`` filled in
    """
    translated = dict(config)

    param_mapping = {
        "dbname": "database",
        "user": "username",
    }

    for driver_name, standard_name in param_mapping.items():
        if driver_name in config and standard_name not in config:
            translated[standard_name] = config[driver_name]
            logger.debug(
                f"Translated parameter '{driver_name}' -> '{standard_name}'"
            )

    return translated


def build_connection_url(connection_type: str, config: Dict[str, Any]) -> URL:
    """Build the SQLAlchemy URL for a SQL connection.

    Raises:
        UnsupportedTypeError: If the connection type is not a SQL type
        ConfigError: If a SQLite connection has no ``path``
    """
    drivername = DRIVERS.get(connection_type)
    if drivername is None:
        raise UnsupportedTypeError(f"Not a SQL connection type: {connection_type}")

    if connection_type == ConnectionType.SQLITE.value:
        path = config.get("path") or config.get("database")
        if not path:
            raise ConfigError("SQLite connection requires a 'path'")
        return URL.create(drivername, database=str(path))

    params = translate_connection_parameters(config)
    port = params.get("port") or DEFAULT_PORTS.get(connection_type)
    return URL.create(
        drivername,
        username=params.get("username"),
        password=params.get("password"),
        host=params.get("host"),
        port=int(port) if port else None,
        database=params.get("database"),
    )


def quote_identifier(name: str) -> str:
    """Wrap an identifier in double quotes so its case is preserved."""
    return '"' + name.replace('"', '""') + '"'


def apply_limit(query: str, limit: Optional[int]) -> str:
    """Append ``LIMIT n`` unless the query already mentions LIMIT."""
    if not limit or "LIMIT" in query.upper():
        return query
    return f"{query} LIMIT {limit}"


def resolve_query(options: SqlQueryOptions, connection_config: Dict[str, Any]) -> str:
    """Work out the SQL a source node should run.

    Precedence: the node's custom query (verbatim), the node's table, then the
    default table stored on the connection.

    Raises:
        NoQueryOrTableError: If none of them is set
    """
    default_table = str(connection_config.get("table") or "").strip()

    if options.query:
        query = options.query
        logger.debug("Using custom query from node config")
    elif options.table:
        query = f"SELECT * FROM {quote_identifier(options.table)}"
        logger.debug(f"Using table from node config: {options.table}")
    elif default_table:
        query = f"SELECT * FROM {quote_identifier(default_table)}"
        logger.debug(f"Using default table from connection config: {default_table}")
    else:
        raise NoQueryOrTableError()

    return apply_limit(query, options.limit)


def create_sql_engine(
    connection_type: str, config: Dict[str, Any], timeout: float
) -> Engine:
    """Create an unpooled engine; every connect() opens a fresh connection."""
    url = build_connection_url(connection_type, config)

    if connection_type == ConnectionType.SQLITE.value:
        connect_args: Dict[str, Any] = {"timeout": timeout}
    else:
        connect_args = {"connect_timeout": int(timeout)}

    if connection_type == ConnectionType.POSTGRESQL.value:
        connect_args["application_name"] = "nodeflow"

    return create_engine(url, poolclass=NullPool, connect_args=connect_args)


def describe_error(error: Exception) -> str:
    """Message of a database error, without SQLAlchemy's statement echo."""
    original = getattr(error, "orig", None)
    return str(original if original is not None else error).strip()
