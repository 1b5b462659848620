"""Tests for SQL query resolution and connection URLs."""

import pytest

from nodeflow.connectors.database.utils import (
    apply_limit,
    build_connection_url,
    describe_error,
    quote_identifier,
    resolve_query,
    translate_connection_parameters,
)
from nodeflow.core.node_configs import SqlQueryOptions
from nodeflow.exceptions import ConfigError, NoQueryOrTableError, UnsupportedTypeError


def options(**config):
    return SqlQueryOptions.from_dict(config)


def test_custom_query_used_verbatim_with_limit():
    query = resolve_query(options(query='SELECT * FROM "Orders"', limit=10), {})
    assert query == 'SELECT * FROM "Orders" LIMIT 10'
    assert query.endswith("LIMIT 10")


def test_limit_not_duplicated():
    query = resolve_query(
        options(query='SELECT * FROM "Orders" limit 5', limit=10), {}
    )
    assert query == 'SELECT * FROM "Orders" limit 5'
    assert query.upper().count("LIMIT") == 1


def test_query_takes_precedence_over_table():
    query = resolve_query(options(query="SELECT 1", table="users"), {"table": "t"})
    assert query == "SELECT 1"


def test_node_table_is_quoted():
    assert resolve_query(options(table="Users"), {}) == 'SELECT * FROM "Users"'


def test_connection_default_table():
    query = resolve_query(options(limit=3), {"table": "Events"})
    assert query == 'SELECT * FROM "Events" LIMIT 3'


def test_no_query_or_table():
    with pytest.raises(NoQueryOrTableError) as exc_info:
        resolve_query(options(), {})
    assert str(exc_info.value) == "No query or table specified"


def test_quote_identifier_escapes_quotes():
    assert quote_identifier('we"ird') == '"we""ird"'


def test_apply_limit_without_limit():
    assert apply_limit("SELECT 1", None) == "SELECT 1"


def test_translate_connection_parameters():
    translated = translate_connection_parameters({"dbname": "app", "user": "me"})
    assert translated["database"] == "app"
    assert translated["username"] == "me"

    # Standard names win when both are present
    translated = translate_connection_parameters({"database": "a", "dbname": "b"})
    assert translated["database"] == "a"


def test_postgres_url():
    url = build_connection_url(
        "postgresql",
        {"host": "db", "database": "app", "username": "u", "password": "p"},
    )
    assert url.drivername == "postgresql+psycopg2"
    assert url.port == 5432
    assert url.host == "db"
    assert url.database == "app"
    assert url.password == "p"


def test_mysql_url_with_port():
    url = build_connection_url("mysql", {"host": "db", "port": "3307", "user": "u"})
    assert url.drivername == "mysql+pymysql"
    assert url.port == 3307
    assert url.username == "u"


def test_sqlite_url():
    url = build_connection_url("sqlite", {"path": "/tmp/x.db"})
    assert url.drivername == "sqlite"
    assert url.database == "/tmp/x.db"
    with pytest.raises(ConfigError):
        build_connection_url("sqlite", {})


def test_url_for_non_sql_type():
    with pytest.raises(UnsupportedTypeError):
        build_connection_url("rest_api", {})


def test_describe_error_prefers_driver_error():
    class WrappedError(Exception):
        orig = ValueError("relation does not exist")

    assert describe_error(WrappedError("long statement echo")) == "relation does not exist"
    assert describe_error(RuntimeError(" plain ")) == "plain"
