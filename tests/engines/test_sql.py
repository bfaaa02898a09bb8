"""Unit tests for engines.sql statement composition."""

import pytest

from beakdash.core.errors import ConfigError
from beakdash.engines.sql import compose_query, default_table_query
from beakdash.models import Dataset


def _dataset(**kwargs) -> Dataset:
    return Dataset(id=kwargs.pop("id", 5), name="ds", **kwargs)


def test_override_wraps_dataset_query_as_cte() -> None:
    ds = _dataset(query="SELECT a FROM t")
    assert compose_query(ds, "SELECT * FROM dataset_5") == (
        "WITH dataset_5 AS (SELECT a FROM t) SELECT * FROM dataset_5"
    )


def test_cte_drops_trailing_semicolon_of_dataset_query() -> None:
    ds = _dataset(id=9, query="SELECT a FROM t;\n")
    assert compose_query(ds, "SELECT count(*) FROM dataset_9") == (
        "WITH dataset_9 AS (SELECT a FROM t) SELECT count(*) FROM dataset_9"
    )


def test_override_not_referencing_alias_still_wrapped() -> None:
    ds = _dataset(query="SELECT a FROM t")
    assert compose_query(ds, "SELECT 1") == "WITH dataset_5 AS (SELECT a FROM t) SELECT 1"


def test_override_without_dataset_query_runs_verbatim() -> None:
    ds = _dataset(config={"table": "orders"})
    assert compose_query(ds, "SELECT id FROM orders") == "SELECT id FROM orders"


def test_dataset_query_without_override() -> None:
    ds = _dataset(query="SELECT a FROM t", config={"table": "orders"})
    assert compose_query(ds) == "SELECT a FROM t"


def test_blank_override_is_ignored() -> None:
    ds = _dataset(query="SELECT a FROM t")
    assert compose_query(ds, "   ") == "SELECT a FROM t"


def test_default_table_query() -> None:
    ds = _dataset(config={"table": "sales.orders"})
    assert compose_query(ds) == "SELECT * FROM sales.orders LIMIT 100"


def test_default_table_query_falls_back_to_users() -> None:
    assert compose_query(_dataset()) == "SELECT * FROM users LIMIT 100"


def test_default_table_query_custom_limit() -> None:
    ds = _dataset(config={"table": "orders"})
    assert default_table_query(ds, limit=10) == "SELECT * FROM orders LIMIT 10"


@pytest.mark.parametrize("table", ["orders; DROP TABLE x", "a b", "1abc", 42])
def test_invalid_table_name_raises(table: object) -> None:
    with pytest.raises(ConfigError, match="Invalid table name"):
        compose_query(_dataset(config={"table": table}))
