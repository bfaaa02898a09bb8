"""
SQL statement composition for datasets, plus the catalog queries used by
the table listing and table schema operations.
"""

import re
from typing import Any

from beakdash.core.config import settings
from beakdash.core.errors import ConfigError
from beakdash.models import Dataset

TABLES_QUERY = """
SELECT table_name
FROM information_schema.tables
WHERE table_schema = 'public'
  AND table_type = 'BASE TABLE'
ORDER BY table_name
"""

COLUMNS_QUERY = """
SELECT column_name AS name, data_type AS type
FROM information_schema.columns
WHERE table_name = :table
ORDER BY ordinal_position
"""

# plain or schema-qualified identifier
_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")


def dataset_alias(dataset: Dataset) -> str:
    """CTE name an ad-hoc query uses to reference the dataset's own query."""
    return f"dataset_{dataset.id}"


def _strip_terminator(sql: str) -> str:
    return sql.strip().rstrip(";").rstrip()


def default_table_query(dataset: Dataset, *, limit: int | None = None) -> str:
    config: dict[str, Any] = dataset.config or {}
    table = config.get("table") or settings.DATASET_FALLBACK_TABLE
    if not isinstance(table, str) or not _TABLE_NAME.match(table):
        raise ConfigError(f"Invalid table name in dataset config: {table!r}")
    row_limit = limit if limit is not None else settings.DATASET_DEFAULT_ROW_LIMIT
    return f"SELECT * FROM {table} LIMIT {int(row_limit)}"


def compose_query(dataset: Dataset, override_query: str | None = None) -> str:
    """
    Pick the statement to run for a dataset.

    Precedence: override query > dataset query > ``SELECT * FROM <table> LIMIT n``.
    When both an override and a dataset query exist, the dataset query is
    wrapped as ``WITH dataset_<id> AS (...)`` and the override runs against it.
    The override is expected to reference ``dataset_<id>``; if it does not,
    the CTE is computed but never read.
    """
    if override_query and override_query.strip():
        if dataset.query and dataset.query.strip():
            return (
                f"WITH {dataset_alias(dataset)} AS "
                f"({_strip_terminator(dataset.query)}) {override_query.strip()}"
            )
        return override_query.strip()
    if dataset.query and dataset.query.strip():
        return dataset.query.strip()
    return default_table_query(dataset)
