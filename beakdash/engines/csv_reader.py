"""
Inline CSV reader for csv connections.

Values are returned as strings; no type inference.
"""

import csv
import io
from typing import Any

from beakdash.core.errors import ConfigError
from beakdash.schemas import CsvConfig


def _column_names(count: int) -> list[str]:
    return [f"column{i}" for i in range(1, count + 1)]


def parse_csv(text: str, config: CsvConfig) -> list[dict[str, Any]]:
    """
    Parse ``text`` into a list of row dicts.

    - has_headers: first non-blank row supplies the keys; otherwise keys are
      column1..columnN, N taken from the widest row.
    - trim_fields: strip whitespace from headers and values.
    - Blank lines are skipped; short rows are padded with "", extra cells dropped.
    """
    try:
        reader = csv.reader(
            io.StringIO(text),
            delimiter=config.delimiter,
            quotechar=config.quote_char,
        )
        records = [row for row in reader if any(cell.strip() for cell in row)]
    except (csv.Error, TypeError) as e:
        raise ConfigError("Invalid CSV data", error=str(e)) from e

    if config.trim_fields:
        records = [[cell.strip() for cell in row] for row in records]
    if not records:
        return []

    if config.has_headers:
        header, body = records[0], records[1:]
    else:
        header, body = _column_names(max(len(r) for r in records)), records

    width = len(header)
    rows: list[dict[str, Any]] = []
    for record in body:
        cells = record[:width] + [""] * (width - len(record))
        rows.append(dict(zip(header, cells, strict=True)))
    return rows


def read_csv_rows(config: CsvConfig) -> list[dict[str, Any]]:
    """Rows for a csv connection; ConfigError when no payload is stored."""
    content = config.content
    if not content:
        raise ConfigError("No CSV data found in connection")
    return parse_csv(content, config)
