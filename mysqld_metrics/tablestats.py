"""Per-table statistics from information_schema.table_statistics."""

from __future__ import annotations

from typing import Any, Iterator

from .core import (
    INFORMATION_SCHEMA,
    NAMESPACE,
    Desc,
    Metric,
    Scraper,
    ValueType,
    build_fq_name,
    query_rows,
    userstat_enabled,
)

TABLE_STAT_QUERY = """
		SELECT
		  TABLE_SCHEMA,
		  TABLE_NAME,
		  ROWS_READ,
		  ROWS_CHANGED,
		  ROWS_CHANGED_X_INDEXES
		  FROM information_schema.table_statistics
		"""

TABLE_STATS_ROWS_READ_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_statistics_rows_read_total"),
    "The number of rows read from the table.",
    ("schema", "table"),
)
TABLE_STATS_ROWS_CHANGED_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_statistics_rows_changed_total"),
    "The number of rows changed in the table.",
    ("schema", "table"),
)
TABLE_STATS_ROWS_CHANGED_X_INDEXES_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_statistics_rows_changed_x_indexes_total"),
    "The number of rows changed in the table, multiplied by the number of indexes changed.",
    ("schema", "table"),
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


class ScrapeTableStat(Scraper):
    """Collects from information_schema.table_statistics."""

    name = "info_schema.tablestats"
    help = "If running with userstat=1, set to true to collect table statistics"
    version = 5.1

    def scrape(self, db: Any) -> Iterator[Metric]:
        if not userstat_enabled(db, "table"):
            return
        _, rows = query_rows(db, TABLE_STAT_QUERY)
        for schema, table, rows_read, rows_changed, rows_changed_x_indexes in rows:
            labels = (_text(schema), _text(table))
            yield Metric(TABLE_STATS_ROWS_READ_DESC, ValueType.COUNTER, float(int(rows_read)), labels)
            yield Metric(
                TABLE_STATS_ROWS_CHANGED_DESC, ValueType.COUNTER, float(int(rows_changed)), labels
            )
            yield Metric(
                TABLE_STATS_ROWS_CHANGED_X_INDEXES_DESC,
                ValueType.COUNTER,
                float(int(rows_changed_x_indexes)),
                labels,
            )