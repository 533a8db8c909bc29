"""Per-schema statistics summed from information_schema.table_statistics."""

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

SCHEMA_STAT_QUERY = """
		SELECT 
			TABLE_SCHEMA, 
			SUM(ROWS_READ) AS ROWS_READ, 
			SUM(ROWS_CHANGED) AS ROWS_CHANGED, 
			SUM(ROWS_CHANGED_X_INDEXES) AS ROWS_CHANGED_X_INDEXES 
		FROM information_schema.TABLE_STATISTICS 
		GROUP BY TABLE_SCHEMA;
		"""

SCHEMA_STATS_ROWS_READ_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "schema_statistics_rows_read_total"),
    "The number of rows read from the schema.",
    ("schema",),
)
SCHEMA_STATS_ROWS_CHANGED_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "schema_statistics_rows_changed_total"),
    "The number of rows changed in the schema.",
    ("schema",),
)
SCHEMA_STATS_ROWS_CHANGED_X_INDEXES_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "schema_statistics_rows_changed_x_indexes_total"),
    "The number of rows changed in the schema, multiplied by the number of indexes changed.",
    ("schema",),
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


class ScrapeSchemaStat(Scraper):
    """Collects from information_schema.table_statistics grouped by schema."""

    name = "info_schema.schemastats"
    help = "If running with userstat=1, set to true to collect schema statistics"
    version = 5.1

    def scrape(self, db: Any) -> Iterator[Metric]:
        if not userstat_enabled(db, "schema"):
            return
        _, rows = query_rows(db, SCHEMA_STAT_QUERY)
        for schema, rows_read, rows_changed, rows_changed_x_indexes in rows:
            labels = (_text(schema),)
            yield Metric(
                SCHEMA_STATS_ROWS_READ_DESC, ValueType.COUNTER, float(int(rows_read)), labels
            )
            yield Metric(
                SCHEMA_STATS_ROWS_CHANGED_DESC, ValueType.COUNTER, float(int(rows_changed)), labels
            )
            yield Metric(
                SCHEMA_STATS_ROWS_CHANGED_X_INDEXES_DESC,
                ValueType.COUNTER,
                float(int(rows_changed_x_indexes)),
                labels,
            )