"""Index I/O wait metrics from performance_schema.table_io_waits_summary_by_index_usage."""

from __future__ import annotations

from typing import Any, Iterator

from .core import (
    NAMESPACE,
    PERFORMANCE_SCHEMA,
    PICO_SECONDS,
    Desc,
    Metric,
    Scraper,
    ValueType,
    build_fq_name,
    query_rows,
)

PERF_INDEX_IO_WAITS_QUERY = """
	SELECT OBJECT_SCHEMA, OBJECT_NAME, ifnull(INDEX_NAME, 'NONE') as INDEX_NAME,
	    COUNT_FETCH, COUNT_INSERT, COUNT_UPDATE, COUNT_DELETE,
	    SUM_TIMER_FETCH, SUM_TIMER_INSERT, SUM_TIMER_UPDATE, SUM_TIMER_DELETE
	  FROM performance_schema.table_io_waits_summary_by_index_usage
	  WHERE OBJECT_SCHEMA NOT IN ('mysql', 'performance_schema')
	"""

_LABELS = ("schema", "name", "index", "operation")

INDEX_WAITS_DESC = Desc(
    build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, "index_io_waits_total"),
    "The total number of index I/O wait events for each index and operation.",
    _LABELS,
)
INDEX_WAITS_TIME_DESC = Desc(
    build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, "index_io_waits_seconds_total"),
    "The total time of index I/O wait events for each index and operation.",
    _LABELS,
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


def _number(value: Any) -> int:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode()
    return int(value)


class ScrapePerfIndexIOWaits(Scraper):
    """Collects from performance_schema.table_io_waits_summary_by_index_usage."""

    name = "perf_schema.indexiowaits"
    help = "Collect metrics from performance_schema.table_io_waits_summary_by_index_usage"
    version = 5.6

    def scrape(self, db: Any) -> Iterator[Metric]:
        _, rows = query_rows(db, PERF_INDEX_IO_WAITS_QUERY)
        for (
            schema,
            table,
            index,
            count_fetch,
            count_insert,
            count_update,
            count_delete,
            time_fetch,
            time_insert,
            time_update,
            time_delete,
        ) in rows:
            schema, table, index = _text(schema), _text(table), _text(index)
            # Inserts are only reported against the table itself, not an index.
            with_insert = index == "NONE"

            counts = [("fetch", count_fetch)]
            times = [("fetch", time_fetch)]
            if with_insert:
                counts.append(("insert", count_insert))
                times.append(("insert", time_insert))
            counts += [("update", count_update), ("delete", count_delete)]
            times += [("update", time_update), ("delete", time_delete)]

            for operation, value in counts:
                yield Metric(
                    INDEX_WAITS_DESC,
                    ValueType.COUNTER,
                    float(_number(value)),
                    (schema, table, index, operation),
                )
            for operation, value in times:
                yield Metric(
                    INDEX_WAITS_TIME_DESC,
                    ValueType.COUNTER,
                    float(_number(value)) / PICO_SECONDS,
                    (schema, table, index, operation),
                )