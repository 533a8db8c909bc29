"""Per-file I/O metrics from performance_schema.file_summary_by_instance."""

from __future__ import annotations

from typing import Any, Iterator

from .core import (
    NAMESPACE,
    PERFORMANCE_SCHEMA,
    Desc,
    Metric,
    Scraper,
    ValueType,
    build_fq_name,
    query_rows,
)

PERF_FILE_INSTANCES_QUERY = """
	SELECT
	    FILE_NAME, EVENT_NAME,
	    COUNT_READ, COUNT_WRITE,
	    SUM_NUMBER_OF_BYTES_READ, SUM_NUMBER_OF_BYTES_WRITE
	  FROM performance_schema.file_summary_by_instance
	     where FILE_NAME REGEXP %s
	"""

_LABELS = ("file_name", "event_name", "mode")

FILE_INSTANCES_BYTES_DESC = Desc(
    build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, "file_instances_bytes"),
    "The number of bytes processed by file read/write operations.",
    _LABELS,
)
FILE_INSTANCES_COUNT_DESC = Desc(
    build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, "file_instances_total"),
    "The total number of file read/write operations.",
    _LABELS,
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


class ScrapePerfFileInstances(Scraper):
    """Collects from performance_schema.file_summary_by_instance."""

    name = "perf_schema.file_instances"
    help = "Collect metrics from performance_schema.file_summary_by_instance"
    version = 5.5

    def __init__(self, file_filter: str = ".*", remove_prefix: str = "/var/lib/mysql/") -> None:
        self.file_filter = file_filter
        self.remove_prefix = remove_prefix

    def scrape(self, db: Any) -> Iterator[Metric]:
        _, rows = query_rows(db, PERF_FILE_INSTANCES_QUERY, (self.file_filter,))
        for file_name, event_name, count_read, count_write, bytes_read, bytes_written in rows:
            file_name = _text(file_name).removeprefix(self.remove_prefix)
            event_name = _text(event_name)
            read = (file_name, event_name, "read")
            write = (file_name, event_name, "write")
            yield Metric(FILE_INSTANCES_COUNT_DESC, ValueType.COUNTER, float(int(count_read)), read)
            yield Metric(FILE_INSTANCES_COUNT_DESC, ValueType.COUNTER, float(int(count_write)), write)
            yield Metric(FILE_INSTANCES_BYTES_DESC, ValueType.COUNTER, float(int(bytes_read)), read)
            yield Metric(
                FILE_INSTANCES_BYTES_DESC, ValueType.COUNTER, float(int(bytes_written)), write
            )