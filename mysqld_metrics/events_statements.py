"""Statement digest metrics from performance_schema.events_statements_summary_by_digest."""

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

PERF_EVENTS_STATEMENTS_QUERY = """
	SELECT
	    ifnull(SCHEMA_NAME, 'NONE') as SCHEMA_NAME,
	    DIGEST,
	    LEFT(DIGEST_TEXT, {digest_text_limit:d}) as DIGEST_TEXT,
	    COUNT_STAR,
	    SUM_TIMER_WAIT,
	    SUM_ERRORS,
	    SUM_WARNINGS,
	    SUM_ROWS_AFFECTED,
	    SUM_ROWS_SENT,
	    SUM_ROWS_EXAMINED,
	    SUM_CREATED_TMP_DISK_TABLES,
	    SUM_CREATED_TMP_TABLES,
	    SUM_SORT_MERGE_PASSES,
	    SUM_SORT_ROWS,
	    SUM_NO_INDEX_USED
	  FROM (
	    SELECT *
	    FROM performance_schema.events_statements_summary_by_digest
	    WHERE SCHEMA_NAME NOT IN ('mysql', 'performance_schema', 'information_schema')
	      AND LAST_SEEN > DATE_SUB(NOW(), INTERVAL {time_limit:d} SECOND)
	    ORDER BY LAST_SEEN DESC
	  )Q
	  GROUP BY
	    Q.SCHEMA_NAME,
	    Q.DIGEST,
	    Q.DIGEST_TEXT,
	    Q.COUNT_STAR,
	    Q.SUM_TIMER_WAIT,
	    Q.SUM_ERRORS,
	    Q.SUM_WARNINGS,
	    Q.SUM_ROWS_AFFECTED,
	    Q.SUM_ROWS_SENT,
	    Q.SUM_ROWS_EXAMINED,
	    Q.SUM_CREATED_TMP_DISK_TABLES,
	    Q.SUM_CREATED_TMP_TABLES,
	    Q.SUM_SORT_MERGE_PASSES,
	    Q.SUM_SORT_ROWS,
	    Q.SUM_NO_INDEX_USED
	  ORDER BY SUM_TIMER_WAIT DESC
	  LIMIT {limit:d}
	"""

_LABELS = ("schema", "digest", "digest_text")


def _desc(name: str, help_text: str) -> Desc:
    return Desc(build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, name), help_text, _LABELS)


EVENTS_STATEMENTS_DESC = _desc(
    "events_statements_total", "The total count of events statements by digest."
)
EVENTS_STATEMENTS_TIME_DESC = _desc(
    "events_statements_seconds_total", "The total time of events statements by digest."
)
EVENTS_STATEMENTS_ERRORS_DESC = _desc(
    "events_statements_errors_total", "The errors of events statements by digest."
)
EVENTS_STATEMENTS_WARNINGS_DESC = _desc(
    "events_statements_warnings_total", "The warnings of events statements by digest."
)
EVENTS_STATEMENTS_ROWS_AFFECTED_DESC = _desc(
    "events_statements_rows_affected_total",
    "The total rows affected of events statements by digest.",
)
EVENTS_STATEMENTS_ROWS_SENT_DESC = _desc(
    "events_statements_rows_sent_total", "The total rows sent of events statements by digest."
)
EVENTS_STATEMENTS_ROWS_EXAMINED_DESC = _desc(
    "events_statements_rows_examined_total",
    "The total rows examined of events statements by digest.",
)
EVENTS_STATEMENTS_TMP_TABLES_DESC = _desc(
    "events_statements_tmp_tables_total", "The total tmp tables of events statements by digest."
)
EVENTS_STATEMENTS_TMP_DISK_TABLES_DESC = _desc(
    "events_statements_tmp_disk_tables_total",
    "The total tmp disk tables of events statements by digest.",
)
EVENTS_STATEMENTS_SORT_MERGE_PASSES_DESC = _desc(
    "events_statements_sort_merge_passes_total",
    "The total number of merge passes by the sort algorithm performed by digest.",
)
EVENTS_STATEMENTS_SORT_ROWS_DESC = _desc(
    "events_statements_sort_rows_total", "The total number of sorted rows by digest."
)
EVENTS_STATEMENTS_NO_INDEX_USED_DESC = _desc(
    "events_statements_no_index_used_total",
    "The total number of statements that used full table scans by digest.",
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


class ScrapePerfEventsStatements(Scraper):
    """Collects from performance_schema.events_statements_summary_by_digest."""

    name = "perf_schema.eventsstatements"
    help = "Collect metrics from performance_schema.events_statements_summary_by_digest"
    version = 5.6

    def __init__(
        self, limit: int = 250, time_limit: int = 86400, digest_text_limit: int = 120
    ) -> None:
        self.limit = limit
        self.time_limit = time_limit
        self.digest_text_limit = digest_text_limit

    @property
    def query(self) -> str:
        return PERF_EVENTS_STATEMENTS_QUERY.format(
            digest_text_limit=int(self.digest_text_limit),
            time_limit=int(self.time_limit),
            limit=int(self.limit),
        )

    def scrape(self, db: Any) -> Iterator[Metric]:
        _, rows = query_rows(db, self.query)
        for (
            schema_name,
            digest,
            digest_text,
            count,
            query_time,
            errors,
            warnings,
            rows_affected,
            rows_sent,
            rows_examined,
            tmp_tables,
            tmp_disk_tables,
            sort_merge_passes,
            sort_rows,
            no_index_used,
        ) in rows:
            labels = (_text(schema_name), _text(digest), _text(digest_text))
            # Columns are read in the order the query selects them: the
            # disk temp-table sum comes before the plain temp-table sum.
            counters = (
                (EVENTS_STATEMENTS_DESC, float(int(count))),
                (EVENTS_STATEMENTS_TIME_DESC, float(int(query_time)) / PICO_SECONDS),
                (EVENTS_STATEMENTS_ERRORS_DESC, float(int(errors))),
                (EVENTS_STATEMENTS_WARNINGS_DESC, float(int(warnings))),
                (EVENTS_STATEMENTS_ROWS_AFFECTED_DESC, float(int(rows_affected))),
                (EVENTS_STATEMENTS_ROWS_SENT_DESC, float(int(rows_sent))),
                (EVENTS_STATEMENTS_ROWS_EXAMINED_DESC, float(int(rows_examined))),
                (EVENTS_STATEMENTS_TMP_TABLES_DESC, float(int(tmp_tables))),
                (EVENTS_STATEMENTS_TMP_DISK_TABLES_DESC, float(int(tmp_disk_tables))),
                (EVENTS_STATEMENTS_SORT_MERGE_PASSES_DESC, float(int(sort_merge_passes))),
                (EVENTS_STATEMENTS_SORT_ROWS_DESC, float(int(sort_rows))),
                (EVENTS_STATEMENTS_NO_INDEX_USED_DESC, float(int(no_index_used))),
            )
            for desc, value in counters:
                yield Metric(desc, ValueType.COUNTER, value, labels)