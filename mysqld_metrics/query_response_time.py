"""Query response time histograms from information_schema.query_response_time*."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .core import (
    INFORMATION_SCHEMA,
    NAMESPACE,
    Desc,
    Histogram,
    Scraper,
    build_fq_name,
    query_rows,
)

logger = logging.getLogger(__name__)

QUERY_RESPONSE_CHECK_QUERY = "SELECT @@query_response_time_stats"

# Upper-case table names: with lower case the read/write split returns the
# same results as the total.
QUERY_RESPONSE_TIME_QUERIES = (
    "SELECT TIME, COUNT, TOTAL FROM INFORMATION_SCHEMA.QUERY_RESPONSE_TIME",
    "SELECT TIME, COUNT, TOTAL FROM INFORMATION_SCHEMA.QUERY_RESPONSE_TIME_READ",
    "SELECT TIME, COUNT, TOTAL FROM INFORMATION_SCHEMA.QUERY_RESPONSE_TIME_WRITE",
)

QUERY_RESPONSE_TIME_DESCS = (
    Desc(
        build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "query_response_time_seconds"),
        "The number of all queries by duration they took to execute.",
    ),
    Desc(
        build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "read_query_response_time_seconds"),
        "The number of read queries by duration they took to execute.",
    ),
    Desc(
        build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "write_query_response_time_seconds"),
        "The number of write queries by duration they took to execute.",
    ),
)


def _parse_float(value: Any) -> float:
    """Parse a column holding a number as text; anything unparsable counts as 0."""
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode(errors="replace")
    try:
        return float(str(value).strip())
    except ValueError:
        return 0.0


def _response_time_histogram(db: Any, query: str, desc: Desc) -> Histogram:
    _, rows = query_rows(db, query)
    total_count = 0
    total_sum = 0.0
    buckets: dict[float, int] = {}
    for length, count, total in rows:
        upper_bound = _parse_float(length)
        total_count += int(count)
        total_sum += _parse_float(total)
        # The "TOO LONG" row only contributes to the overall count and sum.
        if upper_bound == 0:
            continue
        buckets[upper_bound] = total_count
    return Histogram(desc, total_count, total_sum, buckets)


class ScrapeQueryResponseTime(Scraper):
    """Collects from information_schema.query_response_time."""

    name = "info_schema.query_response_time"
    help = "Collect query response time distribution if query_response_time_stats is ON."
    version = 5.5

    def scrape(self, db: Any) -> Iterator[Histogram]:
        try:
            _, rows = query_rows(db, QUERY_RESPONSE_CHECK_QUERY)
            query_stats = int(rows[0][0])
        except Exception:
            logger.debug("Query response time distribution is not available.")
            return
        if query_stats == 0:
            logger.debug("MySQL variable is OFF: query_response_time_stats")
            return

        for index, (query, desc) in enumerate(zip(QUERY_RESPONSE_TIME_QUERIES, QUERY_RESPONSE_TIME_DESCS)):
            try:
                histogram = _response_time_histogram(db, query, desc)
            except Exception:
                # The read/write tables exist only on some server builds;
                # the total table must be there when the stats are ON.
                if index == 0:
                    raise
                continue
            yield histogram