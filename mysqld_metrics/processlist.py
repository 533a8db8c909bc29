"""Thread state counts from information_schema.processlist."""

from __future__ import annotations

from collections import Counter
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
)

INFO_SCHEMA_PROCESSLIST_QUERY = """
		  SELECT
		    user,
		    SUBSTRING_INDEX(host, ':', 1) AS host,
		    COALESCE(command, '') AS command,
		    COALESCE(state, '') AS state,
		    COUNT(*) AS processes,
		    SUM(time) AS seconds
		  FROM information_schema.processlist
		  WHERE ID != connection_id()
		    AND TIME >= {min_time:d}
		  GROUP BY user, SUBSTRING_INDEX(host, ':', 1), command, state
	"""

PROCESSLIST_COUNT_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_threads"),
    "The number of threads split by current state.",
    ("command", "state"),
)
PROCESSLIST_TIME_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_seconds"),
    "The number of seconds threads have used split by current state.",
    ("command", "state"),
)
PROCESSES_BY_USER_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_processes_by_user"),
    "The number of processes by user.",
    ("mysql_user",),
)
PROCESSES_BY_HOST_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_processes_by_host"),
    "The number of processes by host.",
    ("client_host",),
)

_STATE_TRANSLATION = str.maketrans(
    {";": None, ",": None, ":": None, ".": None, "(": None, ")": None, " ": "_", "-": "_"}
)


def sanitize_state(state: str) -> str:
    """Turn a command or state into a label-friendly lower-case word."""
    if not state:
        state = "unknown"
    return state.lower().translate(_STATE_TRANSLATION)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


class ScrapeProcesslist(Scraper):
    """Collects from information_schema.processlist."""

    name = INFORMATION_SCHEMA + ".processlist"
    help = "Collect current thread state counts from the information_schema.processlist"
    version = 5.1

    def __init__(
        self,
        min_time: int = 0,
        processes_by_user: bool = True,
        processes_by_host: bool = True,
    ) -> None:
        self.min_time = min_time
        self.processes_by_user = processes_by_user
        self.processes_by_host = processes_by_host

    @property
    def query(self) -> str:
        return INFO_SCHEMA_PROCESSLIST_QUERY.format(min_time=int(self.min_time))

    def scrape(self, db: Any) -> Iterator[Metric]:
        _, rows = query_rows(db, self.query)

        state_counts: Counter[tuple[str, str]] = Counter()
        state_time: Counter[tuple[str, str]] = Counter()
        host_counts: Counter[str] = Counter()
        user_counts: Counter[str] = Counter()

        for user, host, command, state, count, seconds in rows:
            user = _text(user)
            host = _text(host) or "unknown"
            key = (sanitize_state(_text(command)), sanitize_state(_text(state)))
            count = int(count)
            state_counts[key] += count
            state_time[key] += int(seconds)
            host_counts[host] += count
            user_counts[user] += count

        for key in sorted(state_counts):
            yield Metric(PROCESSLIST_COUNT_DESC, ValueType.GAUGE, state_counts[key], key)
            yield Metric(PROCESSLIST_TIME_DESC, ValueType.GAUGE, state_time[key], key)

        if self.processes_by_host:
            for host in sorted(host_counts):
                yield Metric(PROCESSES_BY_HOST_DESC, ValueType.GAUGE, host_counts[host], (host,))
        if self.processes_by_user:
            for user in sorted(user_counts):
                yield Metric(PROCESSES_BY_USER_DESC, ValueType.GAUGE, user_counts[user], (user,))