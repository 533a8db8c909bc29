"""Per-user statistics from information_schema.user_statistics."""

from __future__ import annotations

from typing import Any, Iterator, NamedTuple

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

USER_STAT_QUERY = "SELECT * FROM information_schema.user_statistics"


class _UserStatistic(NamedTuple):
    value_type: ValueType
    desc: Desc


def _stat(value_type: ValueType, name: str, help_text: str) -> _UserStatistic:
    return _UserStatistic(
        value_type,
        Desc(build_fq_name(NAMESPACE, INFORMATION_SCHEMA, name), help_text, ("user",)),
    )


# Known user_statistics columns; any other column is reported as untyped.
USER_STATISTICS_TYPES: dict[str, _UserStatistic] = {
    "TOTAL_CONNECTIONS": _stat(
        ValueType.COUNTER,
        "user_statistics_total_connections",
        "The number of connections created for this user.",
    ),
    "CONCURRENT_CONNECTIONS": _stat(
        ValueType.GAUGE,
        "user_statistics_concurrent_connections",
        "The number of concurrent connections for this user.",
    ),
    "CONNECTED_TIME": _stat(
        ValueType.COUNTER,
        "user_statistics_connected_time_seconds_total",
        "The cumulative number of seconds elapsed while there were connections from this user.",
    ),
    "BUSY_TIME": _stat(
        ValueType.COUNTER,
        "user_statistics_busy_seconds_total",
        "The cumulative number of seconds there was activity on connections from this user.",
    ),
    "CPU_TIME": _stat(
        ValueType.COUNTER,
        "user_statistics_cpu_time_seconds_total",
        "The cumulative CPU time elapsed, in seconds, while servicing this user's connections.",
    ),
    "BYTES_RECEIVED": _stat(
        ValueType.COUNTER,
        "user_statistics_bytes_received_total",
        "The number of bytes received from this user’s connections.",
    ),
    "BYTES_SENT": _stat(
        ValueType.COUNTER,
        "user_statistics_bytes_sent_total",
        "The number of bytes sent to this user’s connections.",
    ),
    "BINLOG_BYTES_WRITTEN": _stat(
        ValueType.COUNTER,
        "user_statistics_binlog_bytes_written_total",
        "The number of bytes written to the binary log from this user’s connections.",
    ),
    "ROWS_READ": _stat(
        ValueType.COUNTER,
        "user_statistics_rows_read_total",
        "The number of rows read by this user's connections.",
    ),
    "ROWS_SENT": _stat(
        ValueType.COUNTER,
        "user_statistics_rows_sent_total",
        "The number of rows sent by this user's connections.",
    ),
    "ROWS_DELETED": _stat(
        ValueType.COUNTER,
        "user_statistics_rows_deleted_total",
        "The number of rows deleted by this user's connections.",
    ),
    "ROWS_INSERTED": _stat(
        ValueType.COUNTER,
        "user_statistics_rows_inserted_total",
        "The number of rows inserted by this user's connections.",
    ),
    "ROWS_FETCHED": _stat(
        ValueType.COUNTER,
        "user_statistics_rows_fetched_total",
        "The number of rows fetched by this user’s connections.",
    ),
    "ROWS_UPDATED": _stat(
        ValueType.COUNTER,
        "user_statistics_rows_updated_total",
        "The number of rows updated by this user’s connections.",
    ),
    "TABLE_ROWS_READ": _stat(
        ValueType.COUNTER,
        "user_statistics_table_rows_read_total",
        "The number of rows read from tables by this user’s connections. "
        "(It may be different from ROWS_FETCHED.)",
    ),
    "SELECT_COMMANDS": _stat(
        ValueType.COUNTER,
        "user_statistics_select_commands_total",
        "The number of SELECT commands executed from this user’s connections.",
    ),
    "UPDATE_COMMANDS": _stat(
        ValueType.COUNTER,
        "user_statistics_update_commands_total",
        "The number of UPDATE commands executed from this user’s connections.",
    ),
    "OTHER_COMMANDS": _stat(
        ValueType.COUNTER,
        "user_statistics_other_commands_total",
        "The number of other commands executed from this user’s connections.",
    ),
    "COMMIT_TRANSACTIONS": _stat(
        ValueType.COUNTER,
        "user_statistics_commit_transactions_total",
        "The number of COMMIT commands issued by this user’s connections.",
    ),
    "ROLLBACK_TRANSACTIONS": _stat(
        ValueType.COUNTER,
        "user_statistics_rollback_transactions_total",
        "The number of ROLLBACK commands issued by this user’s connections.",
    ),
    "DENIED_CONNECTIONS": _stat(
        ValueType.COUNTER,
        "user_statistics_denied_connections_total",
        "The number of connections denied to this user.",
    ),
    "LOST_CONNECTIONS": _stat(
        ValueType.COUNTER,
        "user_statistics_lost_connections_total",
        "The number of this user’s connections that were terminated uncleanly.",
    ),
    "ACCESS_DENIED": _stat(
        ValueType.COUNTER,
        "user_statistics_access_denied_total",
        "The number of times this user’s connections issued commands that were denied.",
    ),
    "EMPTY_QUERIES": _stat(
        ValueType.COUNTER,
        "user_statistics_empty_queries_total",
        "The number of times this user’s connections sent empty queries to the server.",
    ),
    "TOTAL_SSL_CONNECTIONS": _stat(
        ValueType.COUNTER,
        "user_statistics_total_ssl_connections_total",
        "The number of times this user’s connections connected using SSL to the server.",
    ),
}


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


def _statistic_for(column: str) -> _UserStatistic:
    known = USER_STATISTICS_TYPES.get(column)
    if known is not None:
        return known
    return _stat(
        ValueType.UNTYPED,
        f"user_statistics_{column.lower()}",
        f"Unsupported metric from column {column}",
    )


class ScrapeUserStat(Scraper):
    """Collects from information_schema.user_statistics."""

    name = "info_schema.userstats"
    help = "If running with userstat=1, set to true to collect user statistics"
    version = 5.1

    def scrape(self, db: Any) -> Iterator[Metric]:
        if not userstat_enabled(db, "user"):
            return
        columns, rows = query_rows(db, USER_STAT_QUERY)
        # The first column holds the user; every other column is numeric.
        statistics = [_statistic_for(_text(column)) for column in columns[1:]]
        for user, *values in rows:
            labels = (_text(user),)
            for statistic, value in zip(statistics, values):
                yield Metric(statistic.desc, statistic.value_type, float(value), labels)