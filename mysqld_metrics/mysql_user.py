"""User limits and privileges from mysql.user."""

from __future__ import annotations

from typing import Any, Iterator

from .core import (
    NAMESPACE,
    Desc,
    Metric,
    Scraper,
    ValueType,
    build_fq_name,
    query_rows,
)

MYSQL_SUBSYSTEM = "mysql"

MYSQL_USER_QUERY = """
		  SELECT
		    user,
		    host,
		    Select_priv,
		    Insert_priv,
		    Update_priv,
		    Delete_priv,
		    Create_priv,
		    Drop_priv,
		    Reload_priv,
		    Shutdown_priv,
		    Process_priv,
		    File_priv,
		    Grant_priv,
		    References_priv,
		    Index_priv,
		    Alter_priv,
		    Show_db_priv,
		    Super_priv,
		    Create_tmp_table_priv,
		    Lock_tables_priv,
		    Execute_priv,
		    Repl_slave_priv,
		    Repl_client_priv,
		    Create_view_priv,
		    Show_view_priv,
		    Create_routine_priv,
		    Alter_routine_priv,
		    Create_user_priv,
		    Event_priv,
		    Trigger_priv,
		    Create_tablespace_priv,
		    max_questions,
		    max_updates,
		    max_connections,
		    max_user_connections
		  FROM mysql.user
		"""

# user, host, 29 privilege flags and 4 limits.
_COLUMN_COUNT = 35

LABEL_NAMES = ("mysql_user", "hostmask")

USER_MAX_QUESTIONS_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_questions"),
    "The number of max_questions by user.",
    LABEL_NAMES,
)
USER_MAX_UPDATES_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_updates"),
    "The number of max_updates by user.",
    LABEL_NAMES,
)
USER_MAX_CONNECTIONS_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_connections"),
    "The number of max_connections by user.",
    LABEL_NAMES,
)
USER_MAX_USER_CONNECTIONS_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_user_connections"),
    "The number of max_user_connections by user.",
    LABEL_NAMES,
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


def parse_privilege(value: Any) -> float | None:
    """Read a privilege flag or number: "Y" is 1, "N" is 0; None if unparsable."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode(errors="replace")
    text = str(value)
    if text == "Y":
        return 1.0
    if text == "N":
        return 0.0
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


class ScrapeUser(Scraper):
    """Collects from mysql.user."""

    name = MYSQL_SUBSYSTEM + ".user"
    help = "Collect data from mysql.user"
    version = 5.1

    def __init__(self, privileges: bool = False) -> None:
        self.privileges = privileges

    def scrape(self, db: Any) -> Iterator[Metric]:
        columns, rows = query_rows(db, MYSQL_USER_QUERY)
        for row in rows:
            if len(row) != _COLUMN_COUNT:
                raise ValueError(f"expected {_COLUMN_COUNT} columns, got {len(row)}")
            user, host = _text(row[0]), _text(row[1])
            max_questions, max_updates, max_connections, max_user_connections = (
                int(value) for value in row[-4:]
            )
            labels = (user, host)

            if self.privileges:
                for column, raw in zip(columns, row):
                    value = parse_privilege(raw)
                    if value is None:
                        continue
                    column = _text(column)
                    desc = Desc(
                        build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, column.lower()),
                        column + " by user.",
                        LABEL_NAMES,
                    )
                    yield Metric(desc, ValueType.GAUGE, value, labels)

            yield Metric(USER_MAX_QUESTIONS_DESC, ValueType.GAUGE, max_questions, labels)
            yield Metric(USER_MAX_UPDATES_DESC, ValueType.GAUGE, max_updates, labels)
            yield Metric(USER_MAX_CONNECTIONS_DESC, ValueType.GAUGE, max_connections, labels)
            yield Metric(
                USER_MAX_USER_CONNECTIONS_DESC, ValueType.GAUGE, max_user_connections, labels
            )