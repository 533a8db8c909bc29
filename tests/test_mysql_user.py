import pytest

from mysqld_metrics.core import ValueType
from mysqld_metrics.mysql_user import (
    MYSQL_USER_QUERY,
    USER_MAX_CONNECTIONS_DESC,
    USER_MAX_QUESTIONS_DESC,
    USER_MAX_UPDATES_DESC,
    USER_MAX_USER_CONNECTIONS_DESC,
    ScrapeUser,
    parse_privilege,
)

PRIV_COLUMNS = [
    "Select_priv", "Insert_priv", "Update_priv", "Delete_priv", "Create_priv",
    "Drop_priv", "Reload_priv", "Shutdown_priv", "Process_priv", "File_priv",
    "Grant_priv", "References_priv", "Index_priv", "Alter_priv", "Show_db_priv",
    "Super_priv", "Create_tmp_table_priv", "Lock_tables_priv", "Execute_priv",
    "Repl_slave_priv", "Repl_client_priv", "Create_view_priv", "Show_view_priv",
    "Create_routine_priv", "Alter_routine_priv", "Create_user_priv", "Event_priv",
    "Trigger_priv", "Create_tablespace_priv",
]
COLUMNS = ["user", "host", *PRIV_COLUMNS,
           "max_questions", "max_updates", "max_connections", "max_user_connections"]


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self._rows = []

    def execute(self, query, params=None):
        self.conn.executed.append((query, params))
        result = self.conn.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        columns, rows = result
        self.description = [(c, None, None, None, None, None, None) for c in columns]
        self._rows = list(rows)

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.executed = []

    def cursor(self):
        return FakeCursor(self)


def make_row(user="root", host="localhost"):
    privs = ["Y" if i % 2 == 0 else "N" for i in range(len(PRIV_COLUMNS))]
    return (user, host, *privs, 10, 20, 30, 40)


def test_parse_privilege_flags():
    assert parse_privilege("Y") == 1.0
    assert parse_privilege(b"N") == 0.0


def test_parse_privilege_numbers_and_garbage():
    assert parse_privilege("12") == 12.0
    assert parse_privilege(7) == 7.0
    assert parse_privilege("root") is None
    assert parse_privilege(None) is None


def test_scrape_limits_only():
    db = FakeConnection((COLUMNS, [make_row()]))
    metrics = list(ScrapeUser().scrape(db))
    assert db.executed == [(MYSQL_USER_QUERY, None)]
    assert [m.desc for m in metrics] == [
        USER_MAX_QUESTIONS_DESC,
        USER_MAX_UPDATES_DESC,
        USER_MAX_CONNECTIONS_DESC,
        USER_MAX_USER_CONNECTIONS_DESC,
    ]
    assert [m.value for m in metrics] == [10.0, 20.0, 30.0, 40.0]
    for metric in metrics:
        assert metric.labels() == {"mysql_user": "root", "hostmask": "localhost"}
        assert metric.value_type is ValueType.GAUGE


def test_scrape_with_privileges():
    db = FakeConnection((COLUMNS, [make_row(user="app", host="%")]))
    metrics = list(ScrapeUser(privileges=True).scrape(db))
    by_help = {m.desc.help: m for m in metrics}
    assert by_help["Select_priv by user."].value == 1.0
    assert by_help["Insert_priv by user."].value == 0.0
    assert by_help["Select_priv by user."].desc.fq_name.endswith("select_priv")
    assert "user by user." not in by_help
    assert "host by user." not in by_help
    assert [m.desc for m in metrics[-4:]] == [
        USER_MAX_QUESTIONS_DESC,
        USER_MAX_UPDATES_DESC,
        USER_MAX_CONNECTIONS_DESC,
        USER_MAX_USER_CONNECTIONS_DESC,
    ]
    assert all(m.labels() == {"mysql_user": "app", "hostmask": "%"} for m in metrics)


def test_scrape_rejects_short_row():
    db = FakeConnection((COLUMNS[:3], [("root", "localhost", "Y")]))
    with pytest.raises(ValueError):
        list(ScrapeUser().scrape(db))


def test_scrape_propagates_query_error():
    db = FakeConnection(RuntimeError("boom"))
    with pytest.raises(RuntimeError, match="boom"):
        list(ScrapeUser().scrape(db))