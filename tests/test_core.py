import sqlite3

import pytest

from mysqld_metrics.core import (
    USERSTAT_CHECK_QUERY,
    Desc,
    Histogram,
    Metric,
    Scraper,
    ValueType,
    build_fq_name,
    query_rows,
    userstat_enabled,
)


class FakeCursor:
    def __init__(self, connection):
        self._connection = connection
        self.description = None
        self._rows = []

    def execute(self, query, params=None):
        self._connection.executed.append((query, params))
        result = self._connection.responses.get(query)
        if result is None:
            raise RuntimeError(f"unexpected query: {query}")
        if isinstance(result, Exception):
            raise result
        columns, rows = result
        self.description = [(name, None, None, None, None, None, None) for name in columns]
        self._rows = rows

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, responses):
        self.responses = responses
        self.executed = []

    def cursor(self):
        return FakeCursor(self)


def test_build_fq_name_joins_parts():
    assert build_fq_name("mysql", "info_schema", "processlist_threads") == (
        "mysql_info_schema_processlist_threads"
    )


def test_build_fq_name_skips_empty_parts():
    assert build_fq_name("", "sub", "name") == "sub_name"
    assert build_fq_name("ns", "", "name") == "ns_name"


def test_build_fq_name_empty_name_gives_empty():
    assert build_fq_name("ns", "sub", "") == ""


def test_metric_labels_map_names_to_values():
    desc = Desc("m", "help", ["a", "b"])
    metric = Metric(desc, ValueType.GAUGE, 3, ("x", "y"))
    assert metric.labels() == {"a": "x", "b": "y"}
    assert metric.value == 3.0
    assert desc.variable_labels == ("a", "b")


def test_metric_rejects_wrong_label_count():
    desc = Desc("m", "help", ["a", "b"])
    with pytest.raises(ValueError):
        Metric(desc, ValueType.COUNTER, 1, ("only",))


def test_histogram_labels_and_sorted_buckets():
    desc = Desc("h", "help", ["kind"])
    histogram = Histogram(desc, 4, 1.5, {10.0: 4, 1.0: 2}, ("read",))
    assert histogram.labels() == {"kind": "read"}
    assert list(histogram.buckets) == [1.0, 10.0]


def test_histogram_rejects_wrong_label_count():
    with pytest.raises(ValueError):
        Histogram(Desc("h", "help"), 1, 1.0, {}, ("extra",))


def test_scraper_is_abstract():
    with pytest.raises(TypeError):
        Scraper()


def test_query_rows_with_sqlite():
    conn = sqlite3.connect(":memory:")
    try:
        columns, rows = query_rows(conn, "SELECT ? AS a, ? AS b", (1, "x"))
    finally:
        conn.close()
    assert columns == ["a", "b"]
    assert rows == [(1, "x")]


def test_query_rows_propagates_errors():
    conn = sqlite3.connect(":memory:")
    try:
        with pytest.raises(sqlite3.OperationalError):
            query_rows(conn, "SELECT * FROM missing_table")
    finally:
        conn.close()


def test_userstat_enabled_when_on():
    db = FakeConnection({USERSTAT_CHECK_QUERY: (["Variable_name", "Value"], [("userstat", "ON")])})
    assert userstat_enabled(db, "table") is True
    assert db.executed == [(USERSTAT_CHECK_QUERY, None)]


def test_userstat_disabled_when_off():
    db = FakeConnection({USERSTAT_CHECK_QUERY: (["Variable_name", "Value"], [("userstat", "OFF")])})
    assert userstat_enabled(db, "table") is False


def test_userstat_disabled_when_query_fails():
    conn = sqlite3.connect(":memory:")
    try:
        assert userstat_enabled(conn, "user") is False
    finally:
        conn.close()


def test_userstat_disabled_when_no_rows():
    db = FakeConnection({USERSTAT_CHECK_QUERY: (["Variable_name", "Value"], [])})
    assert userstat_enabled(db, "schema") is False