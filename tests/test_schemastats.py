from __future__ import annotations

from decimal import Decimal

import pytest

from mysqld_metrics.core import USERSTAT_CHECK_QUERY, ValueType
from mysqld_metrics.schemastats import (
    SCHEMA_STAT_QUERY,
    SCHEMA_STATS_ROWS_CHANGED_DESC,
    SCHEMA_STATS_ROWS_CHANGED_X_INDEXES_DESC,
    SCHEMA_STATS_ROWS_READ_DESC,
    ScrapeSchemaStat,
)


class FakeCursor:
    def __init__(self, db):
        self.db = db
        self.description = None
        self._rows = []

    def execute(self, query, params=None):
        self.db.executed.append(query)
        result = self.db.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        columns, rows = result
        self.description = [(c, None, None, None, None, None, None) for c in columns]
        self._rows = list(rows)

    def fetchall(self):
        return self._rows

    def close(self):
        self.db.closed += 1


class FakeDB:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.executed = []
        self.closed = 0

    def cursor(self):
        return FakeCursor(self)


USERSTAT_ON = (["Variable_name", "Value"], [("userstat", "ON")])
COLUMNS = ["TABLE_SCHEMA", "ROWS_READ", "ROWS_CHANGED", "ROWS_CHANGED_X_INDEXES"]


def test_scrape_schema_stat_matches_source_case():
    db = FakeDB(USERSTAT_ON, (COLUMNS, [("mysql", 238, 0, 8), ("default", 99, 1, 0)]))
    metrics = list(ScrapeSchemaStat().scrape(db))

    got = [(m.labels(), m.value) for m in metrics]
    assert got == [
        ({"schema": "mysql"}, 238.0),
        ({"schema": "mysql"}, 0.0),
        ({"schema": "mysql"}, 8.0),
        ({"schema": "default"}, 99.0),
        ({"schema": "default"}, 1.0),
        ({"schema": "default"}, 0.0),
    ]
    assert all(m.value_type is ValueType.COUNTER for m in metrics)
    assert db.executed == [USERSTAT_CHECK_QUERY, SCHEMA_STAT_QUERY]
    assert db.responses == []


def test_descriptors_in_order():
    db = FakeDB(USERSTAT_ON, (COLUMNS, [("app", Decimal("5"), Decimal("6"), Decimal("7"))]))
    metrics = list(ScrapeSchemaStat().scrape(db))
    assert [m.desc for m in metrics] == [
        SCHEMA_STATS_ROWS_READ_DESC,
        SCHEMA_STATS_ROWS_CHANGED_DESC,
        SCHEMA_STATS_ROWS_CHANGED_X_INDEXES_DESC,
    ]
    assert [m.value for m in metrics] == [5.0, 6.0, 7.0]
    assert SCHEMA_STATS_ROWS_READ_DESC.fq_name == (
        "mysql_info_schema_schema_statistics_rows_read_total"
    )


def test_userstat_off_yields_nothing():
    db = FakeDB((["Variable_name", "Value"], [("userstat", "OFF")]))
    assert list(ScrapeSchemaStat().scrape(db)) == []
    assert db.executed == [USERSTAT_CHECK_QUERY]


def test_userstat_check_failure_yields_nothing():
    db = FakeDB(RuntimeError("no such variable"))
    assert list(ScrapeSchemaStat().scrape(db)) == []
    assert db.executed == [USERSTAT_CHECK_QUERY]


def test_statistics_query_error_propagates():
    db = FakeDB(USERSTAT_ON, RuntimeError("table missing"))
    with pytest.raises(RuntimeError, match="table missing"):
        list(ScrapeSchemaStat().scrape(db))


def test_bad_number_raises():
    db = FakeDB(USERSTAT_ON, (COLUMNS, [("app", "abc", 1, 2)]))
    with pytest.raises(ValueError):
        list(ScrapeSchemaStat().scrape(db))


def test_scraper_identity():
    scraper = ScrapeSchemaStat()
    assert scraper.name == "info_schema.schemastats"
    assert scraper.version == 5.1