"""Table size and row metrics from information_schema.tables."""

from __future__ import annotations

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

TABLE_SCHEMA_QUERY = """
		SELECT
		    TABLE_SCHEMA,
		    TABLE_NAME,
		    TABLE_TYPE,
		    ifnull(ENGINE, 'NONE') as ENGINE,
		    ifnull(VERSION, '0') as VERSION,
		    ifnull(ROW_FORMAT, 'NONE') as ROW_FORMAT,
		    ifnull(TABLE_ROWS, '0') as TABLE_ROWS,
		    ifnull(DATA_LENGTH, '0') as DATA_LENGTH,
		    ifnull(INDEX_LENGTH, '0') as INDEX_LENGTH,
		    ifnull(DATA_FREE, '0') as DATA_FREE,
		    ifnull(CREATE_OPTIONS, 'NONE') as CREATE_OPTIONS
		  FROM information_schema.tables
		  WHERE TABLE_SCHEMA = '{database}'
		"""

DB_LIST_QUERY = """
		SELECT
		    SCHEMA_NAME
		  FROM information_schema.schemata
		  WHERE SCHEMA_NAME NOT IN ('mysql', 'performance_schema', 'information_schema')
		"""

TABLES_VERSION_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_version"),
    "The version number of the table's .frm file",
    ("schema", "table", "type", "engine", "row_format", "create_options"),
)
TABLES_ROWS_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_rows"),
    "The estimated number of rows in the table from information_schema.tables",
    ("schema", "table"),
)
TABLES_SIZE_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_size"),
    "The size of the table components from information_schema.tables",
    ("schema", "table", "component"),
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


def _number(value: Any) -> int:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode()
    return int(value)


class ScrapeTableSchema(Scraper):
    """Collects from information_schema.tables."""

    name = INFORMATION_SCHEMA + ".tables"
    help = "Collect metrics from information_schema.tables"
    version = 5.1

    def __init__(self, databases: str = "*") -> None:
        self.databases = databases

    def _database_list(self, db: Any) -> list[str]:
        if self.databases == "*":
            _, rows = query_rows(db, DB_LIST_QUERY)
            return [_text(row[0]) for row in rows]
        return self.databases.split(",")

    def scrape(self, db: Any) -> Iterator[Metric]:
        for database in self._database_list(db):
            _, rows = query_rows(db, TABLE_SCHEMA_QUERY.format(database=database))
            for (
                schema,
                table,
                table_type,
                engine,
                version,
                row_format,
                table_rows,
                data_length,
                index_length,
                data_free,
                create_options,
            ) in rows:
                schema, table = _text(schema), _text(table)
                yield Metric(
                    TABLES_VERSION_DESC,
                    ValueType.GAUGE,
                    _number(version),
                    (
                        schema,
                        table,
                        _text(table_type),
                        _text(engine),
                        _text(row_format),
                        _text(create_options),
                    ),
                )
                yield Metric(TABLES_ROWS_DESC, ValueType.GAUGE, _number(table_rows), (schema, table))
                for component, size in (
                    ("data_length", data_length),
                    ("index_length", index_length),
                    ("data_free", data_free),
                ):
                    yield Metric(
                        TABLES_SIZE_DESC, ValueType.GAUGE, _number(size), (schema, table, component)
                    )