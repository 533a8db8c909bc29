"""Tablespace metrics from information_schema.innodb_(sys_)tablespaces."""

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

INNODB_TABLESPACES_TABLENAME_QUERY = """
	SELECT
	    table_name
	  FROM information_schema.tables
	  WHERE table_name = 'INNODB_SYS_TABLESPACES'
	    OR table_name = 'INNODB_TABLESPACES'
	"""

INNODB_TABLESPACES_QUERY = """
	SELECT
	    SPACE,
	    NAME,
	    ifnull((SELECT column_name
			FROM information_schema.COLUMNS
			WHERE TABLE_SCHEMA = 'information_schema'
			  AND TABLE_NAME = '{table}'
			  AND COLUMN_NAME = 'FILE_FORMAT' LIMIT 1), 'NONE') as FILE_FORMAT,
	    ifnull(ROW_FORMAT, 'NONE') as ROW_FORMAT,
	    ifnull(SPACE_TYPE, 'NONE') as SPACE_TYPE,
	    FILE_SIZE,
	    ALLOCATED_SIZE
	  FROM information_schema.`{table}`"""

TABLESPACE_TABLE_NAMES = ("INNODB_SYS_TABLESPACES", "INNODB_TABLESPACES")

TABLESPACE_INFO_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "innodb_tablespace_space_info"),
    "The Tablespace information and Space ID.",
    ("tablespace_name", "file_format", "row_format", "space_type"),
)
TABLESPACE_FILE_SIZE_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "innodb_tablespace_file_size_bytes"),
    "The apparent size of the file, which represents the maximum size of the file, uncompressed.",
    ("tablespace_name",),
)
TABLESPACE_ALLOCATED_SIZE_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "innodb_tablespace_allocated_size_bytes"),
    "The actual size of the file, which is the amount of space allocated on disk.",
    ("tablespace_name",),
)


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


class ScrapeInfoSchemaInnodbTablespaces(Scraper):
    """Collects from information_schema.innodb_sys_tablespaces."""

    name = INFORMATION_SCHEMA + ".innodb_tablespaces"
    help = "Collect metrics from information_schema.innodb_sys_tablespaces"
    version = 5.7

    def scrape(self, db: Any) -> Iterator[Metric]:
        _, name_rows = query_rows(db, INNODB_TABLESPACES_TABLENAME_QUERY)
        if not name_rows:
            raise LookupError("no rows in result set")
        table_name = _text(name_rows[0][0])
        if table_name not in TABLESPACE_TABLE_NAMES:
            raise LookupError(
                "Couldn't find INNODB_SYS_TABLESPACES or INNODB_TABLESPACES in information_schema."
            )

        _, rows = query_rows(db, INNODB_TABLESPACES_QUERY.format(table=table_name))
        for space, tablespace, file_format, row_format, space_type, file_size, allocated in rows:
            tablespace = _text(tablespace)
            yield Metric(
                TABLESPACE_INFO_DESC,
                ValueType.GAUGE,
                float(space),
                (tablespace, _text(file_format), _text(row_format), _text(space_type)),
            )
            yield Metric(TABLESPACE_FILE_SIZE_DESC, ValueType.GAUGE, float(file_size), (tablespace,))
            yield Metric(
                TABLESPACE_ALLOCATED_SIZE_DESC, ValueType.GAUGE, float(allocated), (tablespace,)
            )