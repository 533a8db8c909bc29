"""Scrapers that collect MySQL server statistics as Prometheus-style metrics."""

__version__ = "0.1.0"

__all__ = [
    "core",
    "processlist",
    "innodb_tablespaces",
    "query_response_time",
    "tablestats",
    "userstats",
    "schemastats",
    "events_statements",
    "file_instances",
    "mysql_user",
    "tables",
    "index_io_waits",
]