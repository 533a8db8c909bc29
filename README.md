# mysqld_metrics

Scrapers that read statistics from a running MySQL or MariaDB server and
turn them into Prometheus-style metric objects. Each scraper targets one
source table, runs its queries over a DB-API 2.0 connection you supply and
yields the metrics it produced. The package has no dependencies beyond the
Python standard library; bring your own database driver.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Scrapers

| Module | Scraper | Source |
| --- | --- | --- |
| `mysqld_metrics.processlist` | `ScrapeProcesslist` | `information_schema.processlist` |
| `mysqld_metrics.innodb_tablespaces` | `ScrapeInfoSchemaInnodbTablespaces` | `information_schema.innodb_sys_tablespaces` / `innodb_tablespaces` |
| `mysqld_metrics.query_response_time` | `ScrapeQueryResponseTime` | `information_schema.query_response_time`, `_read`, `_write` |
| `mysqld_metrics.tablestats` | `ScrapeTableStat` | `information_schema.table_statistics` |
| `mysqld_metrics.schemastats` | `ScrapeSchemaStat` | `information_schema.table_statistics`, summed per schema |
| `mysqld_metrics.userstats` | `ScrapeUserStat` | `information_schema.user_statistics` |
| `mysqld_metrics.tables` | `ScrapeTableSchema` | `information_schema.tables` |
| `mysqld_metrics.mysql_user` | `ScrapeUser` | `mysql.user` |
| `mysqld_metrics.events_statements` | `ScrapePerfEventsStatements` | `performance_schema.events_statements_summary_by_digest` |
| `mysqld_metrics.file_instances` | `ScrapePerfFileInstances` | `performance_schema.file_summary_by_instance` |
| `mysqld_metrics.index_io_waits` | `ScrapePerfIndexIOWaits` | `performance_schema.table_io_waits_summary_by_index_usage` |

Every scraper is a `mysqld_metrics.core.Scraper`. It carries a unique
`name`, a `help` text and a `version` (the oldest MySQL version it
supports), and exposes `scrape(db)`, a generator over the metrics read
through the DB-API connection `db`.

## Usage

```python
from mysqld_metrics.processlist import ScrapeProcesslist
from mysqld_metrics.events_statements import ScrapePerfEventsStatements

conn = ...  # a DB-API 2.0 connection to your MySQL server

processlist = ScrapeProcesslist(min_time=0, processes_by_user=True, processes_by_host=True)
for metric in processlist.scrape(conn):
    print(metric.desc.fq_name, metric.labels(), metric.value)

statements = ScrapePerfEventsStatements(limit=250, time_limit=86400, digest_text_limit=120)
for metric in statements.scrape(conn):
    print(metric.desc.fq_name, metric.labels(), metric.value)
```

Several scrapers take their options as constructor arguments:

- `ScrapeProcesslist(min_time=0, processes_by_user=True, processes_by_host=True)`:
  minimum thread time to count, and whether to report process counts per
  user and per client host. Commands and states are turned into label
  values by `sanitize_state`.
- `ScrapeTableSchema(databases="*")`: a comma separated list of schemas,
  or `"*"` for every schema other than `mysql`, `performance_schema` and
  `information_schema`.
- `ScrapeUser(privileges=False)`: also report every privilege column of
  `mysql.user` as a gauge (`"Y"` is 1, `"N"` is 0; see `parse_privilege`).
- `ScrapePerfEventsStatements(limit=250, time_limit=86400, digest_text_limit=120)`:
  number of digests, maximum age in seconds of `LAST_SEEN`, and digest text
  length.
- `ScrapePerfFileInstances(file_filter=".*", remove_prefix="/var/lib/mysql/")`:
  a regular expression on `FILE_NAME`, and a path prefix stripped from the
  reported file names.

Behaviour worth knowing:

- `ScrapeTableStat`, `ScrapeSchemaStat` and `ScrapeUserStat` yield nothing
  when the server's `userstat` variable is off or cannot be read.
- `ScrapeQueryResponseTime` yields nothing when
  `@@query_response_time_stats` is off or unavailable. A failure reading
  the total table is raised; the read and write tables are skipped when
  they cannot be read.
- `ScrapeInfoSchemaInnodbTablespaces` raises `LookupError` when neither
  tablespace table exists.
- `ScrapeUserStat` reports columns it does not know as untyped metrics.
- Timers from `performance_schema` are converted from picoseconds to
  seconds.

## Metric objects

`mysqld_metrics.core` defines:

- `ValueType`: `COUNTER`, `GAUGE` or `UNTYPED`.
- `Desc`: a metric family's `fq_name`, `help` and `variable_labels`.
- `Metric`: one sample with `desc`, `value_type`, `value` (a float) and
  `label_values`; `labels()` maps label names to values.
- `Histogram`: `desc`, `count`, `sum` and cumulative `buckets` keyed by
  upper bound, also with `labels()`.

Both raise `ValueError` when the number of label values does not match the
descriptor.

Helpers for writing further scrapers: `build_fq_name(namespace, subsystem, name)`
joins the non-empty name parts with underscores, `query_rows(db, query, params)`
runs a query and returns its column names and a list of rows, and
`userstat_enabled(db, what)` tells whether the server's `userstat` variable
is on.

## What this package does not do

It only produces metric objects in memory. It does not serve an HTTP
metrics endpoint, render the Prometheus text exposition format, open or
manage database connections, or provide a command-line program; the
scrapers cover only the tables listed above.