"""Shared building blocks for the scrapers: metric types, descriptors and query helpers."""

from __future__ import annotations

import abc
import enum
import logging
from contextlib import closing
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Sequence, Union

logger = logging.getLogger(__name__)

NAMESPACE = "mysql"
INFORMATION_SCHEMA = "info_schema"
PERFORMANCE_SCHEMA = "perf_schema"

# performance_schema timers are reported in picoseconds.
PICO_SECONDS = 1e12

USERSTAT_CHECK_QUERY = (
    "SHOW GLOBAL VARIABLES WHERE Variable_Name='userstat' "
    "OR Variable_Name='userstat_running'"
)


class ValueType(enum.Enum):
    """Kind of a sample value."""

    COUNTER = "counter"
    GAUGE = "gauge"
    UNTYPED = "untyped"


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty parts of a metric name with underscores."""
    if not name:
        return ""
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class Desc:
    """Describes a metric family: its name, help text and label names."""

    fq_name: str
    help: str
    variable_labels: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "variable_labels", tuple(self.variable_labels))


def _check_labels(desc: Desc, label_values: Sequence[str]) -> tuple[str, ...]:
    values = tuple(label_values)
    if len(values) != len(desc.variable_labels):
        raise ValueError(
            f"{desc.fq_name}: expected {len(desc.variable_labels)} label values, "
            f"got {len(values)}"
        )
    return values


@dataclass(frozen=True)
class Metric:
    """A single constant sample."""

    desc: Desc
    value_type: ValueType
    value: float
    label_values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "label_values", _check_labels(self.desc, self.label_values))
        object.__setattr__(self, "value", float(self.value))

    def labels(self) -> dict[str, str]:
        """Label names mapped to their values."""
        return dict(zip(self.desc.variable_labels, self.label_values))


@dataclass(frozen=True)
class Histogram:
    """A constant histogram with cumulative bucket counts keyed by upper bound."""

    desc: Desc
    count: int
    sum: float
    buckets: Mapping[float, int] = field(default_factory=dict)
    label_values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "label_values", _check_labels(self.desc, self.label_values))
        object.__setattr__(self, "buckets", dict(sorted(self.buckets.items())))

    def labels(self) -> dict[str, str]:
        """Label names mapped to their values."""
        return dict(zip(self.desc.variable_labels, self.label_values))


Sample = Union[Metric, Histogram]


class Scraper(abc.ABC):
    """Collects metrics from one MySQL source.

    ``name`` is unique among scrapers, ``help`` describes it and ``version``
    is the oldest MySQL version it supports.
    """

    name: str = ""
    help: str = ""
    version: float = 0.0

    @abc.abstractmethod
    def scrape(self, db: Any) -> Iterator[Sample]:
        """Yield metrics read through the DB-API connection ``db``."""


def query_rows(
    db: Any, query: str, params: Sequence[Any] | None = None
) -> tuple[list[str], list[tuple[Any, ...]]]:
    """Run a query on a DB-API connection and return its column names and rows."""
    with closing(db.cursor()) as cursor:
        if params is None:
            cursor.execute(query)
        else:
            cursor.execute(query, params)
        columns = [column[0] for column in cursor.description or ()]
        rows = [tuple(row) for row in cursor.fetchall()]
    return columns, rows


def userstat_enabled(db: Any, what: str) -> bool:
    """Tell whether detailed ``what`` statistics (userstat) are switched on."""
    try:
        _, rows = query_rows(db, USERSTAT_CHECK_QUERY)
    except Exception:
        logger.debug("Detailed %s stats are not available.", what)
        return False
    if not rows:
        logger.debug("Detailed %s stats are not available.", what)
        return False
    var_name, var_value = rows[0][0], rows[0][1]
    if isinstance(var_value, bytes):
        var_value = var_value.decode()
    if var_value == "OFF":
        logger.debug("MySQL variable is OFF: %s", var_name)
        return False
    return True