"""
Relational primitives over record sets.

A record set is a mapping of record key -> record, where each record is a
mapping of field name -> value:

    {
        "F-1": {"item": "43346", "period": "202308", "quantity": 6000},
        "F-2": {"item": "43346", "period": "202309", "quantity": 6500},
    }

All functions return new record sets and preserve the input key order.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable, Hashable, Iterable, Mapping
from datetime import date, datetime
from typing import Any

import numpy as np

from supply_plan.errors import UnsupportedPredicate
from supply_plan.matrix.core import Matrix

Record = Mapping[str, Any]
RecordSet = Mapping[Hashable, Record]

SECONDS_PER_DAY = 60 * 60 * 24


def _contains(value: Any, allowed: Any) -> bool:
    return value in allowed


COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    ">": operator.gt,
    "<": operator.lt,
    "in": _contains,
    "includes": _contains,
}


def select(
    records: RecordSet, field: str, value: Any, comparison: str = "=="
) -> dict[Hashable, Record]:
    """
    Keeps the records whose `field` satisfies `comparison` against `value`.

    Supported comparisons: "==", ">", "<" and "in" (alias "includes"), where
    "in" tests membership of the record's field value in `value`.
    """
    compare = COMPARISONS.get(comparison)
    if compare is None:
        raise UnsupportedPredicate(
            f"Comparison {comparison!r} not allowed; use one of {sorted(COMPARISONS)}"
        )
    return {key: rec for key, rec in records.items() if compare(rec.get(field), value)}


def project(records: RecordSet, fields: Iterable[str]) -> dict[Hashable, dict[str, Any]]:
    """Keeps only the named fields of every record; absent fields are skipped."""
    fields = list(fields)
    return {
        key: {f: rec[f] for f in fields if f in rec} for key, rec in records.items()
    }


def distinct_values(records: RecordSet, field: str) -> list[Any]:
    """Distinct values of `field`, in order of first appearance."""
    seen: dict[Any, None] = {}
    for rec in records.values():
        seen.setdefault(rec[field], None)
    return list(seen)


def take(records: RecordSet, keys: Iterable[Hashable]) -> dict[Hashable, Record]:
    """Keeps the records whose key is in `keys`."""
    wanted = set(keys)
    return {key: rec for key, rec in records.items() if key in wanted}


def remove(records: RecordSet, keys: Iterable[Hashable]) -> dict[Hashable, Record]:
    """Drops the records whose key is in `keys`."""
    dropped = set(keys)
    return {key: rec for key, rec in records.items() if key not in dropped}


def count(records: RecordSet) -> int:
    return len(records)


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole days from `start` to `end`, rounded to the nearest day."""
    if isinstance(start, datetime) != isinstance(end, datetime):
        start = _as_datetime(start)
        end = _as_datetime(end)
    seconds = (end - start).total_seconds()
    return int(math.floor(seconds / SECONDS_PER_DAY + 0.5))


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def build_matrix(
    records: RecordSet, row_field: str, col_field: str, value_field: str
) -> Matrix:
    """
    Aggregates a record set into a complete matrix.

    Rows are the distinct values of `row_field`, columns the distinct values
    of `col_field` (first-appearance order). Every cell starts at zero and
    each record adds its `value_field` to the cell at (row, col).
    """
    rows = distinct_values(records, row_field)
    cols = distinct_values(records, col_field)
    row_idx = {r: i for i, r in enumerate(rows)}
    col_idx = {c: j for j, c in enumerate(cols)}

    values = np.zeros((len(rows), len(cols)), dtype=np.float64)
    for rec in records.values():
        values[row_idx[rec[row_field]], col_idx[rec[col_field]]] += rec[value_field]

    return Matrix(rows, cols, values)
