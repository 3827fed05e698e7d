"""Distribution summaries with control-limit outlier trimming."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from supply_plan.errors import UndefinedStatistic
from supply_plan.matrix.core import Matrix
from supply_plan.matrix.ops import power, scalar_add, sum_columns

MIN_SAMPLES_FOR_VARIANCE = 2
DEFAULT_OUTLIER_Z = 3.0


@dataclass(frozen=True)
class StatisticalSummary:
    """
    Summary of one numeric field across a record set.

    `average_adjusted` and `std_dev_adjusted` are only set when at least one
    outlier was found; they describe the set with the outliers removed.
    """

    count: int
    average: float
    median: float
    max: float
    min: float
    std_dev_sample: float
    std_dev_population: float
    lcl: float
    ucl: float
    outliers: dict[Hashable, float] = field(default_factory=dict)
    average_adjusted: float | None = None
    std_dev_adjusted: float | None = None

    @property
    def has_outliers(self) -> bool:
        return len(self.outliers) > 0

    @property
    def effective_average(self) -> float:
        """Outlier-adjusted average when available, else the plain average."""
        if self.average_adjusted is not None:
            return self.average_adjusted
        return self.average

    @property
    def effective_std_dev(self) -> float:
        """Outlier-adjusted sample stddev when available, else the plain one."""
        if self.std_dev_adjusted is not None:
            return self.std_dev_adjusted
        return self.std_dev_sample


def _column(records: Mapping[Hashable, Mapping[str, Any]], field_name: str) -> Matrix:
    keys = list(records.keys())
    values = np.array([float(records[k][field_name]) for k in keys], dtype=np.float64)
    return Matrix(keys, (field_name,), values.reshape(len(keys), 1))


def average(column: Matrix) -> float:
    """Mean of a single-column matrix."""
    n = column.shape[0]
    if n == 0:
        raise UndefinedStatistic("Average of an empty data set")
    return sum_columns(column)[column.cols[0]] / n


def std_dev(column: Matrix, sample: bool = True, mean: float | None = None) -> float:
    """
    Standard deviation of a single-column matrix.

    Sample stddev divides by n - 1 and is undefined for fewer than two
    values; population stddev divides by n.
    """
    n = column.shape[0]
    if mean is None:
        mean = average(column)
    if sample and n < MIN_SAMPLES_FOR_VARIANCE:
        raise UndefinedStatistic(
            f"Sample standard deviation needs at least {MIN_SAMPLES_FOR_VARIANCE} values, got {n}"
        )
    if n == 0:
        raise UndefinedStatistic("Standard deviation of an empty data set")

    squared = power(scalar_add(column, -mean), 2)
    sum_squares = sum_columns(squared)[column.cols[0]]
    divisor = n - 1 if sample else n
    return float(np.sqrt(sum_squares / divisor))


def median(values: Iterable[float]) -> float:
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        raise UndefinedStatistic("Median of an empty data set")
    mid = n // 2
    if n % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def summarize(
    records: Mapping[Hashable, Mapping[str, Any]],
    field_name: str,
    z: float = DEFAULT_OUTLIER_Z,
) -> StatisticalSummary:
    """
    Gathers statistics of `field_name` across `records`.

    Outliers are values strictly outside average +/- z * sample stddev,
    keyed by record key. When any exist, the average and sample stddev are
    recomputed once over the remaining records.
    """
    column = _column(records, field_name)
    n = column.shape[0]
    if n < MIN_SAMPLES_FOR_VARIANCE:
        raise UndefinedStatistic(
            f"Cannot summarize {field_name!r}: need at least "
            f"{MIN_SAMPLES_FOR_VARIANCE} values, got {n}"
        )

    values = column.column(field_name)
    mean = average(column)
    s = std_dev(column, sample=True, mean=mean)
    p = std_dev(column, sample=False, mean=mean)
    lcl = mean - z * s
    ucl = mean + z * s

    outliers = {k: v for k, v in values.items() if v > ucl or v < lcl}

    average_adj: float | None = None
    std_dev_adj: float | None = None
    if outliers:
        trimmed = column.take_rows(k for k in column.rows if k not in outliers)
        average_adj = average(trimmed)
        std_dev_adj = std_dev(trimmed, sample=True, mean=average_adj)

    return StatisticalSummary(
        count=n,
        average=mean,
        median=median(values.values()),
        max=max(values.values()),
        min=min(values.values()),
        std_dev_sample=s,
        std_dev_population=p,
        lcl=lcl,
        ucl=ucl,
        outliers=outliers,
        average_adjusted=average_adj,
        std_dev_adjusted=std_dev_adj,
    )


def summarize_values(
    values: Iterable[float], z: float = DEFAULT_OUTLIER_Z, field_name: str = "value"
) -> StatisticalSummary:
    """Summarizes a plain sequence; outliers are keyed by position."""
    records = {i: {field_name: v} for i, v in enumerate(values)}
    return summarize(records, field_name, z)
