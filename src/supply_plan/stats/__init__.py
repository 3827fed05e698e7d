"""Distribution summaries and the normal-inverse table."""

from supply_plan.stats.normal import NORMAL_TABLE, norm_inverse
from supply_plan.stats.summary import (
    StatisticalSummary,
    average,
    median,
    std_dev,
    summarize,
    summarize_values,
)

__all__ = [
    "NORMAL_TABLE",
    "StatisticalSummary",
    "average",
    "median",
    "norm_inverse",
    "std_dev",
    "summarize",
    "summarize_values",
]
