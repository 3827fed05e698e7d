"""Key-indexed matrices and their algebra."""

from supply_plan.matrix.core import Matrix
from supply_plan.matrix.ops import (
    add,
    elementwise_divide,
    multiply,
    power,
    scalar_add,
    scalar_multiply,
    subtract,
    sum_columns,
)

__all__ = [
    "Matrix",
    "add",
    "elementwise_divide",
    "multiply",
    "power",
    "scalar_add",
    "scalar_multiply",
    "subtract",
    "sum_columns",
]
