"""
Matrix algebra over key-indexed matrices.

Every binary operation pairs cells by key, never by position: the right-hand
operand is re-indexed onto the left-hand operand's key order before the numpy
kernel runs. Results take the left-hand operand's key order.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING

import numpy as np

from supply_plan.errors import DimensionMismatch, UndefinedStatistic
from supply_plan.matrix.core import Matrix

if TYPE_CHECKING:
    from numpy.typing import NDArray


def _aligned(a: Matrix, b: Matrix, operation: str) -> NDArray[np.float64]:
    """Returns b's values laid out in a's (row, col) order."""
    if set(a.rows) != set(b.rows) or set(a.cols) != set(b.cols):
        raise DimensionMismatch(
            f"Invalid matrix dimensions for {operation}: "
            f"{a.shape} with keys {a.rows!r} x {a.cols!r} vs "
            f"{b.shape} with keys {b.rows!r} x {b.cols!r}"
        )
    row_idx = [b.row_index(k) for k in a.rows]
    col_idx = [b.col_index(k) for k in a.cols]
    return b.values[np.ix_(row_idx, col_idx)]


def multiply(a: Matrix, b: Matrix) -> Matrix:
    """
    Matrix product a x b.

    a's column keys must be exactly b's row keys. Each cell (i, j) is the sum
    over shared keys k of a[i, k] * b[k, j].
    """
    if len(a.cols) != len(b.rows) or set(a.cols) != set(b.rows):
        raise DimensionMismatch(
            "Invalid matrix dimensions for multiplication: "
            f"{len(a.cols)} columns {a.cols!r} vs {len(b.rows)} rows {b.rows!r}"
        )
    b_idx = [b.row_index(k) for k in a.cols]
    return Matrix(a.rows, b.cols, a.values @ b.values[b_idx, :])


def subtract(a: Matrix, b: Matrix) -> Matrix:
    return Matrix(a.rows, a.cols, a.values - _aligned(a, b, "subtraction"))


def elementwise_divide(a: Matrix, b: Matrix) -> Matrix:
    """
    Cell-by-cell a / b.

    A zero divisor raises UndefinedStatistic naming the first offending cell.
    """
    divisor = _aligned(a, b, "division")
    zeros = np.argwhere(divisor == 0.0)
    if len(zeros) > 0:
        i, j = zeros[0]
        raise UndefinedStatistic(
            f"Division by zero at ({a.rows[i]!r}, {a.cols[j]!r})"
        )
    return Matrix(a.rows, a.cols, a.values / divisor)


def scalar_multiply(a: Matrix, scalar: float) -> Matrix:
    return Matrix(a.rows, a.cols, a.values * scalar)


def scalar_add(a: Matrix, scalar: float) -> Matrix:
    return Matrix(a.rows, a.cols, a.values + scalar)


def power(a: Matrix, exponent: float) -> Matrix:
    return Matrix(a.rows, a.cols, np.power(a.values, exponent))


def sum_columns(a: Matrix) -> dict[Hashable, float]:
    """Row vector of column sums, keyed by column."""
    totals = np.sum(a.values, axis=0)
    return {c: float(v) for c, v in zip(a.cols, totals)}


def add(*matrices: Matrix) -> Matrix:
    """Elementwise sum of any number of same-keyed matrices."""
    if not matrices:
        raise ValueError("add() requires at least one matrix")
    first = matrices[0]
    total = np.array(first.values, dtype=np.float64)
    for m in matrices[1:]:
        total += _aligned(first, m, "addition")
    return Matrix(first.rows, first.cols, total)
