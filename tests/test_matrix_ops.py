"""
Tests for the key-indexed Matrix and its algebra.

Verifies that:
- Binary operations pair cells by key, not by position
- Mismatched keys raise DimensionMismatch
- Division by a zero cell raises UndefinedStatistic
- Multiplication is associative on exact (integer) data
"""

import numpy as np
import pytest

from supply_plan.errors import DimensionMismatch, UndefinedStatistic
from supply_plan.matrix import (
    Matrix,
    add,
    elementwise_divide,
    multiply,
    power,
    scalar_add,
    scalar_multiply,
    subtract,
    sum_columns,
)


@pytest.fixture
def a() -> Matrix:
    return Matrix(["r1", "r2"], ["x", "y", "z"], np.array([[1, 2, 3], [4, 5, 6]]))


@pytest.fixture
def b() -> Matrix:
    return Matrix(["x", "y", "z"], ["p", "q"], np.array([[1, 0], [2, 1], [0, 3]]))


@pytest.fixture
def c() -> Matrix:
    return Matrix(["p", "q"], ["s", "t"], np.array([[2, -1], [1, 4]]))


class TestMatrixCore:
    def test_every_declared_cell_exists(self) -> None:
        m = Matrix.zeros(["a", "b"], ["c", "d", "e"])
        assert m.shape == (2, 3)
        assert m["b", "e"] == 0.0
        assert m.is_zero()

    def test_values_are_read_only(self, a: Matrix) -> None:
        with pytest.raises(ValueError):
            a.values[0, 0] = 99.0

    def test_duplicate_keys_rejected(self) -> None:
        with pytest.raises(ValueError, match="row keys"):
            Matrix(["a", "a"], ["c"])

    def test_from_dict_fills_missing_cells(self) -> None:
        m = Matrix.from_dict({"a": {"x": 1.0}, "b": {"y": 2.0}})
        assert m.cols == ("x", "y")
        assert m["a", "y"] == 0.0
        assert m["b", "y"] == 2.0

    def test_get_defaults_for_unknown_keys(self, a: Matrix) -> None:
        assert a.get("r1", "y") == 2.0
        assert a.get("missing", "y", default=-1.0) == -1.0

    def test_take_rows_reorders_and_fills(self, a: Matrix) -> None:
        taken = a.take_rows(["r2", "r1", "r3"], fill=0.0)
        assert taken.rows == ("r2", "r1", "r3")
        assert taken.row("r2") == {"x": 4.0, "y": 5.0, "z": 6.0}
        assert taken.row("r3") == {"x": 0.0, "y": 0.0, "z": 0.0}

    def test_take_rows_without_fill_raises(self, a: Matrix) -> None:
        with pytest.raises(DimensionMismatch):
            a.take_rows(["r3"])

    def test_to_dict_round_trip(self, a: Matrix) -> None:
        assert Matrix.from_dict(a.to_dict()) == a


class TestMultiply:
    def test_product_values(self, a: Matrix, b: Matrix) -> None:
        result = multiply(a, b)
        assert result.rows == ("r1", "r2")
        assert result.cols == ("p", "q")
        # r1: [1,2,3] . [1,2,0] = 5, [1,2,3] . [0,1,3] = 11
        assert result["r1", "p"] == 5.0
        assert result["r1", "q"] == 11.0
        assert result["r2", "p"] == 14.0
        assert result["r2", "q"] == 23.0

    def test_aligns_by_key_not_position(self, a: Matrix, b: Matrix) -> None:
        shuffled = b.take_rows(["z", "x", "y"])
        assert multiply(a, shuffled) == multiply(a, b)

    def test_associativity(self, a: Matrix, b: Matrix, c: Matrix) -> None:
        left = multiply(multiply(a, b), c)
        right = multiply(a, multiply(b, c))
        assert left == right

    def test_mismatched_keys_raise(self, a: Matrix, c: Matrix) -> None:
        with pytest.raises(DimensionMismatch):
            multiply(a, c)

    def test_same_count_different_keys_raise(self, a: Matrix) -> None:
        other = Matrix(["x", "y", "w"], ["p"])
        with pytest.raises(DimensionMismatch):
            multiply(a, other)


class TestElementwise:
    def test_subtract_self_is_zero(self, a: Matrix) -> None:
        assert subtract(a, a).is_zero()

    def test_subtract_aligns_by_key(self, a: Matrix) -> None:
        reordered = a.take_rows(["r2", "r1"]).take_cols(["z", "y", "x"])
        assert subtract(a, reordered).is_zero()

    def test_subtract_mismatch_raises(self, a: Matrix, b: Matrix) -> None:
        with pytest.raises(DimensionMismatch):
            subtract(a, b)

    def test_divide(self) -> None:
        load = Matrix(["R"], ["P1", "P2"], np.array([[110.0, 50.0]]))
        capacity = Matrix(["R"], ["P2", "P1"], np.array([[100.0, 100.0]]))
        ratio = elementwise_divide(load, capacity)
        assert ratio["R", "P1"] == pytest.approx(1.1)
        assert ratio["R", "P2"] == pytest.approx(0.5)

    def test_divide_by_zero_cell_raises(self) -> None:
        load = Matrix(["R"], ["P1", "P2"], np.array([[10.0, 10.0]]))
        capacity = Matrix(["R"], ["P1", "P2"], np.array([[5.0, 0.0]]))
        with pytest.raises(UndefinedStatistic, match="P2"):
            elementwise_divide(load, capacity)

    def test_add_many(self, a: Matrix) -> None:
        total = add(a, a, a)
        assert total == scalar_multiply(a, 3)

    def test_add_requires_a_matrix(self) -> None:
        with pytest.raises(ValueError):
            add()


class TestScalarOps:
    def test_scalar_add_and_power(self) -> None:
        col = Matrix(["a", "b", "c"], ["v"], np.array([[1.0], [2.0], [3.0]]))
        centered = scalar_add(col, -2.0)
        squared = power(centered, 2)
        assert squared.column("v") == {"a": 1.0, "b": 0.0, "c": 1.0}

    def test_sum_columns(self, a: Matrix) -> None:
        assert sum_columns(a) == {"x": 5.0, "y": 7.0, "z": 9.0}

    def test_inputs_unchanged(self, a: Matrix) -> None:
        before = a.values.copy()
        scalar_multiply(a, 10)
        scalar_add(a, 10)
        assert np.array_equal(a.values, before)
