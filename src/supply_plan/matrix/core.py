"""Dense, key-indexed matrix used for all planning algebra."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

import numpy as np

from supply_plan.errors import DimensionMismatch

if TYPE_CHECKING:
    from numpy.typing import NDArray


class Matrix:
    """
    Row-key x column-key table of floats backed by a dense numpy array.

    Keys are kept in insertion order and mapped to array indices, so every
    declared (row, col) cell exists. Instances are immutable; operations in
    `supply_plan.matrix.ops` return new matrices.
    """

    __slots__ = ("_rows", "_cols", "_row_idx", "_col_idx", "_values")

    def __init__(
        self,
        rows: Sequence[Hashable],
        cols: Sequence[Hashable],
        values: NDArray[np.float64] | None = None,
    ) -> None:
        self._rows: tuple[Hashable, ...] = tuple(rows)
        self._cols: tuple[Hashable, ...] = tuple(cols)
        self._row_idx: dict[Hashable, int] = {k: i for i, k in enumerate(self._rows)}
        self._col_idx: dict[Hashable, int] = {k: j for j, k in enumerate(self._cols)}

        if len(self._row_idx) != len(self._rows):
            raise ValueError("Matrix row keys must be unique")
        if len(self._col_idx) != len(self._cols):
            raise ValueError("Matrix column keys must be unique")

        shape = (len(self._rows), len(self._cols))
        if values is None:
            array = np.zeros(shape, dtype=np.float64)
        else:
            array = np.array(values, dtype=np.float64).reshape(shape)
        array.flags.writeable = False
        self._values = array

    @classmethod
    def zeros(cls, rows: Iterable[Hashable], cols: Iterable[Hashable]) -> Matrix:
        return cls(list(rows), list(cols))

    @classmethod
    def from_dict(cls, data: Mapping[Hashable, Mapping[Hashable, float]]) -> Matrix:
        """
        Builds a matrix from a nested row -> col -> value mapping.

        Columns are the union of all inner keys in first-appearance order;
        cells missing from an inner mapping are zero.
        """
        rows = list(data.keys())
        cols: list[Hashable] = []
        seen: set[Hashable] = set()
        for inner in data.values():
            for col in inner:
                if col not in seen:
                    seen.add(col)
                    cols.append(col)

        col_idx = {c: j for j, c in enumerate(cols)}
        values = np.zeros((len(rows), len(cols)), dtype=np.float64)
        for i, row in enumerate(rows):
            for col, val in data[row].items():
                values[i, col_idx[col]] = val
        return cls(rows, cols, values)

    @property
    def rows(self) -> tuple[Hashable, ...]:
        return self._rows

    @property
    def cols(self) -> tuple[Hashable, ...]:
        return self._cols

    @property
    def values(self) -> NDArray[np.float64]:
        """Read-only view of the underlying array."""
        return self._values

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self._rows), len(self._cols))

    def row_index(self, key: Hashable) -> int:
        return self._row_idx[key]

    def col_index(self, key: Hashable) -> int:
        return self._col_idx[key]

    def has_row(self, key: Hashable) -> bool:
        return key in self._row_idx

    def has_col(self, key: Hashable) -> bool:
        return key in self._col_idx

    def __getitem__(self, key: tuple[Hashable, Hashable]) -> float:
        row, col = key
        return float(self._values[self._row_idx[row], self._col_idx[col]])

    def get(self, row: Hashable, col: Hashable, default: float = 0.0) -> float:
        i = self._row_idx.get(row)
        j = self._col_idx.get(col)
        if i is None or j is None:
            return default
        return float(self._values[i, j])

    def row(self, key: Hashable) -> dict[Hashable, float]:
        i = self._row_idx[key]
        return {c: float(v) for c, v in zip(self._cols, self._values[i, :])}

    def column(self, key: Hashable) -> dict[Hashable, float]:
        j = self._col_idx[key]
        return {r: float(v) for r, v in zip(self._rows, self._values[:, j])}

    def to_dict(self) -> dict[Hashable, dict[Hashable, float]]:
        """Nested row -> col -> value mapping, as consumed by renderers."""
        return {r: self.row(r) for r in self._rows}

    def take_rows(
        self, keys: Iterable[Hashable], fill: float | None = None
    ) -> Matrix:
        """
        Selects rows by key, in the order given.

        A key with no row raises DimensionMismatch unless `fill` is given, in
        which case the row is created with every cell set to `fill`.
        """
        keys = list(keys)
        values = np.empty((len(keys), len(self._cols)), dtype=np.float64)
        for i, key in enumerate(keys):
            src = self._row_idx.get(key)
            if src is not None:
                values[i, :] = self._values[src, :]
            elif fill is not None:
                values[i, :] = fill
            else:
                raise DimensionMismatch(f"Matrix has no row {key!r}")
        return Matrix(keys, self._cols, values)

    def take_cols(self, keys: Iterable[Hashable]) -> Matrix:
        """Selects columns by key, in the order given."""
        keys = list(keys)
        missing = [k for k in keys if k not in self._col_idx]
        if missing:
            raise DimensionMismatch(f"Matrix has no columns {missing!r}")
        idx = [self._col_idx[k] for k in keys]
        return Matrix(self._rows, keys, self._values[:, idx])

    def is_zero(self) -> bool:
        return bool(np.all(self._values == 0.0))

    def same_keys(self, other: Matrix) -> bool:
        return set(self._rows) == set(other.rows) and set(self._cols) == set(
            other.cols
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (
            self._rows == other.rows
            and self._cols == other.cols
            and np.array_equal(self._values, other.values)
        )

    def __repr__(self) -> str:
        return f"Matrix(rows={len(self._rows)}, cols={len(self._cols)})"
