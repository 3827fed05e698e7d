"""
Table-driven inverse of the standard normal CDF.

The table holds standard-normal quantiles rounded to two decimals, the way
z-tables are printed, over a fixed probability grid:

    1e-9 ... 1e-4, 0.0005          decade steps in the extreme tail
    0.001 ... 0.009                0.001 steps
    0.010 ... 0.045                0.005 steps
    0.05 ... 0.95                  0.01 steps
    0.955 ... 0.99                 0.005 steps
    0.991 ... 0.999, then the mirrored extreme tail up to 1 - 1e-9

Probabilities on the grid return the tabulated z exactly (0.985 -> 2.17).
Anything in between is linearly interpolated between the two neighbouring
grid points.

Known limitation: linear interpolation of a curved function. Inside
[0.01, 0.99] the error against the exact quantile stays below about 0.03 in
z (two-decimal rounding included); between the decade-spaced points of the
extreme tails it can reach about 0.15.
"""

from __future__ import annotations

from bisect import bisect_left

from scipy.stats import norm

from supply_plan.errors import UndefinedStatistic

_EXTREME_TAIL = (1e-9, 1e-8, 1e-7, 1e-6, 1e-5)


def _probability_grid() -> list[float]:
    lower = list(_EXTREME_TAIL)
    lower.append(1 / 10_000)
    lower.append(5 / 10_000)
    lower.extend(k / 1000 for k in range(1, 10))
    lower.extend(k / 1000 for k in range(10, 50, 5))

    body = [k / 1000 for k in range(50, 960, 10)]

    upper = [k / 1000 for k in range(955, 995, 5)]
    upper.extend(k / 1000 for k in range(991, 1000))
    upper.append(9995 / 10_000)
    upper.append(9999 / 10_000)
    upper.extend(1 - p for p in reversed(_EXTREME_TAIL))

    return sorted(set(lower + body + upper))


NORMAL_TABLE: tuple[tuple[float, float], ...] = tuple(
    (p, round(float(norm.ppf(p)), 2) + 0.0) for p in _probability_grid()
)

_TABLE_P = [p for p, _ in NORMAL_TABLE]
_TABLE_Z = [z for _, z in NORMAL_TABLE]
_EXACT = dict(NORMAL_TABLE)


def norm_inverse(p: float) -> float:
    """
    Returns the z-score whose standard-normal cumulative probability is `p`.

    Raises UndefinedStatistic when `p` lies outside the tabulated range
    [1e-9, 1 - 1e-9].
    """
    exact = _EXACT.get(p)
    if exact is not None:
        return exact

    if not (_TABLE_P[0] < p < _TABLE_P[-1]):
        raise UndefinedStatistic(
            f"Probability {p} outside tabulated range [{_TABLE_P[0]}, {_TABLE_P[-1]}]"
        )

    hi = bisect_left(_TABLE_P, p)
    lo = hi - 1
    p_lo, p_hi = _TABLE_P[lo], _TABLE_P[hi]
    z_lo, z_hi = _TABLE_Z[lo], _TABLE_Z[hi]
    return z_lo + (p - p_lo) * (z_hi - z_lo) / (p_hi - p_lo)
