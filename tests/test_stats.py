"""
Tests for distribution summaries and the normal-inverse table.

Verifies that:
- Median, average and both standard deviations match hand-computed values
- Outliers fall strictly outside the z control limits and are keyed by record
- Adjusted statistics exist only when outliers were trimmed
- norm_inverse returns tabulated values exactly and interpolates in between
"""

import math

import numpy as np
import pytest
from scipy.stats import norm

from supply_plan.errors import UndefinedStatistic
from supply_plan.stats import (
    NORMAL_TABLE,
    norm_inverse,
    summarize,
    summarize_values,
)


class TestSummary:
    def test_median_odd(self) -> None:
        assert summarize_values([3, 1, 2]).median == 2

    def test_median_even(self) -> None:
        assert summarize_values([1, 2, 3, 4]).median == 2.5

    def test_moments(self) -> None:
        summary = summarize_values([2, 4, 4, 4, 5, 5, 7, 9])
        assert summary.count == 8
        assert summary.average == pytest.approx(5.0)
        assert summary.std_dev_population == pytest.approx(2.0)
        assert summary.std_dev_sample == pytest.approx(math.sqrt(32 / 7))
        assert summary.max == 9
        assert summary.min == 2
        assert summary.lcl == pytest.approx(5.0 - 3 * math.sqrt(32 / 7))
        assert summary.ucl == pytest.approx(5.0 + 3 * math.sqrt(32 / 7))

    def test_no_outliers_leaves_adjusted_unset(self) -> None:
        summary = summarize_values([2, 4, 4, 4, 5, 5, 7, 9])
        assert not summary.has_outliers
        assert summary.average_adjusted is None
        assert summary.std_dev_adjusted is None
        assert summary.effective_average == summary.average
        assert summary.effective_std_dev == summary.std_dev_sample

    def test_outlier_with_narrow_limits(self) -> None:
        summary = summarize_values([10, 10, 10, 10, 100], z=1.5)
        assert summary.outliers == {4: 100.0}
        assert summary.average_adjusted == pytest.approx(10.0)
        assert summary.std_dev_adjusted == pytest.approx(0.0)
        assert summary.effective_average == pytest.approx(10.0)

    def test_outlier_at_default_limits(self) -> None:
        summary = summarize_values([10] * 20 + [100])
        assert summary.outliers == {20: 100.0}
        assert summary.average == pytest.approx(300 / 21)
        assert summary.average_adjusted == pytest.approx(10.0)

    def test_outliers_keyed_by_record(self) -> None:
        jobs = {f"J{i}": {"days": 10} for i in range(20)}
        jobs["J-late"] = {"days": 100}
        summary = summarize(jobs, "days")
        assert list(summary.outliers) == ["J-late"]

    def test_single_value_is_undefined(self) -> None:
        with pytest.raises(UndefinedStatistic):
            summarize_values([42])

    def test_empty_is_undefined(self) -> None:
        with pytest.raises(UndefinedStatistic):
            summarize_values([])


class TestNormInverse:
    def test_median(self) -> None:
        assert norm_inverse(0.5) == 0.0

    @pytest.mark.parametrize(
        "p, z",
        [(0.985, 2.17), (0.015, -2.17), (0.95, 1.64), (0.975, 1.96), (0.99, 2.33)],
    )
    def test_tabulated_values(self, p: float, z: float) -> None:
        assert norm_inverse(p) == z

    def test_interpolates_between_neighbours(self) -> None:
        assert norm_inverse(0.9875) == pytest.approx((2.17 + 2.33) / 2)

    def test_interpolation_matches_table(self) -> None:
        for (p_lo, z_lo), (p_hi, z_hi) in zip(NORMAL_TABLE, NORMAL_TABLE[1:]):
            mid = (p_lo + p_hi) / 2
            assert norm_inverse(mid) == pytest.approx((z_lo + z_hi) / 2)

    def test_table_is_monotonic(self) -> None:
        probabilities = [p for p, _ in NORMAL_TABLE]
        scores = [z for _, z in NORMAL_TABLE]
        assert probabilities == sorted(probabilities)
        assert scores == sorted(scores)

    def test_table_is_symmetric(self) -> None:
        table = dict(NORMAL_TABLE)
        assert table[0.025] == -table[0.975]

    @pytest.mark.parametrize("p", [0.0, 1.0, 1e-12, -0.5, 1.5])
    def test_out_of_range(self, p: float) -> None:
        with pytest.raises(UndefinedStatistic):
            norm_inverse(p)

    def test_accuracy_in_body(self) -> None:
        for p in np.linspace(0.01, 0.99, 197):
            assert abs(norm_inverse(float(p)) - norm.ppf(p)) < 0.03
