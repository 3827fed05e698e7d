"""
Tests for the pandas adapters.
"""

import numpy as np
import pandas as pd
import pytest

from supply_plan.data import PlanningStrategy
from supply_plan.data.frames import dataset_from_frames, matrix_to_frame, records_from_frame
from supply_plan.matrix import Matrix
from supply_plan.planning import PlanningRun


@pytest.fixture
def frames() -> dict[str, pd.DataFrame]:
    return {
        "items": pd.DataFrame(
            {
                "item": ["A", "B"],
                "description": ["Widget", None],
                "strategy": ["Reactive Level Load - Fast", np.nan],
                "foq": [200, np.nan],
                "current_inventory": [50, 0],
            }
        ),
        "resources": pd.DataFrame({"resource": ["R"], "description": ["Press"]}),
        "calendar": pd.DataFrame(
            {
                "period": ["W1", "W2"],
                "days": [7, 7],
                "start_date": pd.to_datetime(["2024-01-01", "2024-01-08"]),
            }
        ),
        "forecast": pd.DataFrame(
            {"item": ["A", "A", "B"], "period": ["W1", "W2", "W2"], "quantity": [70, 140, 10]}
        ),
        "requirements": pd.DataFrame(
            {"resource": ["R", "R"], "item": ["A", "B"], "quantity": [0.5, 1.0]}
        ),
        "constraints": pd.DataFrame(
            {"resource": ["R", "R"], "period": ["W1", "W2"], "quantity": [100, 100]}
        ),
    }


class TestRecordsFromFrame:
    def test_index_column_becomes_key(self) -> None:
        frame = pd.DataFrame({"job": ["J1", "J2"], "qty": [np.int64(3), np.nan]})
        records = records_from_frame(frame, "job")
        assert records == {"J1": {"qty": 3.0}, "J2": {"qty": None}}
        assert type(records["J1"]["qty"]) is float

    def test_duplicate_keys_rejected(self) -> None:
        frame = pd.DataFrame({"job": ["J1", "J1"], "qty": [1, 2]})
        with pytest.raises(ValueError):
            records_from_frame(frame, "job")


class TestDatasetFromFrames:
    def test_builds_dataset(self, frames: dict[str, pd.DataFrame]) -> None:
        dataset = dataset_from_frames(**frames)

        assert dataset.items["A"].strategy is PlanningStrategy.REACTIVE_FAST
        assert dataset.items["B"].strategy is PlanningStrategy.NONE
        assert dataset.items["B"].foq == 0.0
        assert dataset.periods == ["W1", "W2"]
        assert dataset.calendar["W2"].start_date.isoformat() == "2024-01-08"
        assert dataset.validate() == []

    def test_runs_through_planning(self, frames: dict[str, pd.DataFrame]) -> None:
        dataset = dataset_from_frames(**frames)
        results = PlanningRun(dataset).execute()

        plan = results.horizontal_plans["A"]
        # 140 / 7 days * 8 days = 160 safety stock, 100 cycle stock
        assert plan.levels.total == 260
        assert list(plan.rows["Production Plan"]) == [280, 140]
        assert results.ryg["R", "W2"] == pytest.approx((0.5 * 140 + 10) / 100)


class TestMatrixToFrame:
    def test_labels(self) -> None:
        m = Matrix(["R1", "R2"], ["P1"], np.array([[1.5], [2.5]]))
        frame = matrix_to_frame(m)
        assert list(frame.index) == ["R1", "R2"]
        assert list(frame.columns) == ["P1"]
        assert frame.loc["R2", "P1"] == 2.5

    def test_frame_is_writable_copy(self) -> None:
        m = Matrix(["R1"], ["P1"], np.array([[1.0]]))
        frame = matrix_to_frame(m)
        frame.loc["R1", "P1"] = 9.0
        assert m["R1", "P1"] == 1.0
