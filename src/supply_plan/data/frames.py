"""
pandas adapters between already-parsed tables and the planning model.

File parsing stays with the caller; these helpers only reshape DataFrames.
Expected columns (extra columns are ignored):

    items:        item, description, strategy, foq, current_inventory
    resources:    resource, description
    calendar:     period, days, [start_date]
    forecast:     item, period, quantity
    requirements: resource, item, quantity, [routing_version]
    constraints:  resource, period, quantity
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

import numpy as np
import pandas as pd

from supply_plan.data.dataset import PlanningDataSet
from supply_plan.data.model import (
    ConstraintEntry,
    ForecastEntry,
    Item,
    Period,
    PlanningStrategy,
    RequirementEntry,
    Resource,
)
from supply_plan.matrix.core import Matrix


def _native(value: Any) -> Any:
    """Unwraps numpy scalars and maps NaN/NaT to None."""
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def records_from_frame(
    frame: pd.DataFrame, index_col: str | None = None
) -> dict[Hashable, dict[str, Any]]:
    """
    Converts a DataFrame into a record set.

    With `index_col`, that column becomes the record key and is removed from
    the record; otherwise the frame's index is used.
    """
    if index_col is not None:
        frame = frame.set_index(index_col)
    if not frame.index.is_unique:
        raise ValueError("Record keys must be unique")

    result: dict[Hashable, dict[str, Any]] = {}
    for key, row in zip(frame.index, frame.to_dict(orient="records")):
        result[_native(key)] = {str(k): _native(v) for k, v in row.items()}
    return result


def _number(value: Any, default: float = 0.0) -> float:
    return default if value is None else float(value)


def dataset_from_frames(
    items: pd.DataFrame,
    resources: pd.DataFrame,
    calendar: pd.DataFrame,
    forecast: pd.DataFrame,
    requirements: pd.DataFrame,
    constraints: pd.DataFrame,
) -> PlanningDataSet:
    """Builds a PlanningDataSet from the six planning tables."""
    dataset = PlanningDataSet()

    for item_id, rec in records_from_frame(items, "item").items():
        dataset.add_item(
            Item(
                id=item_id,
                description=rec.get("description") or "",
                strategy=PlanningStrategy.parse(rec.get("strategy")),
                foq=_number(rec.get("foq")),
                current_inventory=_number(rec.get("current_inventory")),
            )
        )

    for resource_id, rec in records_from_frame(resources, "resource").items():
        dataset.add_resource(
            Resource(id=resource_id, description=rec.get("description") or "")
        )

    for period_id, rec in records_from_frame(calendar, "period").items():
        start = rec.get("start_date")
        if isinstance(start, pd.Timestamp):
            start = start.date()
        dataset.add_period(
            Period(id=period_id, days=_number(rec.get("days")), start_date=start)
        )

    for key, rec in records_from_frame(forecast).items():
        dataset.add_forecast(
            ForecastEntry(
                item=rec["item"],
                period=rec["period"],
                quantity=_number(rec.get("quantity")),
            ),
            key=key,
        )

    for key, rec in records_from_frame(requirements).items():
        dataset.add_requirement(
            RequirementEntry(
                resource=rec["resource"],
                item=rec["item"],
                quantity=_number(rec.get("quantity")),
                routing_version=str(rec.get("routing_version") or ""),
            ),
            key=key,
        )

    for key, rec in records_from_frame(constraints).items():
        dataset.add_constraint(
            ConstraintEntry(
                resource=rec["resource"],
                period=rec["period"],
                quantity=_number(rec.get("quantity")),
            ),
            key=key,
        )

    return dataset


def matrix_to_frame(matrix: Matrix) -> pd.DataFrame:
    """Rows become the index, columns the frame columns."""
    return pd.DataFrame(
        matrix.values.copy(), index=list(matrix.rows), columns=list(matrix.cols)
    )
