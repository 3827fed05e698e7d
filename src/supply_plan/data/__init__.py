"""Planning data model, record-set primitives and DataFrame adapters."""

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
from supply_plan.data.records import (
    build_matrix,
    count,
    days_between,
    distinct_values,
    project,
    remove,
    select,
    take,
)

__all__ = [
    "ConstraintEntry",
    "ForecastEntry",
    "Item",
    "Period",
    "PlanningDataSet",
    "PlanningStrategy",
    "RequirementEntry",
    "Resource",
    "build_matrix",
    "count",
    "days_between",
    "distinct_values",
    "project",
    "remove",
    "select",
    "take",
]
