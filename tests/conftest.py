import pytest

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

PERIODS = [
    ("202308", 31),
    ("202309", 30),
    ("202310", 31),
    ("202311", 30),
    ("202312", 31),
    ("202401", 31),
]

FORECAST_43346 = [6000, 6500, 5900, 6800, 9000, 9400]
FORECAST_43337 = [3100, 1500, 3100, 1500, 1500, 1500]


@pytest.fixture
def planning_dataset() -> PlanningDataSet:
    """Three items, two constrained resources and one unconstrained resource."""
    dataset = PlanningDataSet()

    # 1. Calendar
    for period_id, days in PERIODS:
        dataset.add_period(Period(id=period_id, days=days))

    # 2. Items
    dataset.add_item(
        Item(
            id="43346",
            description="Flagship model",
            strategy=PlanningStrategy.REACTIVE_FAST,
            foq=2772,
            current_inventory=13000,
        )
    )
    dataset.add_item(
        Item(
            id="43337",
            description="Economy model",
            strategy=PlanningStrategy.REACTIVE_SLOW,
            foq=1001,
            current_inventory=0,
        )
    )
    dataset.add_item(
        Item(
            id="43348",
            description="Spare part",
            strategy=PlanningStrategy.NONE,
            current_inventory=-200,
        )
    )

    # 3. Resources
    dataset.add_resource(Resource(id="PRESS-1", description="Stamping press"))
    dataset.add_resource(Resource(id="PACK-1", description="Packing cell"))
    dataset.add_resource(Resource(id="LINE-2", description="Idle assembly line"))

    # 4. Forecast
    for (period_id, _), qty in zip(PERIODS, FORECAST_43346):
        dataset.add_forecast(ForecastEntry(item="43346", period=period_id, quantity=qty))
    for (period_id, _), qty in zip(PERIODS, FORECAST_43337):
        dataset.add_forecast(ForecastEntry(item="43337", period=period_id, quantity=qty))
    for period_id, _ in PERIODS:
        dataset.add_forecast(ForecastEntry(item="43348", period=period_id, quantity=100))

    # 5. Requirements (hours per unit)
    dataset.add_requirement(RequirementEntry("PRESS-1", "43346", 0.25, "R1"))
    dataset.add_requirement(RequirementEntry("PRESS-1", "43337", 0.5, "R1"))
    dataset.add_requirement(RequirementEntry("PACK-1", "43346", 0.125, "R2"))
    dataset.add_requirement(RequirementEntry("PACK-1", "43348", 1.0, "R1"))

    # 6. Constraints (available hours)
    for period_id, _ in PERIODS:
        dataset.add_constraint(ConstraintEntry("PRESS-1", period_id, 5000))
        dataset.add_constraint(ConstraintEntry("LINE-2", period_id, 400))

    return dataset


@pytest.fixture
def single_resource_dataset() -> PlanningDataSet:
    """One item building 110 units on one 1 h/unit resource with 100 h capacity."""
    dataset = PlanningDataSet()
    dataset.add_period(Period(id="P1", days=7))
    dataset.add_item(Item(id="A", current_inventory=0))
    dataset.add_resource(Resource(id="R"))
    dataset.add_forecast(ForecastEntry(item="A", period="P1", quantity=110))
    dataset.add_requirement(RequirementEntry(resource="R", item="A", quantity=1.0))
    dataset.add_constraint(ConstraintEntry(resource="R", period="P1", quantity=100))
    return dataset
