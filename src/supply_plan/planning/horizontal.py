"""
Horizontal Plan generation.

A horizontal plan lays planning metrics out as rows and calendar periods as
columns, one table per item:

                         |202308 |202309 |202310 |202311 |202312 |202401
    ----------------------------------------------------------------------
    Safety Stock Plan    |4800   |4800   |4800   |4800   |4800   |4800
    Cycle Stock Plan     |1386   |1386   |1386   |1386   |1386   |1386
    Level Load Plan      |0      |0      |0      |0      |0      |0
    Total Inventory Plan |6186   |6186   |6186   |6186   |6186   |6186
    Beginning Inventory  |13000  |7000   |6186   |6186   |6186   |6186
    Sales Forecast       |6000   |6500   |5900   |6800   |9000   |9400
    Production Plan      |0      |5686   |5900   |6800   |9000   |9400
    Ending Inventory     |7000   |6186   |6186   |6186   |6186   |6186

Periods are always visited in calendar order; each period's beginning
inventory is the previous period's ending inventory.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from supply_plan.config.loader import planning_parameters
from supply_plan.data.model import Item, PlanningStrategy
from supply_plan.errors import UndefinedStatistic
from supply_plan.matrix.core import Matrix

if TYPE_CHECKING:
    import pandas as pd

    from supply_plan.data.dataset import PlanningDataSet

SAFETY_STOCK = "Safety Stock Plan"
CYCLE_STOCK = "Cycle Stock Plan"
LEVEL_LOAD = "Level Load Plan"
TOTAL_INVENTORY = "Total Inventory Plan"
BEGINNING_INVENTORY = "Beginning Inventory"
SALES_FORECAST = "Sales Forecast"
PRODUCTION_PLAN = "Production Plan"
ENDING_INVENTORY = "Ending Inventory"

PLAN_ROWS = (
    SAFETY_STOCK,
    CYCLE_STOCK,
    LEVEL_LOAD,
    TOTAL_INVENTORY,
    BEGINNING_INVENTORY,
    SALES_FORECAST,
    PRODUCTION_PLAN,
    ENDING_INVENTORY,
)

DEFAULT_STRATEGY_POLICIES: dict[str, dict[str, float]] = {
    PlanningStrategy.REACTIVE_FAST.value: {
        "safety_stock_days": 8.0,
        "cycle_stock_fraction": 0.5,
    },
    PlanningStrategy.REACTIVE_SLOW.value: {
        "safety_stock_days": 20.0,
        "cycle_stock_fraction": 0.5,
    },
}


def round_half_up(value: float) -> float:
    """Rounds halves upward (2.5 -> 3, -2.5 -> -2)."""
    return float(math.floor(value + 0.5))


@dataclass(frozen=True)
class StockLevels:
    """Inventory targets held constant across an item's horizon."""

    safety_stock: float
    cycle_stock: float
    max_period: Hashable | None = None
    max_period_forecast: float = 0.0

    @property
    def total(self) -> float:
        return self.safety_stock + self.cycle_stock


@dataclass(frozen=True)
class HorizontalPlan:
    item: Hashable
    periods: tuple[Hashable, ...]
    rows: Mapping[str, tuple[float, ...]]
    levels: StockLevels

    def row(self, name: str) -> dict[Hashable, float]:
        return dict(zip(self.periods, self.rows[name]))

    def as_matrix(self) -> Matrix:
        """Metric x period matrix in the fixed row order."""
        values = np.array([self.rows[name] for name in PLAN_ROWS], dtype=np.float64)
        return Matrix(PLAN_ROWS, self.periods, values.reshape(len(PLAN_ROWS), len(self.periods)))

    def to_frame(self) -> pd.DataFrame:
        from supply_plan.data.frames import matrix_to_frame

        return matrix_to_frame(self.as_matrix())


def find_max_period(
    forecast_by_period: Mapping[Hashable, float], periods: Sequence[Hashable]
) -> tuple[Hashable | None, float]:
    """
    Period with the highest forecast, scanning `periods` in order.

    Only a strictly greater value replaces the current maximum, so ties go to
    the earliest period. Returns (None, 0.0) when nothing is above zero.
    """
    max_period: Hashable | None = None
    max_forecast = 0.0
    for period in periods:
        qty = forecast_by_period.get(period, 0.0)
        if qty > max_forecast:
            max_forecast = qty
            max_period = period
    return max_period, max_forecast


def roll_forward(
    on_hand: float, target_inventory: float, forecast: Sequence[float]
) -> dict[str, list[float]]:
    """
    Nets production against demand period by period.

    production = max(0, target + forecast - beginning)
    ending     = beginning - forecast + production
    """
    beginning: list[float] = []
    production: list[float] = []
    ending: list[float] = []

    current = float(on_hand)
    for demand in forecast:
        build = max(0.0, target_inventory + demand - current)
        closing = current - demand + build
        beginning.append(current)
        production.append(build)
        ending.append(closing)
        current = closing

    return {
        BEGINNING_INVENTORY: beginning,
        PRODUCTION_PLAN: production,
        ENDING_INVENTORY: ending,
    }


class RunRatePolicy:
    """
    Strategy-driven safety and cycle stock.

    Reactive strategies hold `safety_stock_days` of the peak period's daily
    run rate as safety stock and `cycle_stock_fraction` of the FOQ as cycle
    stock. Every other strategy holds neither.
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        params = planning_parameters(config)
        configured = params.get("strategies", {})
        self.policies: dict[str, dict[str, float]] = {}
        for name, defaults in DEFAULT_STRATEGY_POLICIES.items():
            self.policies[name] = {**defaults, **configured.get(name, {})}

    def levels(
        self,
        item: Item,
        max_period: Hashable | None,
        max_period_forecast: float,
        max_period_days: float | None,
    ) -> tuple[float, float]:
        policy = self.policies.get(item.strategy.value)
        if policy is None:
            return 0.0, 0.0

        cycle_stock = round_half_up(item.foq * policy["cycle_stock_fraction"])
        if max_period is None:
            return 0.0, cycle_stock
        if max_period_days is None or max_period_days <= 0:
            raise UndefinedStatistic(
                f"Item {item.id}: peak period {max_period} needs positive days to compute a run rate"
            )
        run_rate = max_period_forecast / max_period_days
        safety_stock = round_half_up(run_rate * policy["safety_stock_days"])
        return safety_stock, cycle_stock


class HorizontalPlanGenerator:
    """
    Builds one HorizontalPlan per item of a PlanningDataSet.

    `safety_stock_overrides` (item -> quantity) replaces the run-rate safety
    stock for the listed items, e.g. with statistical recommendations.
    """

    def __init__(
        self,
        dataset: PlanningDataSet,
        config: dict[str, Any] | None = None,
        safety_stock_overrides: Mapping[Hashable, float] | None = None,
    ) -> None:
        self.dataset = dataset
        self.policy = RunRatePolicy(config)
        self.safety_stock_overrides = dict(safety_stock_overrides or {})
        self.periods = tuple(dataset.periods)
        self.forecast = dataset.forecast_matrix()

    def _item_forecast(self, item_id: Hashable) -> list[float]:
        return [self.forecast.get(item_id, period, 0.0) for period in self.periods]

    def stock_levels(self, item: Item) -> StockLevels:
        forecast = dict(zip(self.periods, self._item_forecast(item.id)))
        max_period, max_forecast = find_max_period(forecast, self.periods)
        days = self.dataset.calendar[max_period].days if max_period is not None else None

        safety_stock, cycle_stock = self.policy.levels(item, max_period, max_forecast, days)
        if item.id in self.safety_stock_overrides:
            safety_stock = round_half_up(self.safety_stock_overrides[item.id])

        return StockLevels(
            safety_stock=safety_stock,
            cycle_stock=cycle_stock,
            max_period=max_period,
            max_period_forecast=max_forecast,
        )

    def generate_item(self, item_id: Hashable) -> HorizontalPlan:
        item = self.dataset.items[item_id]
        levels = self.stock_levels(item)
        forecast = self._item_forecast(item_id)
        n = len(self.periods)

        netting = roll_forward(item.current_inventory, levels.total, forecast)

        rows = {
            SAFETY_STOCK: (levels.safety_stock,) * n,
            CYCLE_STOCK: (levels.cycle_stock,) * n,
            LEVEL_LOAD: (0.0,) * n,
            TOTAL_INVENTORY: (levels.total,) * n,
            BEGINNING_INVENTORY: tuple(netting[BEGINNING_INVENTORY]),
            SALES_FORECAST: tuple(forecast),
            PRODUCTION_PLAN: tuple(netting[PRODUCTION_PLAN]),
            ENDING_INVENTORY: tuple(netting[ENDING_INVENTORY]),
        }
        return HorizontalPlan(item=item_id, periods=self.periods, rows=rows, levels=levels)

    def generate(self) -> dict[Hashable, HorizontalPlan]:
        return {item_id: self.generate_item(item_id) for item_id in self.dataset.items}


def production_matrix(plans: Mapping[Hashable, HorizontalPlan]) -> Matrix:
    """Item x period matrix of each plan's Production Plan row."""
    items = list(plans.keys())
    if not items:
        return Matrix([], [])
    periods = plans[items[0]].periods
    values = np.array(
        [[plans[i].row(PRODUCTION_PLAN)[p] for p in periods] for i in items],
        dtype=np.float64,
    )
    return Matrix(items, periods, values.reshape(len(items), len(periods)))
