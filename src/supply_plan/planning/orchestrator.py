from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any

from supply_plan.config.loader import load_planning_config, planning_parameters
from supply_plan.data.dataset import PlanningDataSet
from supply_plan.matrix.core import Matrix
from supply_plan.planning.capacity import (
    AggregateRequirementsCalculator,
    UtilizationCalculator,
)
from supply_plan.planning.horizontal import HorizontalPlan, HorizontalPlanGenerator
from supply_plan.planning.observer import LoggingObserver, PlanningObserver
from supply_plan.planning.safety_stock import SafetyStockRecommendation

SAFETY_STOCK_METHODS = ("run_rate", "statistical")


@dataclass(frozen=True)
class PlanningResults:
    horizontal_plans: dict[Hashable, HorizontalPlan]
    aggregate_requirements: Matrix
    ryg: Matrix
    available_hours: Matrix


class PlanningRun:
    """
    One batch planning pass over a PlanningDataSet.

    Stages run in order: horizontal plans, aggregate requirements, RYG
    utilization, available hours. Results are computed on the first
    `execute()` and returned unchanged by later calls.

    With `safety_stock_method="statistical"`, `safety_stocks` (item ->
    quantity or SafetyStockRecommendation) replaces the run-rate safety
    stock for the items it lists.
    """

    def __init__(
        self,
        dataset: PlanningDataSet,
        config: dict[str, Any] | None = None,
        observer: PlanningObserver | None = None,
        safety_stock_method: str | None = None,
        safety_stocks: Mapping[Hashable, float | SafetyStockRecommendation] | None = None,
    ) -> None:
        self.dataset = dataset
        self.config = config if config is not None else load_planning_config()
        params = planning_parameters(self.config)

        method = safety_stock_method or params.get("safety_stock", {}).get(
            "method", "run_rate"
        )
        if method not in SAFETY_STOCK_METHODS:
            raise ValueError(
                f"Unknown safety stock method {method!r}; expected one of {SAFETY_STOCK_METHODS}"
            )
        if method == "statistical" and safety_stocks is None:
            raise ValueError("Statistical safety stock method requires safety_stocks")
        self.safety_stock_method = method

        self.safety_stock_overrides: dict[Hashable, float] = {}
        if method == "statistical" and safety_stocks is not None:
            for item, value in safety_stocks.items():
                if isinstance(value, SafetyStockRecommendation):
                    value = value.quantity
                self.safety_stock_overrides[item] = float(value)

        if observer is None:
            verbosity = params.get("logging", {}).get("verbosity", "silent")
            observer = LoggingObserver(verbosity)
        self.observer = observer

        self._results: PlanningResults | None = None

    @property
    def results(self) -> PlanningResults | None:
        return self._results

    def execute(self) -> PlanningResults:
        if self._results is not None:
            return self._results

        violations = self.dataset.validate()
        if violations:
            raise ValueError(
                "Invalid planning data set:\n  " + "\n  ".join(violations)
            )

        # 1. Horizontal Plans
        generator = HorizontalPlanGenerator(
            self.dataset, self.config, self.safety_stock_overrides
        )
        plans = generator.generate()
        self.observer.stage_completed(
            "Generate Horizontal Plan",
            {item: plan.as_matrix().to_dict() for item, plan in plans.items()},
        )

        # 2. Aggregate Requirements (resource x period hours)
        aggregate = AggregateRequirementsCalculator(self.dataset).calculate(plans)
        self.observer.stage_completed(
            "Generate Aggregate Requirements matrix",
            {"aggregate_requirements": aggregate.to_dict()},
        )

        # 3. RYG on constrained resources
        utilization = UtilizationCalculator(self.dataset)
        ryg = utilization.calculate(aggregate)
        self.observer.stage_completed("Generate RYG matrix", {"ryg": ryg.to_dict()})

        # 4. Remaining hours on constrained resources
        available = utilization.available_hours(aggregate)
        self.observer.stage_completed(
            "Computation of available hours on constrained resources",
            {"available_hours": available.to_dict()},
        )

        self._results = PlanningResults(
            horizontal_plans=plans,
            aggregate_requirements=aggregate,
            ryg=ryg,
            available_hours=available,
        )
        return self._results
