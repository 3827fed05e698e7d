"""
Resource load and utilization.

Aggregate requirements are resource-hours per period implied by the
production plan. Utilization (RYG) divides that load by available hours for
every constrained resource; resources without constraint records are
unconstrained and left out.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from typing import TYPE_CHECKING

from supply_plan.errors import DimensionMismatch
from supply_plan.matrix.core import Matrix
from supply_plan.matrix.ops import elementwise_divide, multiply, subtract
from supply_plan.planning.horizontal import HorizontalPlan, production_matrix

if TYPE_CHECKING:
    from supply_plan.data.dataset import PlanningDataSet

logger = logging.getLogger(__name__)


class AggregateRequirementsCalculator:
    """Resource x period hours = requirements (resource x item) x production (item x period)."""

    def __init__(self, dataset: PlanningDataSet) -> None:
        self.dataset = dataset

    def calculate(self, plans: Mapping[Hashable, HorizontalPlan]) -> Matrix:
        requirements = self.dataset.requirements_matrix()
        production = production_matrix(plans)

        missing = [item for item in requirements.cols if not production.has_row(item)]
        if missing:
            raise DimensionMismatch(
                f"Items with requirements but no Production Plan: {missing!r}"
            )
        # Items without routings consume no resource hours
        return multiply(requirements, production.take_rows(requirements.cols))


class UtilizationCalculator:
    """
    RYG ratios: aggregate load / available hours per constrained resource.

    1.0 means exactly at capacity. A zero-capacity cell raises
    UndefinedStatistic.
    """

    def __init__(self, dataset: PlanningDataSet) -> None:
        self.dataset = dataset

    def constraints(self) -> Matrix:
        return self.dataset.constraints_matrix()

    def constrained_load(self, aggregate: Matrix, constraints: Matrix) -> Matrix:
        """Aggregate load restricted to constrained resources, in constraint order."""
        unloaded = [r for r in constraints.rows if not aggregate.has_row(r)]
        if unloaded:
            logger.debug("Constrained resources with no load: %s", unloaded)
        return aggregate.take_rows(constraints.rows, fill=0.0)

    def calculate(self, aggregate: Matrix) -> Matrix:
        constraints = self.constraints()
        if not constraints.rows:
            logger.debug("No constrained resources; RYG is empty")
            return Matrix([], aggregate.cols)
        return elementwise_divide(self.constrained_load(aggregate, constraints), constraints)

    def available_hours(self, aggregate: Matrix) -> Matrix:
        """Capacity left on each constrained resource: constraints - load."""
        constraints = self.constraints()
        if not constraints.rows:
            return Matrix([], aggregate.cols)
        return subtract(constraints, self.constrained_load(aggregate, constraints))
