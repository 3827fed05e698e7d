from __future__ import annotations

from collections.abc import Hashable
from dataclasses import asdict
from typing import Any

from supply_plan.data.model import (
    ConstraintEntry,
    ForecastEntry,
    Item,
    Period,
    RequirementEntry,
    Resource,
)
from supply_plan.data.records import build_matrix
from supply_plan.matrix.core import Matrix

RECORD_KINDS = (
    "items",
    "resources",
    "calendar",
    "forecast",
    "requirements",
    "constraints",
)


class PlanningDataSet:
    """
    The container for the relational planning data of one run.

    Master data (items, resources, calendar) is keyed by id; transactional
    tables (forecast, requirements, constraints) are keyed by record id,
    which defaults to the insertion index.
    """

    def __init__(self) -> None:
        self.items: dict[Hashable, Item] = {}
        self.resources: dict[Hashable, Resource] = {}
        self.calendar: dict[Hashable, Period] = {}
        self.forecast: dict[Hashable, ForecastEntry] = {}
        self.requirements: dict[Hashable, RequirementEntry] = {}
        self.constraints: dict[Hashable, ConstraintEntry] = {}

    def add_item(self, item: Item) -> None:
        if item.id in self.items:
            raise ValueError(f"Item {item.id} already exists")
        self.items[item.id] = item

    def add_resource(self, resource: Resource) -> None:
        if resource.id in self.resources:
            raise ValueError(f"Resource {resource.id} already exists")
        self.resources[resource.id] = resource

    def add_period(self, period: Period) -> None:
        if period.id in self.calendar:
            raise ValueError(f"Period {period.id} already exists")
        self.calendar[period.id] = period

    def add_forecast(self, entry: ForecastEntry, key: Hashable | None = None) -> None:
        self._add_entry(self.forecast, "Forecast", entry, key)

    def add_requirement(
        self, entry: RequirementEntry, key: Hashable | None = None
    ) -> None:
        self._add_entry(self.requirements, "Requirement", entry, key)

    def add_constraint(
        self, entry: ConstraintEntry, key: Hashable | None = None
    ) -> None:
        self._add_entry(self.constraints, "Constraint", entry, key)

    @staticmethod
    def _add_entry(
        table: dict[Hashable, Any], label: str, entry: Any, key: Hashable | None
    ) -> None:
        if key is None:
            key = len(table)
            while key in table:
                key += 1
        if key in table:
            raise ValueError(f"{label} record {key} already exists")
        table[key] = entry

    @property
    def periods(self) -> list[Hashable]:
        """Period ids in calendar order."""
        return list(self.calendar.keys())

    def records(self, kind: str) -> dict[Hashable, dict[str, Any]]:
        """Exposes one table as a record set of plain dicts."""
        if kind not in RECORD_KINDS:
            raise ValueError(f"Unknown record kind {kind!r}; expected one of {RECORD_KINDS}")
        table: dict[Hashable, Any] = getattr(self, kind)
        return {key: asdict(entry) for key, entry in table.items()}

    def forecast_matrix(self) -> Matrix:
        """Item x period forecast quantities (duplicates summed)."""
        return build_matrix(self.records("forecast"), "item", "period", "quantity")

    def requirements_matrix(self) -> Matrix:
        """Resource x item hours per unit."""
        return build_matrix(self.records("requirements"), "resource", "item", "quantity")

    def constraints_matrix(self) -> Matrix:
        """Resource x period available hours."""
        return build_matrix(self.records("constraints"), "resource", "period", "quantity")

    def validate(self) -> list[str]:
        """Returns referential-integrity violations; empty when consistent."""
        violations: list[str] = []

        for key, f in self.forecast.items():
            if f.item not in self.items:
                violations.append(f"Forecast {key} references unknown item {f.item}")
            if f.period not in self.calendar:
                violations.append(f"Forecast {key} references unknown period {f.period}")

        for key, r in self.requirements.items():
            if r.resource not in self.resources:
                violations.append(
                    f"Requirement {key} references unknown resource {r.resource}"
                )
            if r.item not in self.items:
                violations.append(f"Requirement {key} references unknown item {r.item}")

        for key, c in self.constraints.items():
            if c.resource not in self.resources:
                violations.append(
                    f"Constraint {key} references unknown resource {c.resource}"
                )
            if c.period not in self.calendar:
                violations.append(
                    f"Constraint {key} references unknown period {c.period}"
                )

        return violations
