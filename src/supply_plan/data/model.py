from __future__ import annotations

import enum
from collections.abc import Hashable
from dataclasses import dataclass
from datetime import date


class PlanningStrategy(enum.Enum):
    NONE = "None"
    REACTIVE_FAST = "ReactiveFast"  # Reactive level load, fast replenishment
    REACTIVE_SLOW = "ReactiveSlow"  # Reactive level load, slow replenishment

    @classmethod
    def parse(cls, label: str | PlanningStrategy | None) -> PlanningStrategy:
        """
        Accepts the enum value, its name, or the long spreadsheet labels
        ("Reactive Level Load - Fast"). Blank labels mean NONE.
        """
        if isinstance(label, PlanningStrategy):
            return label
        if label is None or str(label).strip() == "":
            return cls.NONE
        text = str(label).strip()
        for strategy in cls:
            if text in (strategy.value, strategy.name):
                return strategy
        long_labels = {
            "Reactive Level Load - Fast": cls.REACTIVE_FAST,
            "Reactive Level Load - Slow": cls.REACTIVE_SLOW,
        }
        if text in long_labels:
            return long_labels[text]
        raise ValueError(f"Unknown planning strategy: {label!r}")


@dataclass(frozen=True)
class Item:
    """
    A produced item (SKU) with its planning attributes.
    """

    id: Hashable
    description: str = ""
    strategy: PlanningStrategy = PlanningStrategy.NONE

    # Fixed order quantity per production run
    foq: float = 0.0

    # On-hand inventory; negative means backorder
    current_inventory: float = 0.0

    def __post_init__(self) -> None:
        if self.id is None or self.id == "":
            raise ValueError("Item ID cannot be empty")
        if self.foq < 0:
            raise ValueError(f"Item {self.id} FOQ cannot be negative")


@dataclass(frozen=True)
class Resource:
    id: Hashable
    description: str = ""

    def __post_init__(self) -> None:
        if self.id is None or self.id == "":
            raise ValueError("Resource ID cannot be empty")


@dataclass(frozen=True)
class Period:
    """A calendar bucket. Calendar order is the order periods are added."""

    id: Hashable
    days: float
    start_date: date | None = None

    def __post_init__(self) -> None:
        if self.id is None or self.id == "":
            raise ValueError("Period ID cannot be empty")
        if self.days <= 0:
            raise ValueError(f"Period {self.id} days must be positive, got {self.days}")


@dataclass(frozen=True)
class ForecastEntry:
    item: Hashable
    period: Hashable
    quantity: float


@dataclass(frozen=True)
class RequirementEntry:
    """Resource hours consumed per unit of item produced."""

    resource: Hashable
    item: Hashable
    quantity: float
    routing_version: str = ""


@dataclass(frozen=True)
class ConstraintEntry:
    """Available hours on a resource within a period."""

    resource: Hashable
    period: Hashable
    quantity: float
