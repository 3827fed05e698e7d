"""
Statistical safety stock from supply and demand variability.

Combined-uncertainty formula per item:

    supply component = average demand * stddev(supply time)
    demand component = sqrt(average supply time * stddev(demand)^2)
    safety stock     = z * sqrt(demand component^2 + supply component^2)

with z = norm_inverse(service level). Averages and stddevs are the
outlier-adjusted values whenever the summary trimmed any outliers.

Supply time is the performance cycle: whole days between successive
completions of an item. Gaps of `min_gap_days` or less belong to the same
cycle and are not sampled.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from supply_plan.config.loader import planning_parameters
from supply_plan.data.records import RecordSet, days_between, distinct_values, select
from supply_plan.errors import UndefinedStatistic
from supply_plan.stats.normal import norm_inverse
from supply_plan.stats.summary import StatisticalSummary, summarize

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_LEVEL = 0.985
DEFAULT_SUPPLY_OUTLIER_Z = 3.0
DEFAULT_DEMAND_OUTLIER_Z = 4.0
DEFAULT_MIN_CYCLE_GAP_DAYS = 1

CYCLE_DAYS_FIELD = "cycle_days"
VARIANCE_DAYS_FIELD = "days_late"


@dataclass(frozen=True)
class SafetyStockRecommendation:
    item: Hashable
    z: float
    average_demand: float
    demand_std_dev: float
    average_supply_time: float
    supply_time_std_dev: float
    supply_component: float
    demand_component: float
    quantity: float


class SafetyStockCalculator:
    """Combined-uncertainty safety stock at a target service level."""

    def __init__(
        self,
        service_level: float | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        params = planning_parameters(config).get("safety_stock", {})
        if service_level is None:
            service_level = float(params.get("service_level", DEFAULT_SERVICE_LEVEL))
        if not 0.0 < service_level < 1.0:
            raise ValueError(f"service_level must be between 0 and 1, got {service_level}")
        self.service_level = service_level
        self.z = norm_inverse(service_level)

    def recommend(
        self,
        item: Hashable,
        supply: StatisticalSummary,
        demand: StatisticalSummary,
    ) -> SafetyStockRecommendation:
        avg_demand = demand.effective_average
        sd_demand = demand.effective_std_dev
        avg_supply = supply.effective_average
        sd_supply = supply.effective_std_dev

        if avg_supply < 0:
            raise UndefinedStatistic(
                f"Item {item}: negative average supply time {avg_supply}"
            )

        supply_component = avg_demand * sd_supply
        demand_component = math.sqrt(avg_supply * sd_demand**2)
        quantity = self.z * math.sqrt(demand_component**2 + supply_component**2)

        return SafetyStockRecommendation(
            item=item,
            z=self.z,
            average_demand=avg_demand,
            demand_std_dev=sd_demand,
            average_supply_time=avg_supply,
            supply_time_std_dev=sd_supply,
            supply_component=supply_component,
            demand_component=demand_component,
            quantity=quantity,
        )

    def recommend_all(
        self,
        supply_stats: Mapping[Hashable, StatisticalSummary],
        demand_stats: Mapping[Hashable, StatisticalSummary],
    ) -> dict[Hashable, SafetyStockRecommendation]:
        """Recommendations for every item present on both sides."""
        result: dict[Hashable, SafetyStockRecommendation] = {}
        for item, supply in supply_stats.items():
            demand = demand_stats.get(item)
            if demand is None:
                logger.warning("No demand statistics for item %s; skipped", item)
                continue
            result[item] = self.recommend(item, supply, demand)

        for item in demand_stats:
            if item not in supply_stats:
                logger.warning("No supply statistics for item %s; skipped", item)
        return result


def safety_stock_quantities(
    recommendations: Mapping[Hashable, SafetyStockRecommendation],
) -> dict[Hashable, float]:
    """Item -> recommended quantity, ready to override run-rate safety stock."""
    return {item: rec.quantity for item, rec in recommendations.items()}


def performance_cycle_times(
    completion_dates: Iterable[date | datetime],
    min_gap_days: int = DEFAULT_MIN_CYCLE_GAP_DAYS,
) -> list[int]:
    """
    Days between successive completions, keeping only gaps > `min_gap_days`.

    Completions a day or less apart are one continued run, not a new cycle.
    """
    ordered = sorted(completion_dates)
    gaps = (days_between(a, b) for a, b in zip(ordered, ordered[1:]))
    return [gap for gap in gaps if gap > min_gap_days]


def _summarize_items(
    samples: Mapping[Hashable, dict[Hashable, dict[str, Any]]],
    field_name: str,
    z: float,
) -> dict[Hashable, StatisticalSummary]:
    result: dict[Hashable, StatisticalSummary] = {}
    for item, records in samples.items():
        try:
            result[item] = summarize(records, field_name, z)
        except UndefinedStatistic as exc:
            logger.warning("Item %s excluded from statistics: %s", item, exc)
    return result


def supply_cycle_statistics(
    records: RecordSet,
    item_field: str,
    date_field: str,
    z: float = DEFAULT_SUPPLY_OUTLIER_Z,
    min_gap_days: int = DEFAULT_MIN_CYCLE_GAP_DAYS,
) -> dict[Hashable, StatisticalSummary]:
    """
    Performance cycle time statistics per item from completion records.

    Items with fewer than two cycles are left out (logged).
    """
    samples: dict[Hashable, dict[Hashable, dict[str, Any]]] = {}
    for item in distinct_values(records, item_field):
        item_records = select(records, item_field, item)
        dates = [rec[date_field] for rec in item_records.values()]
        cycles = performance_cycle_times(dates, min_gap_days)
        samples[item] = {i: {CYCLE_DAYS_FIELD: c} for i, c in enumerate(cycles)}
    return _summarize_items(samples, CYCLE_DAYS_FIELD, z)


def schedule_variance_statistics(
    records: RecordSet,
    item_field: str,
    scheduled_field: str,
    actual_field: str,
    z: float = DEFAULT_SUPPLY_OUTLIER_Z,
) -> dict[Hashable, StatisticalSummary]:
    """
    Statistics of days between scheduled and actual completion, per item.

    Outliers are keyed by the original record key.
    """
    samples: dict[Hashable, dict[Hashable, dict[str, Any]]] = {}
    for item in distinct_values(records, item_field):
        item_records = select(records, item_field, item)
        samples[item] = {
            key: {
                VARIANCE_DAYS_FIELD: days_between(rec[scheduled_field], rec[actual_field])
            }
            for key, rec in item_records.items()
        }
    return _summarize_items(samples, VARIANCE_DAYS_FIELD, z)


def demand_statistics(
    records: RecordSet,
    item_field: str,
    quantity_field: str,
    z: float = DEFAULT_DEMAND_OUTLIER_Z,
) -> dict[Hashable, StatisticalSummary]:
    """Statistics of a demand quantity field, per item."""
    samples = {
        item: dict(select(records, item_field, item))
        for item in distinct_values(records, item_field)
    }
    return _summarize_items(samples, quantity_field, z)


def statistics_settings(config: dict[str, Any] | None) -> dict[str, float]:
    """Outlier z-scores and cycle gap threshold from config, with defaults."""
    params = planning_parameters(config).get("statistics", {})
    return {
        "supply_outlier_z": float(params.get("supply_outlier_z", DEFAULT_SUPPLY_OUTLIER_Z)),
        "demand_outlier_z": float(params.get("demand_outlier_z", DEFAULT_DEMAND_OUTLIER_Z)),
        "min_cycle_gap_days": int(params.get("min_cycle_gap_days", DEFAULT_MIN_CYCLE_GAP_DAYS)),
    }


def recommend_from_history(
    completions: RecordSet,
    shipments: RecordSet,
    item_field: str = "item",
    completion_field: str = "completion_date",
    quantity_field: str = "quantity",
    config: dict[str, Any] | None = None,
    service_level: float | None = None,
) -> dict[Hashable, SafetyStockRecommendation]:
    """
    End-to-end statistical safety stock from production and shipping history.

    `completions` holds one record per finished job, `shipments` one record
    per shipped demand quantity; both are keyed by item.
    """
    settings = statistics_settings(config)
    supply = supply_cycle_statistics(
        completions,
        item_field,
        completion_field,
        z=settings["supply_outlier_z"],
        min_gap_days=int(settings["min_cycle_gap_days"]),
    )
    demand = demand_statistics(
        shipments, item_field, quantity_field, z=settings["demand_outlier_z"]
    )
    calculator = SafetyStockCalculator(service_level=service_level, config=config)
    return calculator.recommend_all(supply, demand)
