"""Horizontal planning, capacity utilization and safety stock."""

from supply_plan.planning.capacity import (
    AggregateRequirementsCalculator,
    UtilizationCalculator,
)
from supply_plan.planning.horizontal import (
    PLAN_ROWS,
    HorizontalPlan,
    HorizontalPlanGenerator,
    RunRatePolicy,
    StockLevels,
    production_matrix,
    roll_forward,
)
from supply_plan.planning.observer import (
    LoggingObserver,
    NullObserver,
    PlanningObserver,
    Verbosity,
)
from supply_plan.planning.orchestrator import PlanningResults, PlanningRun
from supply_plan.planning.safety_stock import (
    SafetyStockCalculator,
    SafetyStockRecommendation,
    demand_statistics,
    performance_cycle_times,
    recommend_from_history,
    safety_stock_quantities,
    schedule_variance_statistics,
    supply_cycle_statistics,
)

__all__ = [
    "PLAN_ROWS",
    "AggregateRequirementsCalculator",
    "HorizontalPlan",
    "HorizontalPlanGenerator",
    "LoggingObserver",
    "NullObserver",
    "PlanningObserver",
    "PlanningResults",
    "PlanningRun",
    "RunRatePolicy",
    "SafetyStockCalculator",
    "SafetyStockRecommendation",
    "StockLevels",
    "UtilizationCalculator",
    "Verbosity",
    "demand_statistics",
    "performance_cycle_times",
    "production_matrix",
    "recommend_from_history",
    "roll_forward",
    "safety_stock_quantities",
    "schedule_variance_statistics",
    "supply_cycle_statistics",
]
