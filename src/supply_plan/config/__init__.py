"""Planning configuration loading."""

from supply_plan.config.loader import load_planning_config, planning_parameters

__all__ = ["load_planning_config", "planning_parameters"]
