"""Exceptions raised by the planning engine."""


class PlanningError(Exception):
    """Base class for planning engine failures."""


class DimensionMismatch(PlanningError, ValueError):
    """Matrix key sets are incompatible for the requested operation."""


class UndefinedStatistic(PlanningError, ArithmeticError):
    """A statistic or ratio has no defined value (e.g. n <= 1, zero capacity)."""


class UnsupportedPredicate(PlanningError, ValueError):
    """A record filter was given an unknown comparison operator."""
