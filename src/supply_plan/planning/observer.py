"""Progress reporting for planning runs."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Verbosity(enum.Enum):
    SILENT = "silent"
    CONCISE = "concise"
    VERBOSE = "verbose"


class PlanningObserver(Protocol):
    """Receives a report after each planning stage. Never alters results."""

    def stage_completed(self, stage: str, details: Mapping[str, Any]) -> None: ...


class NullObserver:
    def stage_completed(self, stage: str, details: Mapping[str, Any]) -> None:
        return None


class LoggingObserver:
    """
    Forwards stage reports to `logging`.

    CONCISE logs one line per stage; VERBOSE adds the stage payload
    (matrices, plans) on a second line.
    """

    def __init__(
        self,
        verbosity: Verbosity | str = Verbosity.CONCISE,
        log: logging.Logger | None = None,
    ) -> None:
        self.verbosity = Verbosity(verbosity)
        self.log = log or logger

    def stage_completed(self, stage: str, details: Mapping[str, Any]) -> None:
        if self.verbosity == Verbosity.SILENT:
            return
        self.log.info("%s successful.", stage)
        if self.verbosity == Verbosity.VERBOSE:
            for key, value in details.items():
                self.log.info("%s | %s: %s", stage, key, value)
