"""
Progress events of a Hyperband execution
========================================

The driver reports its progress to an observer instead of a process-wide state. Subclass
`HyperbandObserver` and override the events of interest.

"""
from __future__ import annotations

import logging
from typing import Sequence

from tabulate import tabulate

logger = logging.getLogger("hbtune.algo.hyperband")


class HyperbandObserver:
    """Observer of a Hyperband execution. All events are no-ops by default."""

    def run_started(self, planner) -> None:
        """Called once before the first bracket, with the `BracketPlanner`."""

    def bracket_started(self, bracket) -> None:
        """Called before the first stage of a `Bracket`."""

    def stage_planned(self, stage) -> None:
        """Called when the configurations of a `Stage` are about to be evaluated."""

    def stage_completed(self, stage, records: Sequence) -> None:
        """Called when the configurations of a `Stage` are evaluated and logged."""

    def bracket_completed(self, bracket) -> None:
        """Called after the last stage of a `Bracket`."""


class LoggingObserver(HyperbandObserver):
    """Log the progress of the execution."""

    def __init__(self):
        self.s_max = None

    def run_started(self, planner) -> None:
        self.s_max = planner.s_max
        logger.info("Amount of brackets to be evaluated = %d", planner.s_max + 1)
        planner.display()

    def bracket_started(self, bracket) -> None:
        # Brackets are numbered from 1 for display, while s counts down to 0.
        number = self.s_max - bracket.s + 1 if self.s_max is not None else bracket.s
        logger.info("Start evaluation of bracket %d (s=%d)", number, bracket.s)

    def stage_planned(self, stage) -> None:
        logger.info(
            "Training %d configs with budget of %g for each",
            stage.mu_current,
            stage.budget_real,
        )

    def stage_completed(self, stage, records: Sequence) -> None:
        if not logger.isEnabledFor(logging.DEBUG) or not records:
            return

        rows = [record.to_dict() for record in records]
        logger.debug(
            "Results of bracket %d stage %d:\n%s",
            stage.bracket,
            stage.stage,
            tabulate(rows, headers="keys", tablefmt="github"),
        )

    def bracket_completed(self, bracket) -> None:
        logger.debug("Bracket s=%d completed", bracket.s)
