"""
Stage scheduling
================

Run the stages of one bracket: sample the configurations of the first stage, evaluate the
active configurations with the budget of each stage and select the survivors of the next
stage from the results of the previous one.

"""
from __future__ import annotations

import logging
from typing import Mapping

from hbtune.algo.hyperband.brackets import Bracket, BracketPlanner, Stage
from hbtune.algo.sampler import Sampler
from hbtune.algo.selection import select_survivors
from hbtune.core.utils.exceptions import HyperbandError, SelectionSizeError
from hbtune.core.worker.evaluator import Evaluator, format_results
from hbtune.core.worker.events import HyperbandObserver
from hbtune.core.worker.performance_log import PerformanceLog
from hbtune.core.worker.record import ConfigurationRecord

logger = logging.getLogger(__name__)


class StageScheduler:
    """Run successive halving inside a bracket.

    Parameters
    ----------
    planner: `hbtune.algo.hyperband.brackets.BracketPlanner`
        Provides the plan of each stage.
    sampler: `hbtune.algo.sampler.Sampler`
        Draws the configurations of the first stage.
    evaluator: `hbtune.core.worker.evaluator.Evaluator`
        Evaluates the configurations of a stage.
    objectives: dict
        Objective names mapped to True if minimized, False if maximized.
    budget_id: str
        Name of the budget parameter.
    log: `hbtune.core.worker.performance_log.PerformanceLog`
        Log to which every evaluated stage is appended.
    observer: `hbtune.core.worker.events.HyperbandObserver`
        Receives the progress events.

    """

    def __init__(
        self,
        planner: BracketPlanner,
        sampler: Sampler,
        evaluator: Evaluator,
        objectives: Mapping[str, bool],
        budget_id: str,
        log: PerformanceLog,
        observer: HyperbandObserver,
    ):
        self.planner = planner
        self.sampler = sampler
        self.evaluator = evaluator
        self.objectives = dict(objectives)
        self.budget_id = budget_id
        self.log = log
        self.observer = observer

    def run(self, bracket: Bracket) -> list[ConfigurationRecord]:
        """Run all stages of ``bracket`` and return the records of its last stage."""
        evaluated: list[ConfigurationRecord] = []
        for stage in self.planner.stages(bracket):
            if stage.stage == 0:
                active = self.sample(stage)
            else:
                active = self.select(stage, evaluated)

            self.observer.stage_planned(stage)
            evaluated = self.evaluate(active)
            self.observer.stage_completed(stage, evaluated)

        return evaluated

    def sample(self, stage: Stage) -> list[ConfigurationRecord]:
        """Draw the configurations of the first stage of a bracket."""
        configurations = list(self.sampler.sample(stage.mu_current))
        if len(configurations) != stage.mu_current:
            raise HyperbandError(
                f"Sampler returned {len(configurations)} configurations "
                f"instead of {stage.mu_current}"
            )

        return [
            ConfigurationRecord.for_stage(configuration, self.budget_id, stage)
            for configuration in configurations
        ]

    def select(
        self, stage: Stage, previous: list[ConfigurationRecord]
    ) -> list[ConfigurationRecord]:
        """Select the survivors of ``previous`` and branch them into ``stage``."""
        if stage.mu_current > len(previous):
            raise SelectionSizeError(stage.mu_current, len(previous))

        performance = [
            [record.results[name] for name in self.objectives] for record in previous
        ]
        indices = select_survivors(
            performance, stage.mu_current, list(self.objectives.values())
        )
        if len(indices) != stage.mu_current or len(set(indices)) != len(indices):
            raise SelectionSizeError(stage.mu_current, len(previous))

        return [previous[index].branch(stage) for index in indices]

    def evaluate(self, records: list[ConfigurationRecord]) -> list[ConfigurationRecord]:
        """Evaluate a batch of records, store their results and append them to the log."""
        if not records:
            logger.debug("No configuration left to evaluate")
            return []

        results = self.evaluator.evaluate_batch(records)
        for record, result in zip(
            records, format_results(results, records, list(self.objectives))
        ):
            record.set_results(result)

        self.log.append(records)
        return records
