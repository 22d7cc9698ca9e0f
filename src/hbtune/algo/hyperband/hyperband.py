"""
A Novel Bandit-Based Approach to Hyperparameter Optimization
============================================================

Implement Hyperband to exploit configurations with fixed resource efficiently

"""
from __future__ import annotations

import logging
from typing import Mapping, Sequence

import hbtune.core
from hbtune.algo.hyperband.brackets import BracketPlanner
from hbtune.algo.hyperband.budget import BudgetSpec
from hbtune.algo.hyperband.scheduler import StageScheduler
from hbtune.algo.sampler import Sampler, UniformSampler
from hbtune.algo.selection import (
    as_minimization,
    non_dominated_sort,
    select_survivors,
)
from hbtune.algo.space import Dimension, Space
from hbtune.core.utils.exceptions import (
    BUDGET_PARAMETER_ERROR,
    BudgetParameterError,
    SamplerMismatchError,
)
from hbtune.core.worker.evaluator import Evaluator
from hbtune.core.worker.events import HyperbandObserver, LoggingObserver
from hbtune.core.worker.performance_log import PerformanceLog
from hbtune.core.worker.record import ConfigurationRecord

logger = logging.getLogger(__name__)


def get_budget_dimension(space: Space) -> Dimension:
    """Return the only dimension of ``space`` tagged as budget.

    Raises
    ------
    BudgetParameterError
        If there is not exactly one budget dimension.

    """
    budget_dimensions = space.budget_dimensions()
    if len(budget_dimensions) != 1:
        raise BudgetParameterError(
            BUDGET_PARAMETER_ERROR.format(
                budget_ids=[dim.name for dim in budget_dimensions]
            )
        )

    return budget_dimensions[0]


def format_objectives(objectives: str | Sequence | Mapping[str, bool]) -> dict[str, bool]:
    """Return objectives as an ordered mapping of name to minimize flag.

    ``objectives`` can be a single name, a sequence of names (all minimized), a sequence of
    ``(name, minimize)`` pairs or a mapping of name to minimize flag.
    """
    if isinstance(objectives, str):
        formatted = {objectives: True}
    elif isinstance(objectives, Mapping):
        formatted = {name: bool(minimize) for name, minimize in objectives.items()}
    else:
        formatted = {}
        for objective in objectives:
            if isinstance(objective, str):
                formatted[objective] = True
            else:
                name, minimize = objective
                formatted[name] = bool(minimize)

    if not formatted:
        raise ValueError("At least one objective is required")

    return formatted


class Hyperband:
    """Hyperband formulates hyperparameter optimization as a pure-exploration non-stochastic
    infinite-armed bandit problem where a predefined resource like iterations, data samples,
    or features is allocated to randomly sampled configurations.

    For more information on the algorithm,
    see original paper at http://jmlr.org/papers/v18/16-558.html.

    Li, Lisha et al. "Hyperband: A Novel Bandit-Based Approach to Hyperparameter Optimization"
    Journal of Machine Learning Research, 18:1-52, 2018.

    Brackets are executed one after the other from the largest (most configurations, smallest
    budget) to the smallest, and the stages of a bracket one after the other. The
    configurations of a stage are submitted to the evaluator as a single batch.

    The calculation of each bracket assumes a runtime linear in the budget. With a
    ``O(budget^2)`` process, the last brackets take longer than the first ones even though
    the sum of budgets of every bracket is roughly the same.

    Parameters
    ----------
    space: `hbtune.algo.space.Space`
        Search space, with exactly one real or integer dimension tagged as ``budget``.
    objectives: str, sequence or dict
        Objectives returned by the evaluator. See `format_objectives`. With more than one
        objective, survivors are selected by non-dominated sorting.
    evaluator: `hbtune.core.worker.evaluator.Evaluator`
        Evaluates the configurations of a stage.
    eta: float, optional
        Reduction factor. Each stage keeps the best ``1/eta`` configurations and multiplies the
        budget by ``eta``. Default: ``hbtune.core.config.hyperband.eta``.
    sampler: `hbtune.algo.sampler.Sampler`, optional
        Draws the configurations of the first stage of each bracket. Must sample the
        parameters of ``space`` without the budget. Default: `UniformSampler`.
    seed: None, int or sequence of int
        Seed of the default sampler. Default: ``hbtune.core.config.hyperband.seed``.
    observer: `hbtune.core.worker.events.HyperbandObserver`, optional
        Receives the progress events. Default: `LoggingObserver`.
    log: `hbtune.core.worker.performance_log.PerformanceLog`, optional
        Log where evaluated configurations are appended. Default: a new log.

    """

    def __init__(
        self,
        space: Space,
        objectives: str | Sequence | Mapping[str, bool],
        evaluator: Evaluator,
        eta: float | None = None,
        sampler: Sampler | None = None,
        seed: int | Sequence[int] | None = None,
        observer: HyperbandObserver | None = None,
        log: PerformanceLog | None = None,
    ):
        self.space = space
        self.objectives = format_objectives(objectives)

        budget_dimension = get_budget_dimension(space)
        self.budget_id = budget_dimension.name

        if eta is None:
            eta = hbtune.core.config.hyperband.eta
        self.budget_spec = BudgetSpec.from_dimension(budget_dimension, eta)
        self.planner = BracketPlanner(self.budget_spec)

        sampler_space = space.subset(
            [name for name in space.keys() if name != self.budget_id]
        )
        if sampler is None:
            if seed is None:
                seed = hbtune.core.config.hyperband.seed
            sampler = UniformSampler(sampler_space, seed=seed)
        else:
            sampler_ids = set(getattr(sampler, "space", None) or [])
            if sampler_ids != set(sampler_space.keys()):
                raise SamplerMismatchError(sampler_ids, sampler_space.keys())
        self.sampler = sampler

        self.evaluator = evaluator
        self.observer = observer if observer is not None else LoggingObserver()
        self.log = log if log is not None else PerformanceLog()
        self.scheduler = StageScheduler(
            self.planner,
            self.sampler,
            self.evaluator,
            self.objectives,
            self.budget_id,
            self.log,
            self.observer,
        )

    @property
    def config_max_b(self) -> float:
        """Maximum budget on the rescaled ``[1, r_max / r_min]`` scale (``R``)."""
        return self.budget_spec.config_max_b

    @property
    def s_max(self) -> int:
        """Index of the largest bracket."""
        return self.budget_spec.s_max

    @property
    def B(self) -> float:  # pylint: disable=invalid-name
        """Approximate budget of a bracket on the rescaled scale."""
        return self.budget_spec.B

    def run(self) -> PerformanceLog:
        """Execute all brackets, from ``s_max`` down to ``0``.

        Exceptions raised by the evaluator abort the execution. The log keeps the stages
        evaluated before the failure.

        Returns
        -------
        `hbtune.core.worker.performance_log.PerformanceLog`
            The log of every evaluated configuration.

        """
        self.observer.run_started(self.planner)
        for bracket in self.planner.brackets():
            self.observer.bracket_started(bracket)
            self.scheduler.run(bracket)
            self.observer.bracket_completed(bracket)

        return self.log

    def best(self, n: int = 1) -> list[ConfigurationRecord]:
        """Return the best records evaluated with the largest budget of the log.

        With a single objective, the ``n`` best records. With many objectives, up to ``n``
        records of the Pareto front.
        """
        if not len(self.log):
            return []

        max_budget = max(record.budget_real for record in self.log)
        candidates = [record for record in self.log if record.budget_real == max_budget]
        performance = [
            [record.results[name] for name in self.objectives] for record in candidates
        ]
        minimize = list(self.objectives.values())

        if len(minimize) > 1:
            # Restrict to the first front, select_survivors cuts it by crowding distance.
            front = non_dominated_sort(as_minimization(performance, minimize))[0]
            candidates = [candidates[index] for index in front]
            performance = [performance[index] for index in front]

        indices = select_survivors(performance, min(n, len(candidates)), minimize)
        return [candidates[index] for index in indices]

    def __repr__(self) -> str:
        return "{}(budget={}, r_min={}, r_max={}, eta={}, objectives={})".format(
            self.__class__.__name__,
            self.budget_id,
            self.budget_spec.r_min,
            self.budget_spec.r_max,
            self.budget_spec.eta,
            self.objectives,
        )
