"""
Evaluation of configurations
============================

An evaluator runs every configuration of a stage with the stage's budget and returns their
performance. Any object with an ``evaluate_batch(records)`` method can be used, returning one
result per record, in the order of ``records``. A result is either a mapping of objective name
to value, or a number when there is a single objective.

"""
from __future__ import annotations

import logging
import numbers
from typing import Any, Callable, Mapping, Protocol, Sequence

import hbtune.core
from hbtune.core.utils.exceptions import InvalidResult
from hbtune.core.worker.record import ConfigurationRecord
from hbtune.executor import BaseExecutor, create_executor

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    """Capability to evaluate a batch of configurations."""

    def evaluate_batch(self, records: Sequence[ConfigurationRecord]) -> Sequence[Any]:
        """Return the results of ``records``, in the same order."""


class FunctionEvaluator:
    """Evaluate configurations by calling ``function(**record.params)``.

    Parameters
    ----------
    function: callable
        Called with the parameters of the configuration as keyword arguments, the budget
        parameter included. Must return a number or a mapping of objective name to value.
    executor: `hbtune.executor.BaseExecutor`, optional
        Executor running the calls of a batch. Defaults to the executor configured in
        ``hbtune.core.config.worker``.

    """

    def __init__(self, function: Callable[..., Any], executor: BaseExecutor | None = None):
        self.function = function
        if executor is None:
            executor = create_executor(
                hbtune.core.config.worker.executor,
                n_workers=hbtune.core.config.worker.n_workers,
            )
        self.executor = executor

    def evaluate_batch(self, records: Sequence[ConfigurationRecord]) -> list[Any]:
        futures = [
            self.executor.submit(self.function, **record.params) for record in records
        ]
        return self.executor.wait(futures)


def format_results(
    results: Sequence[Any],
    records: Sequence[ConfigurationRecord],
    objectives: Sequence[str],
) -> list[dict[str, float]]:
    """Convert the raw results of an evaluator to one mapping of objective values per record.

    Raises
    ------
    InvalidResult
        If the number of results differs from the number of records, or a result does not
        provide every objective.

    """
    results = list(results)
    if len(results) != len(records):
        raise InvalidResult(
            f"Evaluator returned {len(results)} results for {len(records)} configurations"
        )

    return [_format_result(result, objectives) for result in results]


def _format_result(result: Any, objectives: Sequence[str]) -> dict[str, float]:
    if isinstance(result, Mapping):
        missing = [name for name in objectives if name not in result]
        if missing:
            raise InvalidResult(f"Result {result} is missing objectives {missing}")
        return {name: float(result[name]) for name in objectives}

    if isinstance(result, numbers.Number) and not isinstance(result, bool):
        if len(objectives) != 1:
            raise InvalidResult(
                f"A single value was returned for objectives {list(objectives)}: {result}"
            )
        return {objectives[0]: float(result)}

    raise InvalidResult(
        f"Result must be a number or a mapping of objectives, not {type(result)}: {result}"
    )
