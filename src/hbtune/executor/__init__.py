"""
Executors
=========

Executors run the configurations of a stage for `hbtune.core.worker.evaluator.FunctionEvaluator`.

"""
from hbtune.executor.base import BaseExecutor, ExecutorClosed
from hbtune.executor.joblib_backend import JoblibExecutor
from hbtune.executor.single_backend import SingleExecutor

EXECUTORS = {
    "singleexecutor": SingleExecutor,
    "joblib": JoblibExecutor,
}


def create_executor(name, n_workers=-1, **config):
    """Build an executor from its name, case insensitive."""
    try:
        executor_class = EXECUTORS[name.lower()]
    except KeyError as e:
        raise NotImplementedError(
            f"Could not find implementation of executor {name}, "
            f"available: {sorted(EXECUTORS)}"
        ) from e

    return executor_class(n_workers=n_workers, **config)


__all__ = [
    "BaseExecutor",
    "ExecutorClosed",
    "JoblibExecutor",
    "SingleExecutor",
    "create_executor",
]
