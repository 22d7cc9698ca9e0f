"""
Executor running configurations in a joblib worker pool
=======================================================

"""
import joblib

from hbtune.executor.base import BaseExecutor, ExecutorClosed, Future

NOT_SET = object()


class _Future(Future):
    """Delayed call, executed with the other pending calls by `JoblibExecutor.wait`"""

    def __init__(self, function, args, kwargs):
        self.function = function
        self.args = args
        self.kwargs = kwargs
        self.result = NOT_SET

    def get(self, timeout=None):
        if not self.ready():
            raise RuntimeError("Future was not waited on by its executor")
        return self.result

    def ready(self):
        return self.result is not NOT_SET


class JoblibExecutor(BaseExecutor):
    """Run the submitted calls in parallel with ``joblib.Parallel``.

    Calls only start when ``wait()`` is called. Results are returned in submission order.
    An exception raised by one of the calls is raised by ``wait()``.

    Parameters
    ----------
    n_workers: int, optional
        Number of parallel jobs. -1 uses all cores. Default: -1
    backend: str, optional
        joblib backend, ``loky``, ``threading`` or ``multiprocessing``. Default: ``loky``

    """

    def __init__(self, n_workers=-1, backend="loky", **config):
        super().__init__(n_workers=n_workers)
        self.backend = backend

    def submit(self, function, *args, **kwargs):
        if self.closed:
            raise ExecutorClosed()

        return _Future(function, args, kwargs)

    def wait(self, futures):
        pending = [future for future in futures if not future.ready()]
        if pending:
            results = joblib.Parallel(n_jobs=self.n_workers, backend=self.backend)(
                joblib.delayed(future.function)(*future.args, **future.kwargs)
                for future in pending
            )
            for future, result in zip(pending, results):
                future.result = result

        return [future.get() for future in futures]
