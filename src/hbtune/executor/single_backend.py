"""
Executor without parallelism for debugging
==========================================

"""
import functools

from hbtune.executor.base import BaseExecutor, ExecutorClosed, Future

# A function can return None so we have to create a difference between
# the None result and the absence of result
NOT_SET = object()


class _Future(Future):
    """Wraps a partial function to act as a Future"""

    def __init__(self, future):
        self.future = future
        self.result = NOT_SET
        self.exception = NOT_SET

    def get(self, timeout=None):
        self.wait()

        if self.result is not NOT_SET:
            return self.result

        raise self.exception

    def wait(self):
        if self.ready():
            return

        try:
            self.result = self.future()
        except Exception as e:  # pylint: disable=broad-except
            self.exception = e

    def ready(self):
        return (self.result is not NOT_SET) or (self.exception is not NOT_SET)


class SingleExecutor(BaseExecutor):
    """Single thread executor

    The submitted functions are wrapped with ``functools.partial``
    which are then executed in ``wait()``, in submission order.

    """

    def __init__(self, n_workers=1, **config):
        super().__init__(n_workers=1)

    def submit(self, function, *args, **kwargs):
        if self.closed:
            raise ExecutorClosed()

        return _Future(functools.partial(function, *args, **kwargs))

    def wait(self, futures):
        return [future.get() for future in futures]
