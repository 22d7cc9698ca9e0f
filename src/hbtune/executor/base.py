"""
Base Executor
=============

Base executor class used by evaluators to run the configurations of a stage.

"""


class ExecutorClosed(Exception):
    """Raised when submitting to a closed executor"""


class Future:
    """Generic Future interface to harmonize the futures of different executors"""

    def get(self, timeout=None):
        """Return the result when it arrives.
        If the remote call raised an exception then that exception will be reraised by get().
        """

    def ready(self):
        """Return whether the call has completed."""


class BaseExecutor:
    """Base executor class

    Parameters
    ----------
    n_workers: int
        The number of workers the Executor should have.

    """

    def __init__(self, n_workers, **kwargs):
        self.n_workers = n_workers
        self.closed = False

    def submit(self, function, *args, **kwargs):
        """Submit work to the executor

        Parameters
        ----------
        function: a callable object
            A function to be executed by the executor.
        *args, **kwargs:
            Arguments for the function.

        """
        raise NotImplementedError

    def wait(self, futures):
        """Wait for all futures to complete and return their results, in order.

        Parameters
        ----------
        futures: list of `Future`
            The objects returned by ``submit()`` of the executor.

        """
        raise NotImplementedError

    def close(self):
        """Prevent user from submitting work after closing."""
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
