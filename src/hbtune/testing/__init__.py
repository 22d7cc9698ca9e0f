"""
Common testing support module
=============================

Common testing support module providing spaces, samplers, evaluators and observers whose
behaviour is fully deterministic.

"""
import itertools

from hbtune.algo.space import Integer, Real, Space
from hbtune.core.worker.events import HyperbandObserver


def build_space(r_min=1, r_max=81, integer=True, budget_id="epoch", n_params=1):
    """Return a space of ``n_params`` real parameters ``x0..xn`` in ``[0, 1]`` and a budget."""
    space = Space()
    for i in range(n_params):
        space.register(Real(f"x{i}", 0, 1))

    budget_class = Integer if integer else Real
    space.register(budget_class(budget_id, r_min, r_max, budget=True))
    return space


class ScriptedSampler:
    """Sampler returning configurations from a predefined sequence.

    Configurations are returned in order, across calls. When ``configurations`` is None,
    an endless sequence ``{name: 0}, {name: 1}, ...`` is generated for every parameter of
    ``space``.
    """

    def __init__(self, space, configurations=None):
        self.space = space
        if configurations is None:
            configurations = (
                {name: value for name in space.keys()} for value in itertools.count()
            )
        self._configurations = iter(configurations)
        self.calls = []

    def sample(self, n):
        self.calls.append(n)
        return [dict(config) for config in itertools.islice(self._configurations, n)]


class DeterministicEvaluator:
    """Evaluator calling ``function(params)`` sequentially for every record of a batch.

    Every batch received is kept in ``batches``, as copies of the parameters.
    """

    def __init__(self, function):
        self.function = function
        self.batches = []

    def evaluate_batch(self, records):
        self.batches.append([dict(record.params) for record in records])
        return [self.function(dict(record.params)) for record in records]

    @property
    def n_evaluations(self):
        """Number of configurations evaluated so far"""
        return sum(len(batch) for batch in self.batches)


class RecordingObserver(HyperbandObserver):
    """Keep every event received, as ``(event_name, argument)`` tuples."""

    def __init__(self):
        self.events = []

    def run_started(self, planner):
        self.events.append(("run_started", planner))

    def bracket_started(self, bracket):
        self.events.append(("bracket_started", bracket))

    def stage_planned(self, stage):
        self.events.append(("stage_planned", stage))

    def stage_completed(self, stage, records):
        self.events.append(("stage_completed", (stage, list(records))))

    def bracket_completed(self, bracket):
        self.events.append(("bracket_completed", bracket))

    def names(self):
        """Return the names of the events, in order of reception"""
        return [name for name, _ in self.events]


def first_objective(params, x="x0"):
    """Objective minimized when ``x`` is small, independent of the budget."""
    return {"loss": params[x]}
