#!/usr/bin/env python
"""Tests for :mod:`hbtune.algo.hyperband.hyperband`."""
import logging

import pytest

from hbtune.algo.hyperband import Hyperband, format_objectives, get_budget_dimension
from hbtune.algo.sampler import UniformSampler
from hbtune.algo.space import Categorical, Real, Space
from hbtune.core.utils.exceptions import (
    BudgetParameterError,
    InvalidBudgetRange,
    SamplerMismatchError,
)
from hbtune.core.worker.events import LoggingObserver
from hbtune.core.worker.performance_log import PerformanceLog
from hbtune.core.worker.record import ConfigurationRecord
from hbtune.testing import (
    DeterministicEvaluator,
    RecordingObserver,
    ScriptedSampler,
    build_space,
    first_objective,
)


@pytest.fixture()
def evaluator():
    return DeterministicEvaluator(first_objective)


@pytest.fixture()
def hyperband(space, evaluator):
    return Hyperband(
        space,
        "loss",
        evaluator,
        eta=3,
        sampler=ScriptedSampler(space.subset(["x0"])),
        observer=RecordingObserver(),
    )


class TestFormatObjectives:
    """Test accepted formats of objectives"""

    def test_str(self):
        assert format_objectives("loss") == {"loss": True}

    def test_sequence(self):
        assert format_objectives(["loss", "time"]) == {"loss": True, "time": True}

    def test_pairs(self):
        assert format_objectives([("loss", True), ("acc", False)]) == {
            "loss": True,
            "acc": False,
        }

    def test_mapping_keeps_order(self):
        objectives = format_objectives({"acc": False, "loss": True})
        assert list(objectives) == ["acc", "loss"]

    def test_empty(self):
        with pytest.raises(ValueError):
            format_objectives([])


class TestBudgetDimension:
    """Test validation of the budget parameter"""

    def test_found(self, space):
        assert get_budget_dimension(space).name == "epoch"

    def test_none(self):
        space = Space()
        space.register(Real("x0", 0, 1))
        with pytest.raises(BudgetParameterError) as exc:
            get_budget_dimension(space)

        assert "Exactly one parameter" in str(exc.value)
        assert "Found: []" in str(exc.value)

    def test_many(self, space):
        space.register(Real("lr", 1, 2, budget=True))
        with pytest.raises(BudgetParameterError) as exc:
            get_budget_dimension(space)

        assert "Found: ['epoch', 'lr']" in str(exc.value)

    def test_not_numeric(self, evaluator):
        space = Space()
        space.register(Real("x0", 0, 1))
        space.register(Categorical("epoch", [1, 2, 3], budget=True))
        with pytest.raises(BudgetParameterError) as exc:
            Hyperband(space, "loss", evaluator)

        assert "must be a real or an integer, not categorical" in str(exc.value)


class TestInit:
    """Test construction of the driver"""

    def test_derived_values(self, hyperband):
        assert hyperband.budget_id == "epoch"
        assert hyperband.config_max_b == 81
        assert hyperband.s_max == 4
        assert hyperband.B == 405
        assert hyperband.budget_spec.integer_budget

    def test_invalid_range(self, evaluator):
        space = build_space(1, 81)
        with pytest.raises(InvalidBudgetRange):
            Hyperband(space, "loss", evaluator, eta=1)

    def test_missing_budget(self, evaluator):
        space = Space()
        space.register(Real("x0", 0, 1))
        with pytest.raises(BudgetParameterError):
            Hyperband(space, "loss", evaluator)

    def test_default_sampler(self, space, evaluator):
        hyperband = Hyperband(space, "loss", evaluator, eta=3, seed=1)
        assert isinstance(hyperband.sampler, UniformSampler)
        assert hyperband.sampler.space.keys() == ["x0"]
        assert hyperband.sampler.seed == 1

    def test_default_observer_and_log(self, space, evaluator):
        hyperband = Hyperband(space, "loss", evaluator, eta=3)
        assert isinstance(hyperband.observer, LoggingObserver)
        assert isinstance(hyperband.log, PerformanceLog)
        assert len(hyperband.log) == 0

    def test_eta_from_config(self, space, evaluator, monkeypatch):
        """Test that eta defaults to the configured value"""
        hyperband = Hyperband(space, "loss", evaluator)
        assert hyperband.budget_spec.eta == 2
        assert hyperband.s_max == 6

        monkeypatch.setenv("HBTUNE_ETA", "3")
        hyperband = Hyperband(space, "loss", evaluator)
        assert hyperband.budget_spec.eta == 3
        assert hyperband.s_max == 4

    def test_seed_from_config(self, space, evaluator, monkeypatch):
        monkeypatch.setenv("HBTUNE_SEED", "7")
        hyperband = Hyperband(space, "loss", evaluator, eta=3)
        assert hyperband.sampler.seed == 7

    def test_sampler_mismatch(self, space, evaluator):
        other = Space()
        other.register(Real("y", 0, 1))
        with pytest.raises(SamplerMismatchError) as exc:
            Hyperband(space, "loss", evaluator, sampler=ScriptedSampler(other))

        assert "Sampler: ['y']" in str(exc.value)
        assert "Expected: ['x0']" in str(exc.value)

    def test_sampler_including_budget(self, space, evaluator):
        """Test that a sampler must not sample the budget parameter"""
        with pytest.raises(SamplerMismatchError):
            Hyperband(space, "loss", evaluator, sampler=ScriptedSampler(space))

    def test_repr(self, hyperband):
        assert repr(hyperband) == (
            "Hyperband(budget=epoch, r_min=1, r_max=81, eta=3, objectives={'loss': True})"
        )


class TestRun:
    """Test complete executions"""

    def test_layout_evaluated(self, hyperband, evaluator):
        """Test that every stage of every bracket is evaluated once"""
        log = hyperband.run()

        assert log is hyperband.log
        assert [len(batch) for batch in evaluator.batches] == [
            81, 27, 9, 3, 1, 34, 11, 3, 1, 15, 5, 1, 8, 2, 5
        ]
        assert len(log) == 206
        assert evaluator.n_evaluations == 206
        assert len(log.where(bracket=4, bracket_stage=0)) == 81
        assert {record.budget_real for record in log.where(bracket=0)} == {81}

    def test_total_budget(self, hyperband):
        log = hyperband.run()
        assert sum(record.budget_real for record in log) == 405 + 363 + 351 + 378 + 405

    def test_events(self, hyperband):
        hyperband.run()
        names = hyperband.observer.names()
        assert names[0] == "run_started"
        assert names[1] == "bracket_started"
        assert names[-1] == "bracket_completed"
        assert names.count("bracket_started") == 5
        assert names.count("stage_planned") == 15
        assert names.count("stage_completed") == 15
        events = hyperband.observer.events
        brackets = [arg.s for name, arg in events if name == "bracket_started"]
        assert brackets == [4, 3, 2, 1, 0]

    def test_evaluation_failure_propagates(self, space):
        """Test that the log keeps the stages evaluated before a failure"""

        def objective(params):
            if params["epoch"] > 1:
                raise RuntimeError("out of memory")
            return params["x0"]

        hyperband = Hyperband(
            space,
            "loss",
            DeterministicEvaluator(objective),
            eta=3,
            sampler=ScriptedSampler(space.subset(["x0"])),
            observer=RecordingObserver(),
        )
        with pytest.raises(RuntimeError) as exc:
            hyperband.run()

        assert "out of memory" in str(exc.value)
        assert len(hyperband.log) == 81

    def test_seeded_runs_identical(self):
        def run(seed):
            hyperband = Hyperband(
                build_space(1, 9),
                "loss",
                DeterministicEvaluator(first_objective),
                eta=3,
                seed=seed,
            )
            return [record.to_dict() for record in hyperband.run()]

        assert run(3) == run(3)
        assert run(3) != run(4)

    def test_logging_observer(self, space, evaluator, caplog):
        hyperband = Hyperband(
            space,
            "loss",
            evaluator,
            eta=3,
            sampler=ScriptedSampler(space.subset(["x0"])),
        )
        with caplog.at_level(logging.INFO, logger="hbtune.algo.hyperband"):
            hyperband.run()

        assert "Amount of brackets to be evaluated = 5" in caplog.text
        assert "Start evaluation of bracket 1 (s=4)" in caplog.text
        assert "Start evaluation of bracket 5 (s=0)" in caplog.text
        assert "Training 34 configs with budget of 3 for each" in caplog.text


class TestBest:
    """Test retrieval of the best configurations"""

    def test_before_run(self, hyperband):
        assert hyperband.best() == []

    def test_best(self, hyperband):
        hyperband.run()
        best = hyperband.best()
        assert len(best) == 1
        assert best[0].params == {"x0": 0, "epoch": 81}

    def test_best_many(self, hyperband):
        """Test that best records come from the maximum budget only"""
        hyperband.run()
        # Best of each bracket at the maximum budget: 0, 81, 115, 130 and 138
        best = hyperband.best(3)
        assert [record.params["x0"] for record in best] == [0, 81, 115]
        assert all(record.budget_real == 81 for record in best)

    def test_best_more_than_available(self, hyperband):
        hyperband.run()
        # 1 + 1 + 1 + 2 + 5 records with budget 81
        assert len(hyperband.best(100)) == 10

    def test_multi_objective(self, space, evaluator):
        """Test that the Pareto front of the maximum budget is returned"""
        hyperband = Hyperband(
            space,
            {"loss": True, "acc": False},
            evaluator,
            eta=3,
            observer=RecordingObserver(),
        )
        last = hyperband.planner.stage(hyperband.planner.bracket(0), 0)
        first = hyperband.planner.stage(hyperband.planner.bracket(4), 0)
        results = [(0, 0), (1, 1), (2, 0), (3, 3), (4, 2)]
        records = []
        for x0, (loss, acc) in enumerate(results):
            record = ConfigurationRecord.for_stage({"x0": x0}, "epoch", last)
            record.set_results({"loss": loss, "acc": acc})
            records.append(record)
        # Dominates everything, but not evaluated with the maximum budget
        record = ConfigurationRecord.for_stage({"x0": 5}, "epoch", first)
        record.set_results({"loss": -1, "acc": 10})
        records.append(record)
        hyperband.log.append(records)

        best = hyperband.best(5)
        assert sorted(record.params["x0"] for record in best) == [0, 1, 3]

        best = hyperband.best(2)
        assert sorted(record.params["x0"] for record in best) == [0, 3]

    def test_multi_objective_missing_result(self, space, evaluator):
        """Test that a configuration with a missing objective is never among the best"""
        hyperband = Hyperband(
            space,
            {"a": True, "b": True},
            evaluator,
            eta=3,
            observer=RecordingObserver(),
        )
        last = hyperband.planner.stage(hyperband.planner.bracket(0), 0)
        records = []
        for x0, (a, b) in enumerate([(float("nan"), 0), (1, 1), (5, 5)]):
            record = ConfigurationRecord.for_stage({"x0": x0}, "epoch", last)
            record.set_results({"a": a, "b": b})
            records.append(record)
        hyperband.log.append(records)

        best = hyperband.best(2)
        assert [record.params["x0"] for record in best] == [1]
