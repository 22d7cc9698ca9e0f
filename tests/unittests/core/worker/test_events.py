#!/usr/bin/env python
"""Tests for :mod:`hbtune.core.worker.events`."""
import logging

import pytest

from hbtune.core.worker.events import HyperbandObserver, LoggingObserver
from hbtune.core.worker.record import ConfigurationRecord

LOGGER = "hbtune.algo.hyperband"


@pytest.fixture()
def evaluated(planner):
    stage = planner.stage(planner.bracket(1), 1)
    records = []
    for value in (0.1, 0.2):
        record = ConfigurationRecord.for_stage({"x0": value}, "epoch", stage)
        record.set_results({"loss": value})
        records.append(record)
    return stage, records


def test_base_observer_is_noop(planner, evaluated):
    observer = HyperbandObserver()
    bracket = planner.bracket(1)
    stage, records = evaluated
    observer.run_started(planner)
    observer.bracket_started(bracket)
    observer.stage_planned(stage)
    observer.stage_completed(stage, records)
    observer.bracket_completed(bracket)


class TestLoggingObserver:
    """Test progress messages"""

    def test_run_started(self, planner, caplog):
        with caplog.at_level(logging.INFO, logger=LOGGER):
            LoggingObserver().run_started(planner)

        assert "Amount of brackets to be evaluated = 5" in caplog.text
        assert "Bracket layout" in caplog.text

    def test_bracket_numbering(self, planner, caplog):
        """Test that brackets are numbered from 1 in execution order"""
        observer = LoggingObserver()
        with caplog.at_level(logging.INFO, logger=LOGGER):
            observer.run_started(planner)
            for bracket in planner.brackets():
                observer.bracket_started(bracket)

        assert "Start evaluation of bracket 1 (s=4)" in caplog.text
        assert "Start evaluation of bracket 3 (s=2)" in caplog.text
        assert "Start evaluation of bracket 5 (s=0)" in caplog.text

    def test_stage_planned(self, planner, caplog):
        stage = planner.stage(planner.bracket(4), 0)
        with caplog.at_level(logging.INFO, logger=LOGGER):
            LoggingObserver().stage_planned(stage)

        assert "Training 81 configs with budget of 1 for each" in caplog.text

    def test_stage_completed_debug(self, evaluated, caplog):
        stage, records = evaluated
        with caplog.at_level(logging.DEBUG, logger=LOGGER):
            LoggingObserver().stage_completed(stage, records)

        assert "Results of bracket 1 stage 1" in caplog.text
        assert "loss" in caplog.text

    def test_stage_completed_silent_at_info(self, evaluated, caplog):
        stage, records = evaluated
        with caplog.at_level(logging.INFO, logger=LOGGER):
            LoggingObserver().stage_completed(stage, records)

        assert "Results of bracket" not in caplog.text
