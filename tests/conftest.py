#!/usr/bin/env python
"""Common fixtures and utils for unittests and functional tests."""
import numpy
import pytest

import hbtune.core
from hbtune.algo.hyperband.brackets import BracketPlanner
from hbtune.algo.hyperband.budget import BudgetSpec
from hbtune.testing import build_space

# So that assert messages show up in tests defined outside testing suite.
pytest.register_assert_rewrite("hbtune.testing")


@pytest.fixture(scope="session", autouse=True)
def shield_from_user_config(request):
    """Do not read user's yaml global config."""
    _pop_out_yaml_from_config(hbtune.core.config)


def _pop_out_yaml_from_config(config):
    """Remove any configuration fetch from yaml file"""
    for key in config._config.keys():
        config._config[key].pop("yaml", None)

    for key in config._subconfigs.keys():
        _pop_out_yaml_from_config(config._subconfigs[key])


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove hbtune environment variables for the duration of a test."""
    for env_var in (
        "HBTUNE_ETA",
        "HBTUNE_SEED",
        "HBTUNE_EXECUTOR",
        "HBTUNE_N_WORKERS",
    ):
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture()
def seed():
    """Return a fixed ``numpy.random.RandomState`` and global seed."""
    seed = 5
    rng = numpy.random.RandomState(seed)
    numpy.random.seed(seed)
    return rng


@pytest.fixture()
def space():
    """Space with a real parameter ``x0`` in [0, 1] and an integer budget ``epoch`` in [1, 81]"""
    return build_space(1, 81, integer=True)


@pytest.fixture()
def budget_spec():
    """Budget range [1, 81] with eta=3"""
    return BudgetSpec(1, 81, 3, integer_budget=True)


@pytest.fixture()
def planner(budget_spec):
    """Planner of the budget range [1, 81] with eta=3"""
    return BracketPlanner(budget_spec)
