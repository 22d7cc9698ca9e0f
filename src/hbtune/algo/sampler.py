"""
Samplers of initial configurations
==================================

Hyperband draws the configurations of the first stage of every bracket from a sampler.
Any object with a ``space`` attribute (the `hbtune.algo.space.Space` it samples from) and a
``sample(n)`` method returning ``n`` parameter mappings can be used.

"""
from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from hbtune.algo.space import Space
from hbtune.core.utils import check_random_state

logger = logging.getLogger(__name__)


class Sampler(Protocol):
    """Capability to sample configurations of a parameter space."""

    space: Space

    def sample(self, n: int) -> list[dict[str, Any]]:
        """Return ``n`` configurations, each a mapping of parameter name to value."""


class UniformSampler:
    """Sample independently each dimension of ``space`` from its prior.

    Parameters
    ----------
    space: `hbtune.algo.space.Space`
        Dimensions to sample. The budget dimension should not be part of it.
    seed: None, int or sequence of int
        Seed for the random number generator used to sample new configurations.
        Default: ``None``

    """

    def __init__(self, space: Space, seed: int | Sequence[int] | None = None):
        self.space = space
        self.seed_rng(seed)

    def seed_rng(self, seed: int | Sequence[int] | None) -> None:
        """Seed the state of the random number generator.

        :param seed: Integer seed for the random number generator.
        """
        self.seed = seed
        self.rng = check_random_state(seed)

    def sample(self, n: int) -> list[dict[str, Any]]:
        if n < 0:
            raise ValueError(f"Cannot sample a negative number of configurations: {n}")

        configurations = self.space.sample(n, seed=self.rng)
        logger.debug("Sampled %d configurations", len(configurations))
        return configurations

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(params={self.space.keys()}, seed={self.seed})"
