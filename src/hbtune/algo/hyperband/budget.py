"""
Budget arithmetic of Hyperband
==============================

Pure functions converting a budget range ``[r_min, r_max]`` and a reduction factor ``eta``
into the number of brackets and the total budget of one Hyperband execution.

Budgets are rescaled to ``[1, R]`` with ``R = r_max / r_min`` (``config_max_b``) for the
arithmetic, and back to the user's units with ``budget * r_min``.

"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy

from hbtune.algo.space import Dimension, Integer
from hbtune.core.utils.exceptions import (
    BUDGET_TYPE_ERROR,
    BudgetParameterError,
    InvalidBudgetRange,
)

logger = logging.getLogger(__name__)

MIN_BUDGET = 1e-8
MIN_ETA = 1.0001
# Quotients and logarithms of exact powers of eta may land a few ulps off an integer.
ROUNDING_TOLERANCE = 1e-10


def floor_int(value: float) -> int:
    """Floor of ``value``, ignoring floating point noise just below an integer."""
    return int(numpy.floor(value + ROUNDING_TOLERANCE * max(1.0, abs(value))))


def ceil_int(value: float) -> int:
    """Ceiling of ``value``, ignoring floating point noise just above an integer."""
    return int(numpy.ceil(value - ROUNDING_TOLERANCE * max(1.0, abs(value))))


def validate_budget_range(r_min: float, r_max: float, eta: float) -> None:
    """Raise `InvalidBudgetRange` if ``(r_min, r_max, eta)`` is not a valid schedule."""
    if not (r_min > MIN_BUDGET and r_max >= r_min and eta >= MIN_ETA):
        raise InvalidBudgetRange(r_min, r_max, eta, MIN_BUDGET, MIN_ETA)


def compute_s_max(r_min: float, r_max: float, eta: float) -> int:
    """Return the index of the largest bracket, ``floor(log_eta(r_max) - log_eta(r_min))``.

    The difference of logarithms is used rather than ``log_eta(r_max / r_min)`` since the
    ratio is itself subject to rounding when the bounds are very large or very small.
    """
    validate_budget_range(r_min, r_max, eta)
    log_eta = numpy.log(eta)
    return floor_int(numpy.log(r_max) / log_eta - numpy.log(r_min) / log_eta)


def bracket_count(r_min: float, r_max: float, eta: float) -> int:
    """Return the number of brackets of one Hyperband execution, ``s_max + 1``."""
    return compute_s_max(r_min, r_max, eta) + 1


def total_budget(
    r_min: float, r_max: float, eta: float, integer_budget: bool = False
) -> int | float:
    """Return the total budget consumed by one complete Hyperband execution.

    Each of the ``s_max + 1`` brackets uses approximately ``B = (s_max + 1) * R`` on the
    rescaled budget, hence ``B * r_min`` in the user's units.

    Examples
    --------
    >>> total_budget(1, 81, 3)
    405.0
    >>> total_budget(1, 9, 3, integer_budget=True)
    27

    """
    config_max_b = r_max / r_min
    s_max = compute_s_max(r_min, r_max, eta)
    budget = (s_max + 1) * config_max_b * r_min
    if integer_budget:
        return int(round(budget))
    return float(budget)


@dataclass(frozen=True)
class BudgetSpec:
    """Budget range and reduction factor of a Hyperband execution.

    Parameters
    ----------
    r_min: float
        Smallest budget a configuration is evaluated with. Must be larger than ``1e-8``.
    r_max: float
        Largest budget a configuration is evaluated with.
    eta: float
        Reduction factor, at least ``1.0001``.
    integer_budget: bool
        Whether real budgets are rounded to the nearest integer.

    """

    r_min: float
    r_max: float
    eta: float
    integer_budget: bool = False
    config_max_b: float = field(init=False)
    s_max: int = field(init=False)
    B: float = field(init=False)  # pylint: disable=invalid-name

    def __post_init__(self):
        s_max = compute_s_max(self.r_min, self.r_max, self.eta)
        config_max_b = self.r_max / self.r_min
        # frozen dataclass
        object.__setattr__(self, "config_max_b", config_max_b)
        object.__setattr__(self, "s_max", s_max)
        object.__setattr__(self, "B", (s_max + 1) * config_max_b)

    @classmethod
    def from_dimension(cls, dimension: Dimension, eta: float) -> BudgetSpec:
        """Build the budget range from the bounds of the budget dimension of a search space."""
        if not getattr(dimension, "numeric", False):
            raise BudgetParameterError(
                BUDGET_TYPE_ERROR.format(name=dimension.name, type=dimension.type)
            )
        low, high = dimension.interval()
        return cls(low, high, eta, integer_budget=isinstance(dimension, Integer))

    @property
    def n_brackets(self) -> int:
        """Number of brackets, ``s_max + 1``."""
        return self.s_max + 1

    @property
    def total_budget(self) -> int | float:
        """See `total_budget`."""
        return total_budget(self.r_min, self.r_max, self.eta, self.integer_budget)

    def to_real(self, budget_scaled: float) -> int | float:
        """Rescale a budget of ``[1, config_max_b]`` to the user's units."""
        budget_real = budget_scaled * self.r_min
        if self.integer_budget:
            return int(round(budget_real))
        return float(budget_real)
