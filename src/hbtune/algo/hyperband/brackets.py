"""
Bracket planning
================

Compute the constants of every bracket and the plan of every stage of a bracket.

For bracket ``s`` (``s_max`` down to ``0``) of a budget range rescaled to ``[1, R]``, with
``B = (s_max + 1) * R``:

* ``mu_start = ceil((B * eta^s) / (R * (s + 1)))`` configurations start the bracket,
* with the budget ``budget_start = R / eta^s``.

Stage ``i`` (``0`` to ``s``) of the bracket evaluates ``floor(mu_start / eta^i)``
configurations with the budget ``budget_start * eta^i``. The budget summed over the stages of
a bracket is roughly ``B`` for all brackets.

"""
from __future__ import annotations

import logging
from typing import Any, NamedTuple

from tabulate import tabulate

from hbtune.algo.hyperband.budget import BudgetSpec, ceil_int, floor_int

logger = logging.getLogger(__name__)


class Bracket(NamedTuple):
    """Constants of a bracket"""

    s: int
    mu_start: int
    budget_start: float


class Stage(NamedTuple):
    """Plan of a stage of a bracket"""

    bracket: int
    stage: int
    mu_current: int
    budget_scaled: float
    budget_real: int | float


LAYOUT_HEADERS = ["bracket", "bracket_stage", "budget_scaled", "budget_real", "n_configs"]


class BracketPlanner:
    """Plan the brackets and stages of one Hyperband execution.

    Parameters
    ----------
    budget_spec: `hbtune.algo.hyperband.budget.BudgetSpec`
        Budget range and reduction factor.

    """

    def __init__(self, budget_spec: BudgetSpec):
        self.budget_spec = budget_spec

    @property
    def eta(self) -> float:
        return self.budget_spec.eta

    @property
    def config_max_b(self) -> float:
        return self.budget_spec.config_max_b

    @property
    def s_max(self) -> int:
        return self.budget_spec.s_max

    @property
    def B(self) -> float:  # pylint: disable=invalid-name
        return self.budget_spec.B

    def bracket(self, s: int) -> Bracket:
        """Return the constants of bracket ``s``."""
        if not 0 <= s <= self.s_max:
            raise ValueError(f"Bracket index must be in [0, {self.s_max}], got {s}")

        mu_start = ceil_int((self.B * self.eta**s) / (self.config_max_b * (s + 1)))
        budget_start = self.config_max_b / self.eta**s
        return Bracket(s=s, mu_start=mu_start, budget_start=budget_start)

    def brackets(self) -> list[Bracket]:
        """Return all brackets, from the largest (``s_max``) to the smallest (``0``)."""
        return [self.bracket(s) for s in range(self.s_max, -1, -1)]

    def stage(self, bracket: Bracket, i: int) -> Stage:
        """Return the plan of stage ``i`` of ``bracket``."""
        if not 0 <= i <= bracket.s:
            raise ValueError(f"Stage index must be in [0, {bracket.s}], got {i}")

        budget_scaled = bracket.budget_start * self.eta**i
        return Stage(
            bracket=bracket.s,
            stage=i,
            mu_current=floor_int(bracket.mu_start / self.eta**i),
            budget_scaled=budget_scaled,
            budget_real=self.budget_spec.to_real(budget_scaled),
        )

    def stages(self, bracket: Bracket) -> list[Stage]:
        """Return the plans of all stages of ``bracket``."""
        return [self.stage(bracket, i) for i in range(bracket.s + 1)]

    def layout(self) -> list[dict[str, Any]]:
        """Return every stage of every bracket, in the order they are executed."""
        return [
            {
                "bracket": stage.bracket,
                "bracket_stage": stage.stage,
                "budget_scaled": stage.budget_scaled,
                "budget_real": stage.budget_real,
                "n_configs": stage.mu_current,
            }
            for bracket in self.brackets()
            for stage in self.stages(bracket)
        ]

    def tabulate_layout(self, tablefmt: str = "github") -> str:
        """Render `layout` as a text table."""
        rows = [[row[key] for key in LAYOUT_HEADERS] for row in self.layout()]
        return tabulate(rows, LAYOUT_HEADERS, tablefmt=tablefmt)

    def display(self) -> None:
        """Log the bracket layout and the total budget."""
        spec = self.budget_spec
        logger.info(
            "Bracket layout:\n%s\nr_min=%s, r_max=%s, eta=%s, brackets=%d, total budget=%s",
            self.tabulate_layout(),
            spec.r_min,
            spec.r_max,
            spec.eta,
            spec.n_brackets,
            spec.total_budget,
        )

    def __repr__(self) -> str:
        return "{}(config_max_b={}, s_max={}, B={})".format(
            self.__class__.__name__, self.config_max_b, self.s_max, self.B
        )
