"""
Container class for evaluated configurations
============================================

A `ConfigurationRecord` is a configuration scheduled in a stage of a bracket: its parameters,
the budget it is evaluated with, the bracket bookkeeping and, once evaluated, its
performance on every objective.

"""
from __future__ import annotations

import copy
import hashlib
from typing import Any, Mapping


class ConfigurationRecord:
    """Represents a configuration evaluated at a stage of a bracket.

    Attributes
    ----------
    params: dict
       Values of the parameters, budget parameter included.
    budget_id: str
       Name of the budget parameter in ``params``.
    bracket: int
       Index ``s`` of the bracket.
    bracket_stage: int
       Index ``i`` of the stage in the bracket, starting at 0.
    budget_scaled: float
       Budget of the stage on the rescaled ``[1, r_max / r_min]`` scale.
    budget_real: int or float
       Budget of the stage in the units of the budget parameter.
    n_configs: int
       Number of configurations evaluated in the stage.
    parent: `ConfigurationRecord` or None
       Record of the previous stage this configuration survived from.

    """

    __slots__ = (
        "params",
        "budget_id",
        "bracket",
        "bracket_stage",
        "budget_scaled",
        "budget_real",
        "n_configs",
        "parent",
        "_results",
    )

    def __init__(
        self,
        params: Mapping[str, Any],
        budget_id: str | None = None,
        bracket: int | None = None,
        bracket_stage: int | None = None,
        budget_scaled: float | None = None,
        budget_real: int | float | None = None,
        n_configs: int | None = None,
        parent: ConfigurationRecord | None = None,
        results: Mapping[str, float] | None = None,
    ):
        self.params = dict(params)
        self.budget_id = budget_id
        self.bracket = bracket
        self.bracket_stage = bracket_stage
        self.budget_scaled = budget_scaled
        self.budget_real = budget_real
        self.n_configs = n_configs
        self.parent = parent
        self._results = dict(results) if results is not None else None

    @classmethod
    def for_stage(
        cls,
        configuration: Mapping[str, Any],
        budget_id: str,
        stage,
        parent: ConfigurationRecord | None = None,
    ) -> ConfigurationRecord:
        """Create the record of ``configuration`` for a `hbtune.algo.hyperband.Stage`."""
        params = {
            key: value for key, value in configuration.items() if key != budget_id
        }
        params[budget_id] = stage.budget_real
        return cls(
            params,
            budget_id=budget_id,
            bracket=stage.bracket,
            bracket_stage=stage.stage,
            budget_scaled=stage.budget_scaled,
            budget_real=stage.budget_real,
            n_configs=stage.mu_current,
            parent=parent,
        )

    def branch(self, stage) -> ConfigurationRecord:
        """Create a new record of the same configuration for the next stage."""
        return self.for_stage(self.configuration, self.budget_id, stage, parent=self)

    @property
    def configuration(self) -> dict[str, Any]:
        """Parameters without the budget."""
        return {
            key: value for key, value in self.params.items() if key != self.budget_id
        }

    @property
    def id(self) -> str:  # pylint: disable=invalid-name
        """Hash of the configuration, identical for all stages of a configuration."""
        return hashlib.md5(
            str(sorted(self.configuration.items())).encode("utf-8")
        ).hexdigest()

    @property
    def results(self) -> dict[str, float] | None:
        """Performance on each objective, None until evaluated."""
        return copy.copy(self._results)

    @property
    def is_evaluated(self) -> bool:
        return self._results is not None

    def set_results(self, results: Mapping[str, float]) -> None:
        """Store the performance of the configuration. Can only be done once."""
        if self._results is not None:
            raise RuntimeError(f"Results of {self} are already set")
        self._results = dict(results)

    def to_dict(self) -> dict[str, Any]:
        """Return the flat row of this record, as stored in the performance log."""
        row = dict(self.params)
        row.update(
            bracket=self.bracket,
            bracket_stage=self.bracket_stage,
            budget_scaled=self.budget_scaled,
            budget_real=self.budget_real,
            n_configs=self.n_configs,
        )
        if self._results is not None:
            row.update(self._results)
        return row

    def __eq__(self, other):
        if not isinstance(other, ConfigurationRecord):
            return False
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return "{}(params={}, bracket={}, bracket_stage={}, results={})".format(
            self.__class__.__name__,
            self.params,
            self.bracket,
            self.bracket_stage,
            self._results,
        )
