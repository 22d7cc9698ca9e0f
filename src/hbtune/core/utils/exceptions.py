"""
Custom exceptions for hbtune
============================

"""


class HyperbandError(Exception):
    """Base class of the errors raised while planning or running Hyperband."""


BUDGET_PARAMETER_ERROR = """\
Exactly one parameter of the search space must be tagged with 'budget'.
Found: {budget_ids}
"""


BUDGET_TYPE_ERROR = "Budget parameter '{name}' must be a real or an integer, not {type}."


class BudgetParameterError(HyperbandError):
    """Raise when the search space does not declare exactly one numeric budget parameter."""


INVALID_BUDGET_RANGE = """\
Invalid budget range: r_min={r_min}, r_max={r_max}, eta={eta}.
The budget must start at a small positive value (r_min > {min_budget}), end at or above
its start (r_max >= r_min) and eta must be at least {min_eta}.
"""


class InvalidBudgetRange(HyperbandError, ValueError):
    """Raise when (r_min, r_max, eta) cannot define a Hyperband schedule."""

    def __init__(self, r_min, r_max, eta, min_budget, min_eta):
        super().__init__(
            INVALID_BUDGET_RANGE.format(
                r_min=r_min,
                r_max=r_max,
                eta=eta,
                min_budget=min_budget,
                min_eta=min_eta,
            )
        )
        self.r_min = r_min
        self.r_max = r_max
        self.eta = eta


SAMPLER_MISMATCH_ERROR = """\
Parameters of the sampler do not match the search space without its budget parameter.
Sampler: {sampler_ids}
Expected: {expected_ids}
"""


class SamplerMismatchError(HyperbandError):
    """Raise when a user sampler does not sample the non-budget parameters."""

    def __init__(self, sampler_ids, expected_ids, message=SAMPLER_MISMATCH_ERROR):
        super().__init__(
            message.format(
                sampler_ids=sorted(sampler_ids), expected_ids=sorted(expected_ids)
            )
        )


SELECTION_SIZE_ERROR = """\
Cannot select {n_select} survivors out of {n_available} configurations.
This should never happen. If you get this error please report the bracket layout
(r_min, r_max, eta) that produced it.
"""


class SelectionSizeError(HyperbandError):
    """Raise when more survivors are requested than there are evaluated configurations."""

    def __init__(self, n_select, n_available, message=SELECTION_SIZE_ERROR):
        super().__init__(message.format(n_select=n_select, n_available=n_available))
        self.n_select = n_select
        self.n_available = n_available


class InvalidResult(HyperbandError, ValueError):
    """The results returned by an evaluator do not match the submitted batch."""
