"""
Search space of tuning problems
===============================

Classes describing the parameters of the process being tuned.

There are 4 classes representing possible parameter types. All of them subclass
the base class `Dimension`:

    * `Real`
    * `Integer`
    * `Categorical`
    * `Logical`

They are registered in a `Space`, a dictionary sorted by parameter names. Exactly one numeric
dimension of the space used by Hyperband carries the ``budget`` tag: its bounds define the
range of budgets ``[r_min, r_max]`` and it is never sampled, the scheduler assigns its value.

Random variates are drawn from :scipy.stats:`distributions`.

"""
from __future__ import annotations

import numbers

import numpy
from scipy.stats import distributions

from hbtune.core.utils import check_random_state


class Dimension:
    """Base class for search space dimensions.

    Attributes
    ----------
    name : str
       Unique identifier for this `Dimension`.
    type : str
       Identifier for the type of parameters this `Dimension` is representing.
       It can be 'real', 'integer', 'categorical' or 'logical'.
    budget : bool
       Whether this dimension is the budget of the tuned process.

    """

    numeric = False

    def __init__(self, name, budget=False):
        self._name = None
        self.name = name
        self.budget = bool(budget)

    @property
    def name(self):
        """See `Dimension` attributes."""
        return self._name

    @name.setter
    def name(self, value):
        if not isinstance(value, str):
            raise TypeError(
                "Dimension's name must be a string. "
                "Provided: {}, of type: {}".format(value, type(value))
            )
        self._name = value

    @property
    def type(self):
        """See `Dimension` attributes."""
        return self.__class__.__name__.lower()

    def sample(self, n_samples=1, seed=None):
        """Draw ``n_samples`` random values of this dimension.

        Parameters
        ----------
        n_samples : int, optional
           The number of samples to be drawn. Default is 1 sample.
        seed : None | int | ``numpy.random.RandomState`` instance, optional
           If None, the **global** numpy random state is used. If integer, it is used to seed a
           RandomState instance **just for the call of this function**. Pass a
           ``numpy.random.RandomState`` to carry on the changes in random state across calls.

        """
        raise NotImplementedError

    def interval(self):
        """Return the bounds (both inclusive) or the possible values of this dimension."""
        raise NotImplementedError

    def __contains__(self, value):
        raise NotImplementedError

    def _get_hashable_members(self):
        return (self.name, self.type, self.budget, tuple(self.interval()))

    def __eq__(self, other):
        """Return True if other is the same dimension as self"""
        if not isinstance(other, Dimension):
            return False

        # pylint:disable=protected-access
        return self._get_hashable_members() == other._get_hashable_members()

    def __hash__(self):
        return hash(self._get_hashable_members())

    def __repr__(self):
        budget = ", budget=True" if self.budget else ""
        return f"{self.__class__.__name__}(name={self.name}, interval={self.interval()}{budget})"


class Real(Dimension):
    """Search space dimension that can take on any real value in ``[low, high]``.

    Parameters
    ----------
    name: str
    low: float
       Lower bound (inclusive).
    high: float
       Upper bound (inclusive).
    prior: str, optional
       ``uniform`` or ``loguniform``. Default: ``uniform``.
    budget: bool, optional
       Tag this dimension as the budget parameter. Default: False.

    """

    numeric = True

    def __init__(self, name, low, high, prior="uniform", budget=False):
        if high < low:
            raise ValueError(
                "Lower bound {} has to be less than upper bound {}".format(low, high)
            )
        if prior not in ("uniform", "loguniform"):
            raise ValueError(f"Unsupported prior for {name}: {prior}")
        if prior == "loguniform" and low <= 0:
            raise ValueError(f"Lower bound of loguniform {name} must be positive")

        self.low = low
        self.high = high
        self.prior_name = prior
        super().__init__(name, budget=budget)

    def _prior(self):
        if self.prior_name == "loguniform":
            return distributions.loguniform(self.low, self.high)
        return distributions.uniform(loc=self.low, scale=self.high - self.low)

    def sample(self, n_samples=1, seed=None):
        if self.low == self.high:
            return [self.low] * n_samples

        rng = check_random_state(seed)
        return self._prior().rvs(size=n_samples, random_state=rng).tolist()

    def interval(self):
        return (self.low, self.high)

    def __contains__(self, value):
        try:
            return bool(self.low <= value <= self.high)
        except TypeError:
            return False


class Integer(Real):
    """Search space dimension representing integer values in ``[low, high]``.

    Integer budgets are rounded to the nearest integer when rescaled by Hyperband.
    """

    def __init__(self, name, low, high, budget=False):
        super().__init__(name, int(low), int(high), prior="uniform", budget=budget)

    def sample(self, n_samples=1, seed=None):
        rng = check_random_state(seed)
        prior = distributions.randint(self.low, self.high + 1)
        return prior.rvs(size=n_samples, random_state=rng).tolist()

    def __contains__(self, value):
        if isinstance(value, (bool, numpy.bool_)) or not isinstance(
            value, numbers.Number
        ):
            return False
        return value % 1 == 0 and super().__contains__(value)


class Categorical(Dimension):
    """Search space dimension that can take on categorical values.

    Parameters
    ----------
    name : str
    categories : dict or other iterable
       A dictionary would associate categories to probabilities, else
       it assumes to be drawn uniformly from the iterable.

    """

    def __init__(self, name, categories, budget=False):
        if isinstance(categories, dict):
            self.categories = tuple(categories.keys())
            self._probs = tuple(categories.values())
        else:
            self.categories = tuple(categories)
            self._probs = tuple(numpy.tile(1.0 / len(self.categories), len(self.categories)))

        if not self.categories:
            raise ValueError(f"Categorical dimension {name} needs at least one category")

        super().__init__(name, budget=budget)

    def sample(self, n_samples=1, seed=None):
        rng = check_random_state(seed)
        cat_ndarray = numpy.array(self.categories, dtype=object)
        return rng.choice(cat_ndarray, p=self._probs, size=n_samples).tolist()

    def interval(self):
        return self.categories

    def __contains__(self, value):
        return value in self.categories


class Logical(Categorical):
    """Search space dimension for boolean flags."""

    def __init__(self, name, budget=False):
        super().__init__(name, (True, False), budget=budget)


class Space(dict):
    """Represents the search space.

    It is a sorted dictionary which contains `Dimension` objects.
    The dimensions are sorted based on their names.
    """

    contains = Dimension

    def register(self, dimension):
        """Register a new dimension to `Space`."""
        self[dimension.name] = dimension

    def budget_dimensions(self):
        """Return the dimensions tagged with ``budget``."""
        return [dim for dim in self.values() if dim.budget]

    def subset(self, names):
        """Return a new `Space` with only the dimensions in ``names``."""
        space = Space()
        for name in names:
            space.register(self[name])
        return space

    def sample(self, n_samples=1, seed=None):
        """Draw random configurations from this space.

        Parameters
        ----------
        n_samples : int, optional
           The number of configurations to be drawn. Default is 1.
        seed : None | int | ``numpy.random.RandomState`` instance, optional
           See `Dimension.sample`.

        Returns
        -------
        list of dict
           Each element maps the names of the dimensions to a value.

        """
        if not self:
            return [{} for _ in range(n_samples)]

        rng = check_random_state(seed)
        columns = [dim.sample(n_samples, rng) for dim in self.values()]
        keys = self.keys()
        return [dict(zip(keys, values)) for values in zip(*columns)]

    def __getitem__(self, key):
        """Wrap __getitem__ to allow searching with position."""
        if isinstance(key, str):
            return super().__getitem__(key)

        return self.values()[key]

    def __setitem__(self, key, value):
        if not isinstance(key, str):
            raise TypeError(
                "Keys registered to {} must be string types. "
                "Provided: {}".format(self.__class__.__name__, key)
            )
        if not isinstance(value, self.contains):
            raise TypeError(
                "Values registered to {} must be {} types. "
                "Provided: {}".format(
                    self.__class__.__name__, self.contains.__name__, value
                )
            )
        if key in self:
            raise ValueError(
                "There is already a Dimension registered with this name. "
                "Register it with another name. Provided: {}".format(key)
            )
        super().__setitem__(key, value)

    def __repr__(self):
        dims = list(self.values())
        return "Space([{}])".format(",\n       ".join(map(str, dims)))

    def items(self):
        """Return items sorted according to keys"""
        return [(k, self[k]) for k in self.keys()]

    def values(self):
        """Return values sorted according to keys"""
        return [self[k] for k in self.keys()]

    def keys(self):
        """Return sorted keys"""
        return list(iter(self))

    def __iter__(self):
        """Return sorted keys"""
        return iter(sorted(super().keys()))
