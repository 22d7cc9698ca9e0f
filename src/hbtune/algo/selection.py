"""
Survivor selection
==================

Select which configurations of a stage survive to the next stage of a bracket.

With a single objective, configurations are ranked by their performance. With many
objectives, configurations are ranked by Pareto fronts (non-dominated sorting) and the last
front that does not fit entirely is cut by crowding distance, as in NSGA-II.

All functions work on a performance table with one row per configuration, in submission
order, and one column per objective. Missing performances (``NaN``) are ranked last.

"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy

from hbtune.core.utils.exceptions import SelectionSizeError

logger = logging.getLogger(__name__)


def as_minimization(performance, minimize: Sequence[bool]) -> numpy.ndarray:
    """Return a 2-d float array where lower is better on every column.

    Maximized objectives are negated. Rows with a missing value (``NaN``) are set to
    ``inf`` on every column.
    """
    minimize = numpy.asarray(minimize, dtype=bool).reshape(-1)
    points = numpy.asarray(performance, dtype=float)
    if points.size == 0:
        points = points.reshape(0, minimize.size)
    elif points.ndim == 1:
        points = points.reshape(-1, 1)
    if points.ndim != 2:
        raise ValueError(f"Performance must be a 2-d table, got shape {points.shape}")

    if minimize.size != points.shape[1]:
        raise ValueError(
            f"Got {minimize.size} optimization directions for {points.shape[1]} objectives"
        )

    points = numpy.where(minimize, points, -points)
    # A configuration missing any objective is worst on all of them
    points[numpy.isnan(points).any(axis=1)] = numpy.inf
    return points


def non_dominated_sort(points) -> list[list[int]]:
    """Partition points in Pareto fronts, all objectives being minimized.

    Front 0 holds the points dominated by no other point, front 1 the points dominated only
    by points of front 0, and so on. Indices within a front keep their original order.
    """
    points = numpy.asarray(points, dtype=float)
    if points.shape[0] == 0:
        return []

    less_equal = numpy.all(points[:, None, :] <= points[None, :, :], axis=2)
    strictly_less = numpy.any(points[:, None, :] < points[None, :, :], axis=2)
    # dominates[i, j] is True if i dominates j
    dominates = numpy.logical_and(less_equal, strictly_less)

    dominated_count = dominates.sum(axis=0)
    fronts = []
    current = numpy.flatnonzero(dominated_count == 0)
    while current.size > 0:
        fronts.append(current.tolist())
        dominated_count = dominated_count - dominates[current].sum(axis=0)
        dominated_count[current] = -1
        current = numpy.flatnonzero(dominated_count == 0)

    return fronts


def crowding_distance(points, fronts: list[list[int]]) -> numpy.ndarray:
    """Compute the crowding distance of every point within its front.

    Boundary points of a front get an infinite distance.
    """
    points = numpy.asarray(points, dtype=float)
    crowding = numpy.zeros(points.shape[0], dtype=float)

    for front in fronts:
        front_arr = numpy.asarray(front, dtype=int)
        if front_arr.size <= 2:
            crowding[front_arr] = numpy.inf
            continue

        values = points[front_arr]
        distance = numpy.zeros(front_arr.size, dtype=float)
        for objective in range(values.shape[1]):
            order = numpy.argsort(values[:, objective], kind="stable")
            sorted_values = values[order, objective]
            distance[order[0]] = numpy.inf
            distance[order[-1]] = numpy.inf

            span = sorted_values[-1] - sorted_values[0]
            if not numpy.isfinite(span) or span <= 0.0:
                continue

            distance[order[1:-1]] += (sorted_values[2:] - sorted_values[:-2]) / span

        crowding[front_arr] = distance

    return crowding


def _check_size(n_select: int, n_available: int) -> None:
    if n_select < 0 or n_select > n_available:
        raise SelectionSizeError(n_select, n_available)


def select_single_objective(values, n_select: int, minimize: bool = True) -> list[int]:
    """Return the indices of the ``n_select`` best values.

    The sort is stable: ties are broken by submission order.
    """
    points = as_minimization(values, [minimize])
    _check_size(n_select, points.shape[0])
    order = numpy.argsort(points[:, 0], kind="stable")
    return order[:n_select].tolist()


def select_non_dominated(points, n_select: int, minimize: Sequence[bool]) -> list[int]:
    """Return the indices of ``n_select`` points selected by non-dominated sorting.

    Whole fronts are kept as long as they fit in ``n_select``. The first front that does not
    fit is cut, keeping its points of largest crowding distance.
    """
    points = as_minimization(points, minimize)
    _check_size(n_select, points.shape[0])

    fronts = non_dominated_sort(points)
    selected: list[int] = []
    for front in fronts:
        if len(selected) + len(front) <= n_select:
            selected.extend(front)
            continue

        remaining = n_select - len(selected)
        front_arr = numpy.asarray(front, dtype=int)
        crowding = crowding_distance(points, [front])[front_arr]
        order = numpy.argsort(-crowding, kind="stable")
        selected.extend(front_arr[order[:remaining]].tolist())
        break

    return selected


def select_survivors(performance, n_select: int, minimize: Sequence[bool]) -> list[int]:
    """Select the configurations surviving to the next stage.

    Parameters
    ----------
    performance: array-like
        Table of shape ``(n_configs, n_objectives)``, rows in submission order.
    n_select: int
        Number of survivors.
    minimize: sequence of bool
        Optimization direction of each objective.

    Returns
    -------
    list of int
        ``n_select`` distinct row indices.

    Raises
    ------
    SelectionSizeError
        If ``n_select`` is larger than the number of rows.

    """
    minimize = list(minimize)
    if len(minimize) == 1:
        indices = select_single_objective(
            numpy.asarray(performance, dtype=float).reshape(-1), n_select, minimize[0]
        )
    else:
        indices = select_non_dominated(performance, n_select, minimize)

    logger.debug("Selected survivors %s", indices)
    return indices
