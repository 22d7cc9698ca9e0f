"""
Package-wide useful routines
============================

"""
import numpy


def check_random_state(seed):
    """Return numpy global rng or RandomState if seed is specified"""
    if seed is None or seed is numpy.random:
        return numpy.random.mtrand._rand  # pylint:disable=protected-access

    if isinstance(seed, numpy.random.RandomState):
        return seed

    try:
        return numpy.random.RandomState(seed)
    except Exception as e:
        raise ValueError(
            "%r cannot be used to seed a numpy.random.RandomState instance" % seed
        ) from e
