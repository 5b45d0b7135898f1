"""Likelihood lattice: five ordered confidence grades and saturating arithmetic.

Levels
------
VERY_UNLIKELY = 1
UNLIKELY      = 2
POSSIBLE      = 3
LIKELY        = 4
VERY_LIKELY   = 5

The numeric values follow the inspection service's Likelihood enum (where
0 is "unspecified" and is not a valid level here).  Every operation in this
module returns one of the five members; out-of-range arithmetic saturates at
the ends instead of raising.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Iterable


class Likelihood(IntEnum):
    VERY_UNLIKELY = 1
    UNLIKELY = 2
    POSSIBLE = 3
    LIKELY = 4
    VERY_LIKELY = 5


LOWEST: Likelihood = Likelihood.VERY_UNLIKELY
HIGHEST: Likelihood = Likelihood.VERY_LIKELY


def clamp(value: int) -> Likelihood:
    """Return the level nearest to *value* inside the lattice bounds."""
    return Likelihood(min(int(HIGHEST), max(int(LOWEST), value)))


def step(level: Likelihood, delta: int) -> Likelihood:
    """Move *delta* positions along the order, saturating at either end."""
    return clamp(int(level) + delta)


def strongest(levels: Iterable[Likelihood]) -> Likelihood:
    """Return the highest level in *levels*.

    Raises ValueError for an empty iterable, like the built-in max().
    """
    return Likelihood(max(levels))


def weakest(levels: Iterable[Likelihood]) -> Likelihood:
    """Return the lowest level in *levels*."""
    return Likelihood(min(levels))


def parse_likelihood(value: Likelihood | str | int) -> Likelihood:
    """Convert a level name (case-insensitive) or level number to a Likelihood.

    Raises
    ------
    ValueError
        If *value* names no level or its number is outside 1..5.
    """
    if isinstance(value, Likelihood):
        return value
    if isinstance(value, bool):
        raise ValueError(f"not a likelihood level: {value!r}")
    if isinstance(value, int):
        try:
            return Likelihood(value)
        except ValueError:
            raise ValueError(f"likelihood number out of range 1..5: {value}") from None
    if isinstance(value, str):
        try:
            return Likelihood[value.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown likelihood level: {value!r}") from None
    raise ValueError(f"not a likelihood level: {value!r}")
