"""
Module: generator.sampling

Purpose:
    Weighted random selection by cumulative weights.

Key Functions:
    - weighted_choice(): Pick one item with probability proportional to weight
    - magnitude_weight(): Move weight favouring larger magnitudes

Used By:
    - generator.example_generator: Single-digit strategy
    - generator.multi_digit: Width selection
"""

from __future__ import annotations

import bisect
import itertools
import random
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

MAGNITUDE_WEIGHT_FACTOR = 0.3


def magnitude_weight(magnitude: int) -> float:
    """Weight 1 + 0.3·|magnitude|: larger moves are likelier, none excluded."""
    return 1.0 + MAGNITUDE_WEIGHT_FACTOR * abs(magnitude)


def weighted_choice(
    items: Sequence[T],
    weight: Callable[[T], float],
    rng: random.Random,
) -> T:
    """
    Pick one item with probability proportional to its weight.

    Args:
        items: Non-empty candidates
        weight: Positive weight for each candidate
        rng: Random source

    Returns:
        The chosen item

    Raises:
        ValueError: If items is empty or total weight is not positive
    """
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    cumulative = list(itertools.accumulate(weight(item) for item in items))
    total = cumulative[-1]
    if total <= 0:
        raise ValueError(f"Total weight must be positive: {total}")
    index = bisect.bisect_right(cumulative, rng.random() * total)
    return items[min(index, len(items) - 1)]
