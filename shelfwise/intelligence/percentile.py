"""
Dense-rank percentiles.

Every item is placed by the position of its weight among the distinct
weights present, so equal weights always share a percentile and the largest
weight always maps to 100.
"""

import math
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PartitionedItem(Generic[T]):
    """An item annotated with its percentile (an int in [0, 100])."""

    data: T
    percentile: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up."""
    return int(math.floor(value + 0.5))


def partition(
    items: Iterable[T],
    weight: Callable[[T], float],
) -> list[PartitionedItem[T]]:
    """
    Assign each item a dense-rank percentile based on its weight.

    Args:
        items: Items to rank
        weight: Function returning the numeric weight of an item

    Returns:
        One PartitionedItem per input item, in input order
    """
    items = list(items)
    weights = [weight(item) for item in items]

    distinct = sorted(set(weights))
    total = len(distinct)

    percentiles = {
        value: round_half_up(position / total * 100)
        for position, value in enumerate(distinct, start=1)
    }

    return [
        PartitionedItem(data=item, percentile=percentiles[value])
        for item, value in zip(items, weights)
    ]
