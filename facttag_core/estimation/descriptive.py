"""
Descriptive statistics over a sample of per-document tag counts.

All functions take plain sequences and never mutate them; anything that
depends on order sorts a copy first.
"""
from collections import Counter
from typing import Optional, Sequence

import numpy as np

from facttag_core.models import DescriptiveStatistics

PERCENTILE_POINTS: tuple[int, ...] = (25, 50, 75, 90, 95, 99)


def median(values: Sequence[int]) -> float:
    """Middle value; mean of the two middle values for even n."""
    if not values:
        raise ValueError("median of an empty sample")
    return float(np.median(np.asarray(values, dtype=float)))


def mode(values: Sequence[int]) -> Optional[tuple[int, ...]]:
    """
    Values sharing the highest frequency, ascending.

    Returns None when every distinct value is equally frequent, which covers
    both all-distinct samples ([1, 2, 3]) and constant ones ([2, 2, 2]).
    """
    frequency = Counter(values)
    if not frequency:
        return None

    max_freq = max(frequency.values())
    modes = sorted(value for value, freq in frequency.items() if freq == max_freq)

    if len(modes) == len(frequency):
        return None
    return tuple(modes)


def percentiles(
    values: Sequence[int],
    points: Sequence[int] = PERCENTILE_POINTS
) -> dict[str, float]:
    """
    Linear-interpolation percentiles keyed "p25", "p50", ...

    Index for percentile p is (p / 100) * (n - 1); fractional indexes
    interpolate between the floor and ceiling order statistics.
    """
    if not values:
        raise ValueError("percentiles of an empty sample")

    ordered = np.sort(np.asarray(values, dtype=float))
    return {
        f"p{p}": float(np.percentile(ordered, p, method="linear"))
        for p in points
    }


def describe(counts: Sequence[int]) -> DescriptiveStatistics:
    if not counts:
        raise ValueError("cannot describe an empty sample")

    return DescriptiveStatistics(
        minimum=min(counts),
        maximum=max(counts),
        median=median(counts),
        mode=mode(counts),
        percentiles=percentiles(counts),
        counts=tuple(counts),
        zero_count_documents=sum(1 for c in counts if c == 0),
        multi_tag_documents=sum(1 for c in counts if c > 1),
    )
