"""
Critical values for two-sided t-based confidence intervals.

Two methods:
- "table": coarse banded lookup for 95% intervals, kept bit-compatible with
  earlier estimate reports. Bands are keyed by the minimum degrees of freedom.
- "exact": Student t inverse CDF from scipy, any confidence level.

The table is conservative at moderate df but optimistic for very small
samples: df=2 gives 2.78 where the exact quantile is 4.303.
"""
import math

from scipy import stats

CRITICAL_VALUE_METHODS = ("table", "exact")

# (minimum degrees of freedom, critical value), checked top-down
T_TABLE_95: tuple[tuple[int, float], ...] = (
    (1000, 1.96),
    (500, 1.96),
    (200, 1.97),
    (100, 1.98),
    (60, 2.00),
    (40, 2.02),
    (30, 2.04),
    (25, 2.06),
    (20, 2.09),
    (15, 2.13),
    (10, 2.23),
    (5, 2.57),
)
T_TABLE_95_SMALL_SAMPLE = 2.78

# Normal approximation used for confidence levels the table does not cover
Z_95 = 1.96


def table_t_value(degrees_of_freedom: int, confidence_level: float = 0.95) -> float:
    if not math.isclose(confidence_level, 0.95):
        return Z_95

    for min_df, value in T_TABLE_95:
        if degrees_of_freedom >= min_df:
            return value
    return T_TABLE_95_SMALL_SAMPLE


def exact_t_value(degrees_of_freedom: int, confidence_level: float = 0.95) -> float:
    """Two-sided Student t quantile, e.g. 4.303 for df=2 at 95%."""
    if degrees_of_freedom < 1:
        raise ValueError(f"degrees_of_freedom must be >= 1, got {degrees_of_freedom}")
    if not 0 < confidence_level < 1:
        raise ValueError(f"confidence_level must be in (0, 1), got {confidence_level}")
    return float(stats.t.ppf((1 + confidence_level) / 2, degrees_of_freedom))


def critical_value(
    degrees_of_freedom: int,
    confidence_level: float = 0.95,
    method: str = "table"
) -> float:
    """
    Look up the critical value for a two-sided interval.

    Args:
        degrees_of_freedom: n - 1 for a single-sample mean
        confidence_level: Interval coverage (0-1)
        method: "table" or "exact"

    Returns:
        Critical value t such that mean ± t·SE covers the confidence level
    """
    if method == "table":
        return table_t_value(degrees_of_freedom, confidence_level)
    if method == "exact":
        return exact_t_value(degrees_of_freedom, confidence_level)
    raise ValueError(f"Unknown critical value method: {method!r} (expected one of {CRITICAL_VALUE_METHODS})")
