"""
Sampling-based estimation of population tag totals.

This module turns per-document tag counts from a random sample into a
population estimate with descriptive statistics and a t-based interval.
"""
from facttag_core.estimation.estimator import SamplingEstimator, extract_count
from facttag_core.estimation.critical_values import critical_value, table_t_value, exact_t_value
from facttag_core.estimation.descriptive import describe, median, mode, percentiles

__all__ = [
    "SamplingEstimator",
    "extract_count",
    "critical_value",
    "table_t_value",
    "exact_t_value",
    "describe",
    "median",
    "mode",
    "percentiles",
]
