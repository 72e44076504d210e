"""
Sampling Estimator.

Extrapolates per-document tag counts from a simple random sample to a
population total, with a t-based confidence interval.

Method:
1. Sample mean x̄ and Bessel-corrected standard deviation s
2. Standard error SE = s / √n
3. Critical value t at n - 1 degrees of freedom
4. Mean margin t·SE, scaled by population size together with x̄
5. Interval [max(0, total - margin), total + margin]

Policy for n = 1: the sample variance is undefined, so the estimate is
rejected with InsufficientSampleError rather than reported with a zero-width
interval.

Usage:
    estimator = SamplingEstimator()
    result = estimator.estimate([1, 3, 2], population_size=100)
    print(result.estimated_total, result.confidence_interval)
"""
import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any, Union

import numpy as np

from facttag_core.estimation.critical_values import CRITICAL_VALUE_METHODS, critical_value
from facttag_core.estimation.descriptive import describe
from facttag_core.exceptions import (
    EmptySampleError,
    EstimationInputError,
    InsufficientSampleError,
)
from facttag_core.models import ConfidenceInterval, EstimationResult, SampleObservation

logger = logging.getLogger(__name__)

ObservationLike = Union[SampleObservation, Mapping[str, Any], int]


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def extract_count(observation: ObservationLike) -> int:
    """
    Tag count from an observation, a mapping or a bare integer.

    Mappings may use "tag_count" or the camelCase "tagCount" key.
    """
    if isinstance(observation, SampleObservation):
        count = observation.tag_count
    elif isinstance(observation, Mapping):
        if "tag_count" in observation:
            count = observation["tag_count"]
        elif "tagCount" in observation:
            count = observation["tagCount"]
        else:
            raise EstimationInputError(f"Observation has no tag count: {observation!r}")
    else:
        count = observation

    if not _is_integer(count):
        raise EstimationInputError(f"Tag count must be an integer, got {count!r}")
    if count < 0:
        raise EstimationInputError(f"Tag count must be non-negative, got {count}")
    return int(count)


class SamplingEstimator:
    """
    Population estimate of template tags from a simple random sample.

    Stateless between calls: every estimate() builds a fresh result and
    leaves the input sequence untouched.
    """

    def __init__(self, confidence_level: float = 0.95, critical_value: str = "table"):
        """
        Args:
            confidence_level: Interval coverage (0-1, default: 0.95)
            critical_value: "table" (banded lookup, 95% only) or "exact" (Student t quantile)
        """
        if not 0 < confidence_level < 1:
            raise ValueError(f"confidence_level must be in (0, 1), got {confidence_level}")
        if critical_value not in CRITICAL_VALUE_METHODS:
            raise ValueError(f"critical_value must be one of {CRITICAL_VALUE_METHODS}, got {critical_value!r}")
        if critical_value == "table" and not math.isclose(confidence_level, 0.95):
            raise ValueError(
                f"The t table only covers 95% intervals, got confidence_level={confidence_level}; "
                "use critical_value=\"exact\" for other levels"
            )

        self.confidence_level = confidence_level
        self.critical_value_method = critical_value

    def estimate(
        self,
        observations: Iterable[ObservationLike],
        population_size: int
    ) -> EstimationResult:
        """
        Estimate the population total and its confidence interval.

        Args:
            observations: Per-document tag counts (SampleObservation, mapping or int)
            population_size: Known or approximated number of documents

        Returns:
            EstimationResult snapshot

        Raises:
            EmptySampleError: No observations
            InsufficientSampleError: Exactly one observation
            EstimationInputError: Negative/non-integer counts or population size
        """
        if not _is_integer(population_size) or population_size < 0:
            raise EstimationInputError(
                f"population_size must be a non-negative integer, got {population_size!r}"
            )

        counts = [extract_count(o) for o in observations]
        sample_size = len(counts)

        if sample_size == 0:
            raise EmptySampleError("No sample data provided")
        if sample_size == 1:
            raise InsufficientSampleError(
                "Sample variance needs at least 2 observations, got 1"
            )

        values = np.asarray(counts, dtype=float)
        mean = float(np.mean(values))
        standard_deviation = float(np.std(values, ddof=1))
        standard_error = standard_deviation / math.sqrt(sample_size)

        t_value = critical_value(
            sample_size - 1,
            self.confidence_level,
            method=self.critical_value_method,
        )
        margin_of_error_mean = t_value * standard_error

        estimated_total = mean * population_size
        margin_of_error = margin_of_error_mean * population_size

        interval = ConfidenceInterval(
            lower=max(0.0, estimated_total - margin_of_error),
            upper=estimated_total + margin_of_error,
        )

        logger.debug(
            "Estimate from n=%d: mean=%.4f sd=%.4f t=%.3f total=%.1f ±%.1f",
            sample_size, mean, standard_deviation, t_value, estimated_total, margin_of_error,
        )

        return EstimationResult(
            sample_size=sample_size,
            population_size=int(population_size),
            mean=mean,
            standard_deviation=standard_deviation,
            standard_error=standard_error,
            t_value=t_value,
            confidence_level=self.confidence_level,
            estimated_total=estimated_total,
            margin_of_error=margin_of_error,
            confidence_interval=interval,
            statistics=describe(counts),
        )
