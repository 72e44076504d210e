# Fact Tag Estimator Core Library
# Main entry point: from facttag_core.orchestrator import run_estimation

from .config import load_config
from .orchestrator import run_estimation, collect_sample

from .models import (
    TagCategory,
    TagPattern,
    TagMatch,
    PatternBreakdown,
    DetailedCount,
    DocumentRef,
    SampleObservation,
    FetchFailure,
    SampleRun,
    ConfidenceInterval,
    DescriptiveStatistics,
    EstimationResult,
)

from .recognizer import FactTagCounter
from .estimation import SamplingEstimator

from .exceptions import (
    FactTagError,
    EstimationError,
    EmptySampleError,
    InsufficientSampleError,
    EstimationInputError,
    DocumentFetchError,
    DocumentNotFoundError,
    TransientFetchError,
)

__all__ = [
    # Main entry point
    "run_estimation",
    "collect_sample",
    "load_config",
    # Core components
    "FactTagCounter",
    "SamplingEstimator",
    # Models
    "TagCategory",
    "TagPattern",
    "TagMatch",
    "PatternBreakdown",
    "DetailedCount",
    "DocumentRef",
    "SampleObservation",
    "FetchFailure",
    "SampleRun",
    "ConfidenceInterval",
    "DescriptiveStatistics",
    "EstimationResult",
    # Exceptions
    "FactTagError",
    "EstimationError",
    "EmptySampleError",
    "InsufficientSampleError",
    "EstimationInputError",
    "DocumentFetchError",
    "DocumentNotFoundError",
    "TransientFetchError",
]
