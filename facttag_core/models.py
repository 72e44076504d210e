import re
from dataclasses import dataclass, field, fields, asdict, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


# =============================================================================
# TAG RECOGNITION MODELS
# =============================================================================

class TagCategory(str, Enum):
    """Editorial purpose of a citation-flag template family."""
    CITATION_NEEDED = "Citation Needed"
    SOURCE_QUALITY = "Source Quality"
    CLARIFICATION = "Clarification"
    VERIFICATION = "Verification"


@dataclass(frozen=True)
class TagPattern:
    """One template family and its compiled matcher.

    The matcher accepts both surface forms of the family in a single rule:
    ``{{name}}`` and ``{{name|params}}``. Built once from the catalog and shared."""
    name: str
    category: TagCategory
    regex: re.Pattern

    @property
    def source(self) -> str:
        return self.regex.pattern

    def findall(self, text: str) -> list[str]:
        return [m.group(0) for m in self.regex.finditer(text)]


@dataclass(frozen=True)
class TagMatch:
    """Single occurrence of a template in the scanned text."""
    category: TagCategory
    name: str
    text: str
    position: int


@dataclass(frozen=True)
class PatternBreakdown:
    """Per-family count with the first few literal matches."""
    name: str
    category: TagCategory
    pattern: str
    count: int
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class DetailedCount:
    total: int
    breakdown: tuple[PatternBreakdown, ...] = ()
    examples: tuple[str, ...] = ()


# =============================================================================
# SAMPLING MODELS
# =============================================================================

@dataclass(frozen=True)
class DocumentRef:
    """Identifier and display title of a sampled document."""
    identifier: str
    title: str


@dataclass(frozen=True)
class SampleObservation:
    document_id: str
    tag_count: int


@dataclass(frozen=True)
class FetchFailure:
    """Document dropped from the sample because it could not be fetched."""
    document_id: str
    reason: str
    transient: bool


@dataclass
class SampleRun:
    """Outcome of walking the supplier: usable observations plus skipped documents."""
    requested: int
    observations: list[SampleObservation] = field(default_factory=list)
    failures: list[FetchFailure] = field(default_factory=list)

    @property
    def counts(self) -> list[int]:
        return [o.tag_count for o in self.observations]

    @property
    def total_tags(self) -> int:
        return sum(self.counts)


# =============================================================================
# ESTIMATION RESULT
# =============================================================================

@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float


@dataclass(frozen=True)
class DescriptiveStatistics:
    """Shape of the sampled count distribution.

    mode is None when no value occurs more often than any other. percentiles is
    a read-only view over a private copy of the mapping passed in."""
    minimum: int
    maximum: int
    median: float
    mode: Optional[tuple[int, ...]]
    percentiles: Mapping[str, float]
    counts: tuple[int, ...]
    zero_count_documents: int
    multi_tag_documents: int

    def __post_init__(self):
        object.__setattr__(self, "percentiles", MappingProxyType(dict(self.percentiles)))


@dataclass(frozen=True)
class EstimationResult:
    """Read-only summary of one sample, extrapolated to the population."""
    sample_size: int
    population_size: int
    mean: float
    standard_deviation: float
    standard_error: float
    t_value: float
    confidence_level: float
    estimated_total: float
    margin_of_error: float
    confidence_interval: ConfidenceInterval
    statistics: DescriptiveStatistics

    @property
    def relative_margin_of_error(self) -> Optional[float]:
        if self.estimated_total == 0:
            return None
        return self.margin_of_error / self.estimated_total

    def to_dict(self) -> dict[str, Any]:
        # asdict cannot deep-copy the read-only percentiles view
        data = asdict(replace(self, statistics=None))
        stats = {f.name: getattr(self.statistics, f.name) for f in fields(self.statistics)}
        stats["percentiles"] = dict(stats["percentiles"])
        stats["counts"] = list(stats["counts"])
        stats["mode"] = list(stats["mode"]) if stats["mode"] is not None else None
        data["statistics"] = stats
        data["relative_margin_of_error"] = self.relative_margin_of_error
        return data
