from datetime import datetime, timezone
from typing import Optional

from facttag_core.models import EstimationResult

DEFAULT_CORPUS_LABEL = "Wikipedia \"Category:All articles with unsourced statements\""


def format_mode(mode: Optional[tuple[int, ...]]) -> str:
    return ", ".join(str(m) for m in mode) if mode else "No mode"


def format_relative_margin(result: EstimationResult) -> str:
    relative = result.relative_margin_of_error
    return "n/a" if relative is None else f"±{relative * 100:.1f}%"


def format_number(value: float) -> str:
    """Round to a whole number with thousands separators."""
    return f"{round(value):,}"


def render_report(
    result: EstimationResult,
    corpus_label: str = DEFAULT_CORPUS_LABEL,
    generated_at: Optional[datetime] = None
) -> str:
    """
    Plain-text estimation report.

    Args:
        result: Estimation to describe
        corpus_label: Human-readable description of the sampled population
        generated_at: Report timestamp (default: now, UTC)

    Returns:
        Multi-line report covering every field of the result
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    stats = result.statistics
    pct = stats.percentiles
    ci = result.confidence_interval
    confidence = f"{result.confidence_level * 100:g}%"

    return f"""
=== WIKIPEDIA FACT TAGS ESTIMATION REPORT ===
Generated: {generated_at.isoformat()}

METHODOLOGY:
• Random sampling from {corpus_label}
• Sample size: {result.sample_size:,} articles
• Population: {result.population_size:,} articles with fact tags
• Namespace: Main articles only (namespace 0)

SAMPLE STATISTICS:
• Mean tags per article: {result.mean:.3f}
• Standard deviation: {result.standard_deviation:.3f}
• Standard error: {result.standard_error:.3f}
• Median: {stats.median:g}
• Mode: {format_mode(stats.mode)}
• Range: {stats.minimum} - {stats.maximum} tags per article
• Articles with zero tags: {stats.zero_count_documents:,}
• Articles with multiple tags: {stats.multi_tag_documents:,}

DISTRIBUTION:
• 25th percentile: {pct['p25']:.1f} tags
• 50th percentile: {pct['p50']:.1f} tags
• 75th percentile: {pct['p75']:.1f} tags
• 90th percentile: {pct['p90']:.1f} tags
• 95th percentile: {pct['p95']:.1f} tags
• 99th percentile: {pct['p99']:.1f} tags

ESTIMATION RESULTS:
• Estimated total fact tags: {format_number(result.estimated_total)}
• {confidence} Confidence interval: {format_number(ci.lower)} - {format_number(ci.upper)}
• Margin of error: ±{format_number(result.margin_of_error)} tags
• Relative margin of error: {format_relative_margin(result)}
• Critical value (t, df={result.sample_size - 1}): {result.t_value:.3f}

INTERPRETATION:
We are {confidence} confident that the total number of fact tags across all
sampled-population articles is between {format_number(ci.lower)} and {format_number(ci.upper)}.

NOTES:
• This estimate includes all forms of fact-checking templates ({{{{citation needed}}}},
  {{{{fact}}}}, {{{{dubious}}}}, {{{{better source needed}}}}, etc.)
• Based on articles in the main namespace only
• Confidence interval accounts for sampling uncertainty
• Some articles may have been missed if not properly categorized

Statistical confidence: {confidence}
Sampling method: Random sampling from categorized population
"""
