import os
from datetime import datetime, timezone
from typing import Optional, TextIO

from facttag_core.models import EstimationResult, SampleRun
from facttag_core.reports.text import (
    DEFAULT_CORPUS_LABEL,
    format_mode,
    format_number,
    format_relative_margin,
)


def _write_statistics_table(f: TextIO, result: EstimationResult) -> None:
    stats = result.statistics

    f.write("## Sample Statistics\n\n")
    f.write("| Statistic | Value |\n")
    f.write("|---|---|\n")
    f.write(f"| Sample size | {result.sample_size:,} |\n")
    f.write(f"| Mean tags per article | {result.mean:.3f} |\n")
    f.write(f"| Standard deviation | {result.standard_deviation:.3f} |\n")
    f.write(f"| Standard error | {result.standard_error:.3f} |\n")
    f.write(f"| Median | {stats.median:g} |\n")
    f.write(f"| Mode | {format_mode(stats.mode)} |\n")
    f.write(f"| Range | {stats.minimum} - {stats.maximum} |\n")
    f.write(f"| Articles with zero tags | {stats.zero_count_documents:,} |\n")
    f.write(f"| Articles with multiple tags | {stats.multi_tag_documents:,} |\n\n")

    f.write("### Distribution\n\n")
    f.write("| Percentile | Tags |\n")
    f.write("|---|---|\n")
    for key, value in stats.percentiles.items():
        f.write(f"| {key[1:]}th | {value:.1f} |\n")
    f.write("\n")


def _write_failures(f: TextIO, run: SampleRun) -> None:
    if not run.failures:
        return

    f.write("## Skipped Documents\n\n")
    f.write(f"{len(run.failures)} of {run.requested} requested documents could not be fetched "
            "and were excluded from the sample.\n\n")
    f.write("| Document | Reason | Retryable |\n")
    f.write("|---|---|---|\n")
    for failure in run.failures:
        f.write(f"| {failure.document_id} | {failure.reason} | {'yes' if failure.transient else 'no'} |\n")
    f.write("\n")


def generate_markdown_report(
    result: EstimationResult,
    run: Optional[SampleRun],
    output_path: str,
    corpus_label: str = DEFAULT_CORPUS_LABEL,
    generated_at: Optional[datetime] = None
) -> str:
    """
    Write the estimation report as Markdown.

    Args:
        result: Estimation to describe
        run: Sample run with skipped documents (None to omit that section)
        output_path: Destination file; parent directories are created
        corpus_label: Human-readable description of the sampled population
        generated_at: Report timestamp (default: now, UTC)

    Returns:
        Path of the written report
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    ci = result.confidence_interval
    confidence = f"{result.confidence_level * 100:g}%"

    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write("# Wikipedia Fact Tags Estimation Report\n\n")
        f.write(f"**Generated:** {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}\n\n")

        f.write("## Methodology\n\n")
        f.write(f"- **Population:** {result.population_size:,} articles in {corpus_label}\n")
        f.write(f"- **Sample size:** {result.sample_size:,} articles (simple random sample)\n")
        f.write(f"- **Confidence level:** {confidence}\n")
        f.write(f"- **Critical value:** t = {result.t_value:.3f} (df = {result.sample_size - 1})\n\n")

        f.write("## Estimate\n\n")
        f.write(f"- **Estimated total fact tags:** {format_number(result.estimated_total)}\n")
        f.write(f"- **{confidence} confidence interval:** "
                f"{format_number(ci.lower)} - {format_number(ci.upper)}\n")
        f.write(f"- **Margin of error:** ±{format_number(result.margin_of_error)} tags\n")
        f.write(f"- **Relative margin of error:** {format_relative_margin(result)}\n\n")

        _write_statistics_table(f, result)
        if run is not None:
            _write_failures(f, run)

        f.write("---\n\n")
        f.write("*Counts cover {{citation needed}}, {{fact}}, {{dubious}}, {{better source needed}} "
                "and related templates, bare or with parameters.*\n")

    return output_path
