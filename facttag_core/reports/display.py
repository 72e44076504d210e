from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from facttag_core.models import DetailedCount, EstimationResult, TagCategory
from facttag_core.reports.text import format_mode, format_number, format_relative_margin

console = Console()


def display_estimate(result: EstimationResult) -> None:
    """
    Show an estimate in the console as a summary panel plus a statistics table.

    Color Coding (relative margin of error):
        - Up to 10%: GREEN panel border
        - Up to 25%: YELLOW panel border
        - Wider or undefined: RED panel border
    """
    relative = result.relative_margin_of_error
    if relative is not None and relative <= 0.10:
        color = "green"
    elif relative is not None and relative <= 0.25:
        color = "yellow"
    else:
        color = "red"

    ci = result.confidence_interval
    confidence = f"{result.confidence_level * 100:g}%"

    content = f"""
[bold]Estimated total fact tags: {format_number(result.estimated_total)}[/bold]

[cyan]{confidence} Confidence interval:[/cyan] {format_number(ci.lower)} - {format_number(ci.upper)}
[cyan]Margin of error:[/cyan] ±{format_number(result.margin_of_error)} ({format_relative_margin(result)})
[cyan]Population:[/cyan] {result.population_size:,} articles
[cyan]Sample size:[/cyan] {result.sample_size:,} articles
[cyan]Critical value:[/cyan] t = {result.t_value:.3f} (df = {result.sample_size - 1})"""

    console.print(Panel(content, title=f"[{color}]ESTIMATION RESULTS[/{color}]", border_style=color))

    stats = result.statistics
    table = Table(title="Sample Statistics")
    table.add_column("Statistic", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Mean", f"{result.mean:.3f}")
    table.add_row("Std deviation", f"{result.standard_deviation:.3f}")
    table.add_row("Std error", f"{result.standard_error:.3f}")
    table.add_row("Median", f"{stats.median:g}")
    table.add_row("Mode", format_mode(stats.mode))
    table.add_row("Range", f"{stats.minimum} - {stats.maximum}")
    table.add_row("Zero-tag articles", f"{stats.zero_count_documents:,}")
    table.add_row("Multi-tag articles", f"{stats.multi_tag_documents:,}")
    for key, value in stats.percentiles.items():
        table.add_row(f"{key[1:]}th percentile", f"{value:.1f}")

    console.print(table)


def display_tag_breakdown(
    detailed: DetailedCount,
    categories: dict[TagCategory, list[str]]
) -> None:
    """Per-family counts and per-category totals for one document."""
    table = Table(title=f"Fact tags found: {detailed.total}")
    table.add_column("Template", style="cyan")
    table.add_column("Category")
    table.add_column("Count", justify="right")
    table.add_column("Examples", style="dim")

    for entry in detailed.breakdown:
        table.add_row(entry.name, entry.category.value, str(entry.count), escape(", ".join(entry.examples)))

    console.print(table)

    lines = [
        f"[cyan]{category.value}:[/cyan] {len(tags)}"
        for category, tags in categories.items()
        if tags
    ]
    if lines:
        console.print(Panel("\n".join(lines), title="Tags by category", border_style="cyan"))
