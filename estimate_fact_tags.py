#!/usr/bin/env python3
# estimate_fact_tags.py
"""
CLI for the Wikipedia fact tag estimator.

Usage:
    python estimate_fact_tags.py estimate --sample-size 200 --output reports/fact_tags.md
    python estimate_fact_tags.py count article.wiki

Output:
    - estimate: console summary, plain-text report, optional Markdown/JSON files
    - count: per-template and per-category breakdown for one wikitext file

Design:
    - Step 1: Select a random sample of articles from the maintenance category
    - Step 2: Count fact tags in each article (fetch failures are skipped)
    - Step 3: Extrapolate to the category population with a t-based interval
"""
import argparse
import json
import logging
import os
import sys

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from facttag_core import FactTagCounter, FactTagError, load_config, run_estimation
from facttag_core.reports import (
    display_estimate,
    display_tag_breakdown,
    generate_markdown_report,
    render_report,
)

load_dotenv()
console = Console()


def configure_logging(config: dict, debug: bool = False) -> None:
    level_name = "DEBUG" if debug else str(config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def apply_overrides(config: dict, args: argparse.Namespace) -> dict:
    # CLI overrides config
    if args.sample_size is not None:
        config["sampling"]["sample_size"] = args.sample_size
    if args.strategy:
        config["sampling"]["strategy"] = args.strategy
    if args.seed is not None:
        config["sampling"]["seed"] = args.seed
    if args.exact_t:
        config["estimation"]["critical_value"] = "exact"
    if args.confidence is not None:
        config["estimation"]["confidence_level"] = args.confidence
    if args.output:
        config["report"]["output_path"] = args.output
    return config


def cmd_estimate(args: argparse.Namespace, config: dict) -> int:
    config = apply_overrides(config, args)

    try:
        result, run = run_estimation(config, population_size=args.population_size)
    except (FactTagError, ValueError) as e:
        console.print(f"[red]Estimation failed: {e}[/red]")
        return 1

    display_estimate(result)

    corpus_label = config["report"].get("corpus_label") or "the sampled category"
    print(render_report(result, corpus_label=corpus_label))

    output_path = config["report"].get("output_path")
    if output_path:
        generate_markdown_report(result, run, output_path, corpus_label=corpus_label)
        console.print(f"[green]✓ Markdown report saved to {output_path}[/green]")

    if args.json:
        payload = {
            "result": result.to_dict(),
            "observations": [
                {"document_id": o.document_id, "tag_count": o.tag_count} for o in run.observations
            ],
            "failures": [
                {"document_id": f.document_id, "reason": f.reason, "transient": f.transient}
                for f in run.failures
            ],
        }
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        console.print(f"[green]✓ JSON results saved to {args.json}[/green]")

    return 0


def cmd_count(args: argparse.Namespace, config: dict) -> int:
    if not os.path.exists(args.file):
        console.print(f"[red]Error: wikitext file not found: {args.file}[/red]")
        return 1

    try:
        with open(args.file, "r", encoding="utf-8") as f:
            wikitext = f.read()
    except UnicodeDecodeError as e:
        console.print(f"[red]Error: {escape(args.file)} is not UTF-8 text ({e.reason} at byte {e.start})[/red]")
        return 1

    counter = FactTagCounter()
    detailed = counter.count_tags_detailed(wikitext)
    display_tag_breakdown(detailed, counter.categorize(wikitext))

    if detailed.examples:
        console.print(f"[dim]Examples: {escape(', '.join(detailed.examples))}[/dim]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate the number of fact tags on Wikipedia from a random sample",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python estimate_fact_tags.py estimate --sample-size 500
    python estimate_fact_tags.py estimate --population-size 553000 --exact-t --json results.json
    python estimate_fact_tags.py count article.wiki
        """
    )
    parser.add_argument("--config", default="config.yaml", help="Config file (default: config.yaml)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate = subparsers.add_parser("estimate", help="Sample articles and estimate the total")
    estimate.add_argument("--sample-size", type=int, help="Number of articles to sample")
    estimate.add_argument("--population-size", type=int,
                          help="Known population size (skips the category query)")
    estimate.add_argument("--strategy", choices=["category", "search"], help="Sampling strategy")
    estimate.add_argument("--seed", type=int, help="Random seed for reproducible samples")
    estimate.add_argument("--confidence", type=float,
                          help="Confidence level (default: 0.95; other levels need --exact-t)")
    estimate.add_argument("--exact-t", action="store_true",
                          help="Use exact Student t quantiles instead of the banded table")
    estimate.add_argument("--output", help="Write a Markdown report to this path")
    estimate.add_argument("--json", help="Write JSON results to this path")
    estimate.set_defaults(func=cmd_estimate)

    count = subparsers.add_parser("count", help="Count fact tags in a local wikitext file")
    count.add_argument("file", help="Path to a wikitext file")
    count.set_defaults(func=cmd_count)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ValueError, OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        return 1

    configure_logging(config, debug=args.debug)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
