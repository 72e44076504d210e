import logging
import time
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from facttag_core.api import DocumentSupplier, WikipediaClient
from facttag_core.estimation import SamplingEstimator
from facttag_core.exceptions import DocumentNotFoundError, TransientFetchError
from facttag_core.models import EstimationResult, FetchFailure, SampleObservation, SampleRun
from facttag_core.recognizer import FactTagCounter

console = Console()
logger = logging.getLogger(__name__)


def collect_sample(
    supplier: DocumentSupplier,
    counter: FactTagCounter,
    sample_size: int,
    delay: float = 0.0
) -> SampleRun:
    """
    Fetch sampled documents and count their tags.

    Documents that cannot be fetched are recorded as failures and left out of
    the sample; any other error aborts the run.

    Args:
        supplier: Source of document references and wikitext
        counter: Tag counter applied to each document
        sample_size: Number of documents to request
        delay: Seconds to pause after each fetch

    Returns:
        SampleRun with observations and failures
    """
    run = SampleRun(requested=sample_size)

    console.print("\n[bold cyan]Step 1: Selecting sample documents...[/bold cyan]")
    documents = supplier.list_sample_documents(sample_size)
    console.print(f"[green]✓ Retrieved {len(documents)} documents[/green]")

    if len(documents) < sample_size:
        logger.warning("Supplier returned %d of %d requested documents", len(documents), sample_size)

    console.print("\n[bold cyan]Step 2: Counting fact tags...[/bold cyan]")
    for idx, doc in enumerate(documents, 1):
        console.print(f"[dim]Processing {idx}/{len(documents)}: {escape(doc.title)}[/dim]")

        try:
            text = supplier.get_document_text(doc.identifier)
        except DocumentNotFoundError as e:
            logger.warning("Skipping %s: %s", doc.identifier, e.reason)
            run.failures.append(FetchFailure(document_id=doc.identifier, reason=e.reason, transient=False))
            continue
        except TransientFetchError as e:
            logger.warning("Skipping %s after fetch error: %s", doc.identifier, e.reason)
            run.failures.append(FetchFailure(document_id=doc.identifier, reason=e.reason, transient=True))
            continue
        finally:
            if delay:
                time.sleep(delay)

        tag_count = counter.count_tags(text)
        run.observations.append(SampleObservation(document_id=doc.identifier, tag_count=tag_count))
        logger.debug("%s: %d tags", doc.identifier, tag_count)

    console.print(
        f"[green]✓ Counted {run.total_tags} tags in {len(run.observations)} documents[/green]"
        + (f" [yellow]({len(run.failures)} skipped)[/yellow]" if run.failures else "")
    )
    return run


def _resolve_population_size(
    config: dict[str, Any],
    supplier: DocumentSupplier,
    population_size: Optional[int]
) -> int:
    # Explicit argument > config > live query > configured fallback
    if population_size is not None:
        return population_size

    corpus = config.get("corpus", {})
    if corpus.get("population_size") is not None:
        return int(corpus["population_size"])

    fallback = int(corpus.get("fallback_population_size", 553000))
    get_population_size = getattr(supplier, "get_population_size", None)
    if get_population_size is None:
        return fallback

    try:
        size = get_population_size()
    except TransientFetchError as e:
        console.print(f"[yellow]⚠ Population query failed ({escape(e.reason)}); using {fallback:,}[/yellow]")
        return fallback

    if not size:
        console.print(f"[yellow]⚠ Population query returned no pages; using {fallback:,}[/yellow]")
        return fallback
    return size


def run_estimation(
    config: dict[str, Any],
    supplier: Optional[DocumentSupplier] = None,
    population_size: Optional[int] = None,
    counter: Optional[FactTagCounter] = None
) -> tuple[EstimationResult, SampleRun]:
    """
    Sample documents, count their tags and extrapolate to the population.

    Args:
        config: Configuration dictionary (see config.DEFAULT_CONFIG)
        supplier: Document supplier (default: WikipediaClient built from config)
        population_size: Overrides the configured or queried population size
        counter: Tag counter (default: FactTagCounter over the full catalog)

    Returns:
        (EstimationResult, SampleRun)

    Raises:
        EstimationError: Too few documents survived fetching
        ValueError: Invalid estimation settings (raised before sampling starts)
    """
    sampling = config.get("sampling", {})
    estimation = config.get("estimation", {})
    sample_size = int(sampling.get("sample_size", 100))

    # Settings are validated here, before any request is made
    estimator = SamplingEstimator(
        confidence_level=estimation.get("confidence_level", 0.95),
        critical_value=estimation.get("critical_value", "table"),
    )

    owns_supplier = supplier is None
    if supplier is None:
        supplier = WikipediaClient.from_config(config)

    try:
        console.print(f"[bold]Starting estimation with sample size: {sample_size}[/bold]")
        population = _resolve_population_size(config, supplier, population_size)
        console.print(f"[cyan]Population: {population:,} documents[/cyan]")

        run = collect_sample(
            supplier,
            counter or FactTagCounter(),
            sample_size,
            delay=config.get("corpus", {}).get("request_delay", 0.0),
        )
    finally:
        if owns_supplier:
            supplier.close()

    console.print("\n[bold cyan]Step 3: Estimating population total...[/bold cyan]")
    result = estimator.estimate(run.observations, population)
    logger.info(
        "Estimated %.0f tags (%.0f - %.0f) from %d documents",
        result.estimated_total,
        result.confidence_interval.lower,
        result.confidence_interval.upper,
        result.sample_size,
    )
    return result, run
