"""
Pytest fixtures and configuration.

Following TDD principles:
- Fixtures provide real-world-like wikitext and samples
- HTTP is faked with httpx.MockTransport, suppliers with in-memory fakes
- Each test should be independent and fast
"""
import copy
from typing import Any, Optional

import pytest
from dotenv import load_dotenv

from facttag_core.config import DEFAULT_CONFIG
from facttag_core.estimation import SamplingEstimator
from facttag_core.exceptions import TransientFetchError
from facttag_core.models import DocumentRef, FetchFailure, SampleObservation, SampleRun
from facttag_core.recognizer import FactTagCounter

load_dotenv()


# =============================================================================
# WIKITEXT FIXTURES
# =============================================================================

@pytest.fixture
def counter() -> FactTagCounter:
    return FactTagCounter()


@pytest.fixture
def biography_wikitext() -> str:
    """Article fragment with seven tags across all four categories."""
    return (
        "John Smith was born in 1985{{citation needed}} in New York{{dubious}}. "
        "He attended Harvard University{{better source needed|date=July 2025}} where he "
        "studied physics{{fact}}. According to some sources{{according to whom?}}, he later "
        "worked at NASA{{verify source}} for five years{{when?}}."
    )


@pytest.fixture
def clean_wikitext() -> str:
    return (
        "This is a well-sourced statement with proper citations.<ref>{{cite web|url=https://example.com"
        "|title=Source 1}}</ref> Another statement.<ref>Source 2</ref>\n\n== References ==\n{{reflist}}"
    )


# =============================================================================
# SAMPLE FIXTURES
# =============================================================================

@pytest.fixture
def golden_observations() -> list[dict[str, Any]]:
    """Three-article sample: mean 2, sample standard deviation 1."""
    return [{"tagCount": 1}, {"tagCount": 3}, {"tagCount": 2}]


@pytest.fixture
def golden_result(golden_observations):
    return SamplingEstimator().estimate(golden_observations, population_size=100)


@pytest.fixture
def golden_run() -> SampleRun:
    return SampleRun(
        requested=5,
        observations=[
            SampleObservation(document_id="Alpha", tag_count=1),
            SampleObservation(document_id="Beta", tag_count=3),
            SampleObservation(document_id="Gamma", tag_count=2),
        ],
        failures=[
            FetchFailure(document_id="Deleted page", reason="Article not found", transient=False),
            FetchFailure(document_id="Busy page", reason="rate limited (HTTP 429)", transient=True),
        ],
    )


@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Default config with pacing disabled and a three-document sample."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["corpus"]["request_delay"] = 0
    config["sampling"]["sample_size"] = 3
    return config


# =============================================================================
# DOCUMENT SUPPLIER FAKES
# =============================================================================

class FakeSupplier:
    """In-memory supplier; a value that is an exception is raised on fetch."""

    def __init__(self, documents: dict[str, Any], population: Optional[int] = None):
        self.documents = documents
        self.population = population
        self.fetched: list[str] = []

    def list_sample_documents(self, desired_count: int) -> list[DocumentRef]:
        return [DocumentRef(identifier=title, title=title) for title in list(self.documents)[:desired_count]]

    def get_document_text(self, identifier: str) -> str:
        self.fetched.append(identifier)
        value = self.documents[identifier]
        if isinstance(value, Exception):
            raise value
        return value

    def get_population_size(self) -> int:
        if self.population is None:
            raise TransientFetchError("Category:Test", "HTTP 503")
        return self.population


@pytest.fixture
def make_supplier():
    def _make(documents: dict[str, Any], population: Optional[int] = None) -> FakeSupplier:
        return FakeSupplier(documents, population)
    return _make
