"""
Wikipedia API Integration

Samples articles from a maintenance category and fetches their wikitext
through the MediaWiki Action API.

API Details:
    - Base URL: https://en.wikipedia.org/w/api.php
    - Authentication: none, but a descriptive User-Agent is required
    - Rate Limit: unauthenticated clients should stay serial and pace requests

Sampling strategies:
    - "category": random sort-key prefixes within the category, one member per
      draw. Approximates a simple random sample; titles under sparse prefixes
      are drawn more often than titles under dense ones.
    - "search": insource full-text search for the configured template names.
      Fast, but biased towards articles the search index ranks highly.

LIMITATION: categoryinfo counts pages in every namespace, so the population
size can slightly exceed the number of main-namespace articles.
"""
import random
import string
import time
from typing import Any, Optional

import httpx
from rich.console import Console
from rich.markup import escape

from facttag_core.config import DEFAULT_USER_AGENT
from facttag_core.exceptions import (
    DocumentFetchError,
    DocumentNotFoundError,
    TransientFetchError,
)
from facttag_core.models import DocumentRef

console = Console()

WIKIPEDIA_API_URL: str = "https://en.wikipedia.org/w/api.php"
DEFAULT_CATEGORY: str = "All articles with unsourced statements"
API_TIMEOUT: float = 30.0
API_RATE_LIMIT_DELAY: float = 0.2
CATEGORY_PAGE_LIMIT: int = 500
SEARCH_PAGE_LIMIT: int = 50

SAMPLING_STRATEGIES = ("category", "search")
DEFAULT_SEARCH_TERMS = ["citation needed", "fact", "dubious"]


class WikipediaClient:
    """
    Document supplier backed by the MediaWiki Action API.

    Usage:
        with WikipediaClient(seed=42) as client:
            population = client.get_population_size()
            for ref in client.list_sample_documents(100):
                text = client.get_document_text(ref.identifier)
    """

    def __init__(
        self,
        api_url: str = WIKIPEDIA_API_URL,
        category: str = DEFAULT_CATEGORY,
        namespace: int = 0,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = API_TIMEOUT,
        request_delay: float = API_RATE_LIMIT_DELAY,
        strategy: str = "category",
        search_terms: Optional[list[str]] = None,
        seed: Optional[int] = None,
        http: Optional[httpx.Client] = None,
    ):
        if strategy not in SAMPLING_STRATEGIES:
            raise ValueError(f"strategy must be one of {SAMPLING_STRATEGIES}, got {strategy!r}")

        self.api_url = api_url
        self.category = category
        self.namespace = namespace
        self.request_delay = request_delay
        self.strategy = strategy
        self.search_terms = list(search_terms) if search_terms else list(DEFAULT_SEARCH_TERMS)
        self.rng = random.Random(seed)
        self.http = http or httpx.Client(
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "WikipediaClient":
        corpus = config.get("corpus", {})
        sampling = config.get("sampling", {})
        return cls(
            api_url=corpus.get("api_url", WIKIPEDIA_API_URL),
            category=corpus.get("category", DEFAULT_CATEGORY),
            namespace=corpus.get("namespace", 0),
            user_agent=corpus.get("user_agent", DEFAULT_USER_AGENT),
            timeout=corpus.get("timeout", API_TIMEOUT),
            request_delay=corpus.get("request_delay", API_RATE_LIMIT_DELAY),
            strategy=sampling.get("strategy", "category"),
            search_terms=sampling.get("search_terms"),
            seed=sampling.get("seed"),
        )

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "WikipediaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def category_title(self) -> str:
        return f"Category:{self.category}"

    def _get(self, params: dict[str, Any], identifier: str) -> dict[str, Any]:
        """Issue one API query and unwrap errors into fetch exceptions."""
        try:
            response = self.http.get(self.api_url, params={**params, "format": "json"})
        except httpx.HTTPError as e:
            raise TransientFetchError(identifier, f"request failed: {e}") from e

        if response.status_code == 429:
            raise TransientFetchError(identifier, "rate limited (HTTP 429)")
        if response.status_code != 200:
            raise TransientFetchError(identifier, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise TransientFetchError(identifier, "response is not valid JSON") from e

        if "error" in data:
            info = data["error"].get("info", data["error"].get("code", "unknown error"))
            raise TransientFetchError(identifier, f"API error: {info}")

        return data

    # =========================================================================
    # POPULATION SIZE
    # =========================================================================

    def get_population_size(self) -> int:
        """
        Number of pages in the sampled category.

        Uses categoryinfo when the API provides it, otherwise pages through
        every category member.
        """
        console.print(f"[cyan]Querying category: \"{self.category}\"[/cyan]")

        data = self._get(
            {"action": "query", "titles": self.category_title, "prop": "categoryinfo"},
            self.category_title,
        )
        pages = data.get("query", {}).get("pages", {})
        page = next(iter(pages.values()), {})

        if page.get("categoryinfo"):
            return int(page["categoryinfo"].get("pages", 0))

        return self.count_category_members()

    def count_category_members(self) -> int:
        total = 0
        cmcontinue: Optional[str] = None

        console.print("[dim]Counting all category members...[/dim]")

        while True:
            params = {
                "action": "query",
                "list": "categorymembers",
                "cmtitle": self.category_title,
                "cmnamespace": str(self.namespace),
                "cmlimit": str(CATEGORY_PAGE_LIMIT),
            }
            if cmcontinue:
                params["cmcontinue"] = cmcontinue

            data = self._get(params, self.category_title)
            members = data.get("query", {}).get("categorymembers")
            if not members:
                break

            total += len(members)
            cmcontinue = data.get("continue", {}).get("cmcontinue")
            if not cmcontinue:
                break

            if total % 10000 == 0:
                console.print(f"[dim]  Counted {total} articles so far...[/dim]")
            time.sleep(self.request_delay)

        return total

    # =========================================================================
    # SAMPLE SELECTION
    # =========================================================================

    def list_sample_documents(self, desired_count: int) -> list[DocumentRef]:
        """
        Select up to desired_count distinct articles from the category.

        Batches that fail are reported and skipped, so the result can be
        shorter than requested.
        """
        if desired_count <= 0:
            return []
        if self.strategy == "search":
            return self._search_sample(desired_count)
        return self._category_sample(desired_count)

    def _random_prefix(self) -> str:
        return "".join(self.rng.choice(string.ascii_uppercase) for _ in range(2))

    def _category_sample(self, desired_count: int) -> list[DocumentRef]:
        documents: list[DocumentRef] = []
        seen: set[str] = set()
        max_attempts = min(desired_count * 3, 3000)

        console.print(f"[cyan]Collecting random sample of {desired_count} from {self.category_title}...[/cyan]")

        for _ in range(max_attempts):
            if len(documents) >= desired_count:
                break

            prefix = self._random_prefix()
            try:
                data = self._get(
                    {
                        "action": "query",
                        "list": "categorymembers",
                        "cmtitle": self.category_title,
                        "cmnamespace": str(self.namespace),
                        "cmtype": "page",
                        "cmsort": "sortkey",
                        "cmstartsortkeyprefix": prefix,
                        "cmlimit": "1",
                    },
                    f"{self.category_title} @ {prefix}",
                )
            except DocumentFetchError as e:
                console.print(f"[yellow]⚠ Skipping draw at prefix {prefix}: {escape(e.reason)}[/yellow]")
                continue

            for member in data.get("query", {}).get("categorymembers", []):
                title = member.get("title")
                if title and title not in seen:
                    seen.add(title)
                    documents.append(DocumentRef(identifier=title, title=title))

            if len(documents) % 25 == 0 and documents:
                console.print(f"[dim]  Collected {len(documents)}/{desired_count} articles...[/dim]")
            time.sleep(self.request_delay)

        return documents[:desired_count]

    def _search_sample(self, desired_count: int) -> list[DocumentRef]:
        documents: list[DocumentRef] = []
        seen: set[str] = set()

        for term in self.search_terms:
            if len(documents) >= desired_count:
                break

            console.print(f"[cyan]Searching for articles with \"{{{{{term}}}}}\"...[/cyan]")
            try:
                data = self._get(
                    {
                        "action": "query",
                        "list": "search",
                        "srsearch": f'insource:"{{{{{term}}}}}"',
                        "srnamespace": str(self.namespace),
                        "srlimit": str(min(SEARCH_PAGE_LIMIT, desired_count - len(documents))),
                    },
                    f"search:{term}",
                )
            except DocumentFetchError as e:
                console.print(f"[yellow]⚠ Search for \"{term}\" failed: {escape(e.reason)}[/yellow]")
                continue

            for page in data.get("query", {}).get("search", []):
                title = page.get("title")
                if title and title not in seen and len(documents) < desired_count:
                    seen.add(title)
                    documents.append(DocumentRef(identifier=title, title=title))

            time.sleep(self.request_delay)

        return documents

    # =========================================================================
    # CONTENT
    # =========================================================================

    def get_document_text(self, identifier: str) -> str:
        """
        Latest wikitext of an article's main slot.

        Raises:
            DocumentNotFoundError: Page is missing or has no revisions
            TransientFetchError: Network, HTTP or API failure
        """
        data = self._get(
            {
                "action": "query",
                "titles": identifier,
                "prop": "revisions",
                "rvprop": "content",
                "rvslots": "main",
            },
            identifier,
        )

        pages = data.get("query", {}).get("pages")
        if not pages:
            raise TransientFetchError(identifier, "Invalid response from revisions query")

        page = next(iter(pages.values()))
        if "missing" in page or "invalid" in page:
            raise DocumentNotFoundError(identifier, "Article not found")

        revisions = page.get("revisions") or []
        if not revisions:
            raise DocumentNotFoundError(identifier, "No content available")

        main_slot = revisions[0].get("slots", {}).get("main", {})
        content = main_slot.get("*", main_slot.get("content"))
        if content is None:
            raise DocumentNotFoundError(identifier, "No content available")

        return content
