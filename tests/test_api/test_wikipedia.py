"""
Tests for the Wikipedia document supplier.

All HTTP traffic goes through httpx.MockTransport; nothing reaches the
network. Pacing sleeps are disabled via request_delay=0 or patched.
"""
from unittest.mock import patch

import httpx
import pytest

from facttag_core.api import DocumentSupplier, WikipediaClient
from facttag_core.config import DEFAULT_CONFIG
from facttag_core.exceptions import (
    DocumentFetchError,
    DocumentNotFoundError,
    TransientFetchError,
)
from facttag_core.models import DocumentRef

pytestmark = pytest.mark.network


def make_client(handler, **kwargs) -> WikipediaClient:
    kwargs.setdefault("request_delay", 0)
    return WikipediaClient(http=httpx.Client(transport=httpx.MockTransport(handler)), **kwargs)


def revisions_payload(title: str, content: str) -> dict:
    return {
        "query": {
            "pages": {
                "123": {
                    "pageid": 123,
                    "title": title,
                    "revisions": [{"slots": {"main": {"contentmodel": "wikitext", "*": content}}}],
                }
            }
        }
    }


def test_client_satisfies_supplier_protocol():
    client = make_client(lambda request: httpx.Response(200, json={}))
    assert isinstance(client, DocumentSupplier)


class TestGetDocumentText:
    """Tests for get_document_text()."""

    def test_returns_main_slot_wikitext(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json=revisions_payload("Alpha", "Text{{fact}}"))

        with make_client(handler) as client:
            assert client.get_document_text("Alpha") == "Text{{fact}}"

        assert seen["titles"] == "Alpha"
        assert seen["prop"] == "revisions"
        assert seen["rvslots"] == "main"
        assert seen["format"] == "json"

    def test_content_key_fallback(self):
        payload = {"query": {"pages": {"1": {"revisions": [{"slots": {"main": {"content": "body"}}}]}}}}
        client = make_client(lambda request: httpx.Response(200, json=payload))

        assert client.get_document_text("Alpha") == "body"

    def test_missing_page(self):
        payload = {"query": {"pages": {"-1": {"title": "Gone", "missing": ""}}}}
        client = make_client(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(DocumentNotFoundError) as exc_info:
            client.get_document_text("Gone")

        assert exc_info.value.identifier == "Gone"
        assert exc_info.value.reason == "Article not found"

    def test_page_without_revisions(self):
        payload = {"query": {"pages": {"5": {"title": "Empty"}}}}
        client = make_client(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(DocumentNotFoundError, match="No content available"):
            client.get_document_text("Empty")

    def test_rate_limited(self):
        client = make_client(lambda request: httpx.Response(429))

        with pytest.raises(TransientFetchError, match="429"):
            client.get_document_text("Alpha")

    def test_server_error(self):
        client = make_client(lambda request: httpx.Response(503))

        with pytest.raises(TransientFetchError, match="HTTP 503"):
            client.get_document_text("Alpha")

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(TransientFetchError, match="request failed"):
            client.get_document_text("Alpha")

    def test_api_error_payload(self):
        payload = {"error": {"code": "maxlag", "info": "Waiting for a database server"}}
        client = make_client(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(TransientFetchError, match="Waiting for a database server"):
            client.get_document_text("Alpha")

    def test_invalid_json(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(TransientFetchError, match="not valid JSON"):
            client.get_document_text("Alpha")

    def test_fetch_errors_share_base_class(self):
        client = make_client(lambda request: httpx.Response(500))

        with pytest.raises(DocumentFetchError):
            client.get_document_text("Alpha")


class TestPopulationSize:
    """Tests for get_population_size()."""

    def test_reads_categoryinfo(self):
        payload = {"query": {"pages": {"9": {"title": "Category:X", "categoryinfo": {"size": 560000, "pages": 553000}}}}}
        client = make_client(lambda request: httpx.Response(200, json=payload), category="X")

        assert client.get_population_size() == 553000

    @patch("facttag_core.api.wikipedia.time.sleep")
    def test_falls_back_to_paging_members(self, mock_sleep):
        def handler(request):
            params = request.url.params
            if params.get("prop") == "categoryinfo":
                return httpx.Response(200, json={"query": {"pages": {"9": {"title": "Category:X"}}}})
            if "cmcontinue" not in params:
                return httpx.Response(200, json={
                    "query": {"categorymembers": [{"title": f"A{i}"} for i in range(500)]},
                    "continue": {"cmcontinue": "page2"},
                })
            assert params["cmcontinue"] == "page2"
            return httpx.Response(200, json={"query": {"categorymembers": [{"title": "B1"}, {"title": "B2"}]}})

        client = make_client(handler, category="X")

        assert client.get_population_size() == 502
        assert mock_sleep.call_count == 1

    def test_error_propagates(self):
        client = make_client(lambda request: httpx.Response(503))

        with pytest.raises(TransientFetchError):
            client.get_population_size()


class TestSampleSelection:
    """Tests for list_sample_documents()."""

    def test_zero_requested(self):
        client = make_client(lambda request: pytest.fail("no request expected"))
        assert client.list_sample_documents(0) == []

    def test_category_strategy_returns_distinct_titles(self):
        prefixes = []

        def handler(request):
            prefix = request.url.params["cmstartsortkeyprefix"]
            prefixes.append(prefix)
            return httpx.Response(200, json={"query": {"categorymembers": [{"title": f"Article {prefix}"}]}})

        client = make_client(handler, seed=42)
        documents = client.list_sample_documents(5)

        assert len(documents) == 5
        assert len({d.identifier for d in documents}) == 5
        assert all(isinstance(d, DocumentRef) for d in documents)
        assert all(len(p) == 2 and p.isupper() for p in prefixes)

    def test_category_strategy_is_reproducible_with_seed(self):
        def handler(request):
            prefix = request.url.params["cmstartsortkeyprefix"]
            return httpx.Response(200, json={"query": {"categorymembers": [{"title": prefix}]}})

        first = make_client(handler, seed=7).list_sample_documents(4)
        second = make_client(handler, seed=7).list_sample_documents(4)

        assert first == second

    def test_category_strategy_skips_failed_draws(self):
        calls = {"n": 0}

        def handler(request):
            calls["n"] += 1
            if calls["n"] == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"query": {"categorymembers": [{"title": f"T{calls['n']}"}]}})

        documents = make_client(handler, seed=1).list_sample_documents(2)

        assert [d.title for d in documents] == ["T2", "T3"]

    def test_category_strategy_gives_up_after_max_attempts(self):
        client = make_client(lambda request: httpx.Response(
            200, json={"query": {"categorymembers": [{"title": "Same"}]}}
        ), seed=3)

        documents = client.list_sample_documents(4)

        assert [d.title for d in documents] == ["Same"]

    def test_search_strategy_dedupes(self):
        results = {
            "citation needed": ["A", "B"],
            "fact": ["B", "C"],
            "dubious": ["D"],
        }
        queries = []

        def handler(request):
            query = request.url.params["srsearch"]
            queries.append(query)
            term = query[len('insource:"{{'):-len('}}"')]
            return httpx.Response(200, json={"query": {"search": [{"title": t} for t in results[term]]}})

        documents = make_client(handler, strategy="search").list_sample_documents(3)

        assert [d.title for d in documents] == ["A", "B", "C"]
        assert queries == ['insource:"{{citation needed}}"', 'insource:"{{fact}}"']

    def test_invalid_strategy(self):
        with pytest.raises(ValueError, match="strategy"):
            WikipediaClient(strategy="stratified", http=httpx.Client())


def test_from_config_sets_user_agent():
    config = {
        "corpus": {**DEFAULT_CONFIG["corpus"], "user_agent": "TestBot/1.0 (test@example.com)", "category": "Y"},
        "sampling": {**DEFAULT_CONFIG["sampling"], "strategy": "search"},
    }

    with WikipediaClient.from_config(config) as client:
        assert client.http.headers["User-Agent"] == "TestBot/1.0 (test@example.com)"
        assert client.category_title == "Category:Y"
        assert client.strategy == "search"
