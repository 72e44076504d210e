"""
Document supplier contract for the sampling pipeline.
"""
from typing import Protocol, runtime_checkable

from facttag_core.models import DocumentRef


@runtime_checkable
class DocumentSupplier(Protocol):
    """Source of sampled documents and their raw wikitext.

    get_document_text raises DocumentNotFoundError or TransientFetchError for
    documents that cannot be fetched; callers skip those documents."""

    def list_sample_documents(self, desired_count: int) -> list[DocumentRef]:
        ...

    def get_document_text(self, identifier: str) -> str:
        ...
