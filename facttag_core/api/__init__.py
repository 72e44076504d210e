from .base import DocumentSupplier
from .wikipedia import WikipediaClient, SAMPLING_STRATEGIES

__all__ = [
    "DocumentSupplier",
    "WikipediaClient",
    "SAMPLING_STRATEGIES",
]
