"""
Custom exceptions for the fact-tag estimation pipeline.

The tag recognizer never raises; these cover the estimator's input contract
and the document supplier's fetch failures.
"""


class FactTagError(Exception):
    """Base exception for fact-tag estimation errors."""
    pass


class EstimationError(FactTagError):
    """The sample cannot produce a population estimate."""
    pass


class EmptySampleError(EstimationError):
    """No observations were supplied."""
    pass


class InsufficientSampleError(EstimationError):
    """Too few observations for a sample variance (n < 2)."""
    pass


class EstimationInputError(EstimationError):
    """A tag count or the population size is negative or not an integer."""
    pass


class DocumentFetchError(FactTagError):
    """A document could not be retrieved from the corpus."""

    def __init__(self, identifier: str, message: str):
        super().__init__(f"{identifier}: {message}")
        self.identifier = identifier
        self.reason = message


class DocumentNotFoundError(DocumentFetchError):
    """Document is missing or has no revision content."""
    pass


class TransientFetchError(DocumentFetchError):
    """Network error, rate limiting or an API error payload."""
    pass
