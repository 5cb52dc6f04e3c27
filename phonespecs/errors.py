"""Exceptions raised by the ingestion pipeline.

Store failures are not wrapped: ``sqlite3.Error`` propagates as-is.
"""

__all__ = [
    "IngestError",
    "InvalidInputError",
    "FetchError",
    "NoSpecsFoundError",
]


class IngestError(Exception):
    """Base class for ingestion failures reported to the caller."""


class InvalidInputError(IngestError):
    """Missing brand name / URL, or a URL we refuse to fetch."""


class FetchError(IngestError):
    """The page could not be fetched (transport error or non-2xx response)."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class NoSpecsFoundError(IngestError):
    """The page parsed but yielded no specification categories."""

    def __init__(self, message: str = "No specs found on page"):
        super().__init__(message)
