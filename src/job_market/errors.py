"""
Exception classes raised while acquiring a market report.

Hierarchy:
    Exception
    +-- ReportError
        +-- NetworkError      (transport failure, retry by re-invoking)
        +-- BackendError      (backend-reported failure, message shown verbatim)
        +-- SchemaViolation   (response does not match the report schema)

An empty report is a valid result and has no exception class.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for report acquisition failures."""

    default_message = "An unknown error occurred."

    def __init__(self, message: str | None = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class NetworkError(ReportError):
    """Raised when the backend could not be reached (timeout, refused connection)."""

    default_message = "Could not reach the analysis service. Check your connection and try again."


class BackendError(ReportError):
    """Raised when the backend reports an error (rate limit, refusal, outage)."""

    default_message = "The analysis service returned an error."


class SchemaViolation(ReportError, ValueError):
    """Raised when the response cannot be decoded into a MarketReport.

    The message lists offending field paths only, never the raw payload.
    """

    default_message = "The analysis service returned data in an unexpected format."
