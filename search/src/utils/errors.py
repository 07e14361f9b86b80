"""
Error taxonomy for the search pipeline.

Every failure collapses into the same generic 500 response, so the
categories here only feed diagnostics.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Error category classification"""
    QUERY_EXECUTION = "query_execution"
    STREAM = "stream"
    MALFORMED_ROW = "malformed_row"
    SERIALIZATION = "serialization"
    UNEXPECTED = "unexpected"


class SearchError(Exception):
    """Base class for failures raised by the search pipeline."""

    category = ErrorCategory.UNEXPECTED


class QueryExecutionError(SearchError):
    """The storage backend rejected or failed to run the select expression."""

    category = ErrorCategory.QUERY_EXECUTION


class StreamError(SearchError):
    """The result event stream failed or ended without an End event."""

    category = ErrorCategory.STREAM


class RecordParseError(SearchError):
    """A dataset row could not be turned into a Record."""

    category = ErrorCategory.MALFORMED_ROW

    def __init__(self, message: str, row_number: int):
        super().__init__(f"row {row_number}: {message}")
        self.row_number = row_number


class SerializationError(SearchError):
    """The response envelope could not be encoded as JSON."""

    category = ErrorCategory.SERIALIZATION


def classify_error(exception: BaseException) -> ErrorCategory:
    """
    Classify an exception for logging.

    Args:
        exception: The exception to classify

    Returns:
        ErrorCategory of a pipeline error, UNEXPECTED for anything else
    """
    if isinstance(exception, SearchError):
        return exception.category
    return ErrorCategory.UNEXPECTED
