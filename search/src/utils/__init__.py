"""Error types shared across the search pipeline."""

from .errors import (
    ErrorCategory,
    QueryExecutionError,
    RecordParseError,
    SearchError,
    SerializationError,
    StreamError,
    classify_error,
)

__all__ = [
    "ErrorCategory",
    "SearchError",
    "QueryExecutionError",
    "StreamError",
    "RecordParseError",
    "SerializationError",
    "classify_error",
]
