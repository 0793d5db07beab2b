"""Core module - logging, exceptions, and application infrastructure."""

from app.core.logging import setup_logging, get_logger
from app.core.exceptions import (
    StandupTrackerError,
    AIProcessingError,
    EmbeddingError,
    SearchError,
    SimilarityQueryError,
    TextSearchError,
    SearchUnavailableError,
    InvalidRequestError,
    StorageError,
    DatabaseError,
    NotFoundError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "StandupTrackerError",
    "AIProcessingError",
    "EmbeddingError",
    "SearchError",
    "SimilarityQueryError",
    "TextSearchError",
    "SearchUnavailableError",
    "InvalidRequestError",
    "StorageError",
    "DatabaseError",
    "NotFoundError",
]
