"""AI module - embedding search, text fallback and search orchestration."""

from app.ai.schemas import (
    ErrorResponse,
    SearchOutcome,
    SearchResponse,
    SearchResult,
    TeamRef,
)
from app.ai.embedding_search import find_matching_members
from app.ai.text_search import search_members_by_text
from app.ai.search import SemanticSearchService, normalize_limit, validate_query

__all__ = [
    # Schemas
    "ErrorResponse",
    "SearchOutcome",
    "SearchResponse",
    "SearchResult",
    "TeamRef",
    # Search
    "find_matching_members",
    "search_members_by_text",
    "SemanticSearchService",
    "normalize_limit",
    "validate_query",
]
