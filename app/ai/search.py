"""Search orchestration: semantic search first, text search as fallback.

Flow:
1. Validate query and limit (no backend is touched before this passes)
2. Embed the query and call match_members
3. On any failure: roll back the session and run the text search
4. On a second failure: SearchUnavailableError
"""

from typing import Any, Callable, List, Optional

from sqlalchemy.orm import Session

from app.ai.embedding_search import find_matching_members
from app.ai.schemas import SearchOutcome, SearchResult
from app.ai.text_search import build_search_terms, highlight_snippet, search_members_by_text
from app.core.constants import SEARCH_MODE_SEMANTIC, SEARCH_MODE_TEXT
from app.core.exceptions import InvalidRequestError, SearchUnavailableError
from app.core.logging import get_logger
from app.services.embedding_service import EmbeddingService
from app.settings import Settings, settings as default_settings

logger = get_logger("ai.search")


def validate_query(query: Any, min_length: Optional[int] = None) -> str:
    """Return the trimmed query or raise InvalidRequestError."""
    if min_length is None:
        min_length = default_settings.search_min_query_length
    if not query or not isinstance(query, str):
        raise InvalidRequestError('Missing or invalid "query" field in request body')
    query = query.strip()
    if len(query) < min_length:
        raise InvalidRequestError(f"Query must be at least {min_length} characters long")
    return query


def normalize_limit(
    limit: Any,
    default: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """Missing or non-positive limits fall back to the default; cap at maximum."""
    if default is None:
        default = default_settings.search_default_limit
    if maximum is None:
        maximum = default_settings.search_max_limit

    if limit is None:
        return min(default, maximum)
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        raise InvalidRequestError('"limit" must be a number')
    if isinstance(limit, float):
        if not limit.is_integer():
            raise InvalidRequestError('"limit" must be a whole number')
        limit = int(limit)
    if limit < 1:
        limit = default
    return min(limit, maximum)


class SemanticSearchService:
    """Runs one member search with the semantic → text degradation path."""

    def __init__(
        self,
        db: Session,
        embedding_service: EmbeddingService,
        settings: Optional[Settings] = None,
        semantic_matcher: Callable[..., List[SearchResult]] = find_matching_members,
        text_matcher: Callable[..., List[SearchResult]] = search_members_by_text,
    ):
        self._db = db
        self._embedding_service = embedding_service
        self._settings = settings or default_settings
        self._semantic_matcher = semantic_matcher
        self._text_matcher = text_matcher

    def search(self, query: Any, limit: Any = None) -> SearchOutcome:
        """Search members for a free-text query.

        Args:
            query: Raw query (trimmed and validated here)
            limit: Requested result count (defaulted and capped)

        Returns:
            SearchOutcome with results and the path that produced them

        Raises:
            InvalidRequestError: Query or limit invalid
            SearchUnavailableError: Both search paths failed
        """
        query = validate_query(query, self._settings.search_min_query_length)
        limit = normalize_limit(
            limit,
            default=self._settings.search_default_limit,
            maximum=self._settings.search_max_limit,
        )
        logger.info("Processing search request for '%s' with limit %d", query, limit)

        try:
            results = self._semantic_search(query, limit)
            mode = SEARCH_MODE_SEMANTIC
        except Exception as semantic_error:
            logger.warning(
                "Semantic search failed, falling back to text search: %s", semantic_error
            )
            try:
                # A failed statement leaves the transaction aborted
                self._db.rollback()
                results = self._text_matcher(
                    self._db,
                    query,
                    limit,
                    weight=self._settings.text_match_weight,
                )
                mode = SEARCH_MODE_TEXT
            except Exception as text_error:
                logger.error("Both search methods failed: %s", text_error)
                raise SearchUnavailableError(
                    "Search functionality is currently unavailable",
                    details={
                        "semantic_error": str(semantic_error),
                        "text_error": str(text_error),
                    },
                ) from text_error

        results = self._shape(results[:limit], query)
        logger.info("Search '%s' returned %d %s results", query, len(results), mode)
        return SearchOutcome(query=query, results=results, mode=mode)

    def _semantic_search(self, query: str, limit: int) -> List[SearchResult]:
        logger.debug("Performing semantic search for '%s'", query)
        query_embedding = self._embedding_service.create_embedding(query)
        return self._semantic_matcher(
            self._db,
            query_embedding,
            limit=limit,
            similarity_threshold=self._settings.similarity_threshold,
        )

    def _shape(self, results: List[SearchResult], query: str) -> List[SearchResult]:
        terms = build_search_terms(query)
        shaped = []
        for result in results:
            snippet = highlight_snippet(result.description, terms)
            if snippet is not None:
                result = result.model_copy(update={"highlighted_text": snippet})
            shaped.append(result)
        return shaped
