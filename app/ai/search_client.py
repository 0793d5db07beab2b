"""HTTP client for the semantic-search function."""

from typing import List, Optional

import httpx
from pydantic import ValidationError

from app.ai.schemas import SearchResponse, SearchResult
from app.core.exceptions import SearchError
from app.core.logging import get_logger
from app.settings import settings

logger = get_logger("ai.search_client")

# Default timeout for search requests
DEFAULT_TIMEOUT = 30.0


class SemanticSearchClient:
    """Calls POST /functions/v1/semantic-search and parses the response."""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._url = url or settings.search_function_url
        self._headers = {"Content-Type": "application/json"}
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"
        self._timeout = timeout
        self._transport = transport

    def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        """Search members; queries under 3 characters return nothing without a request.

        Raises:
            SearchError: Non-2xx status or an unsuccessful payload
        """
        query = (query or "").strip()
        if len(query) < settings.search_min_query_length:
            return []

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    self._url,
                    json={"query": query, "limit": limit},
                    headers=self._headers,
                )
        except httpx.HTTPError as e:
            logger.error("Search request failed: %s", e)
            raise SearchError(f"Search failed: {e}") from e

        if response.status_code != 200:
            message = _error_message(response) or f"Search failed: {response.status_code}"
            raise SearchError(message, details={"status_code": response.status_code})

        try:
            data = response.json()
        except ValueError as e:
            raise SearchError(f"Search returned invalid JSON: {e}") from e
        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else None
            raise SearchError(error or "Search failed")
        try:
            return SearchResponse.model_validate(data).results
        except ValidationError as e:
            raise SearchError(f"Unexpected search response: {e}") from e


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    return data.get("error") if isinstance(data, dict) else None
