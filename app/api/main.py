"""
FastAPI application exposing the semantic-search function.
- POST /functions/v1/semantic-search: member search (semantic with text fallback)
- OPTIONS on the same path for CORS; any other method gets 405
- GET /storage/v1/object/public/{bucket}/{path}: public bucket objects
- GET /health
"""

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, ContextManager, Iterator

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.ai.schemas import ErrorResponse, SearchOutcome, SearchResponse
from app.ai.search import SemanticSearchService, normalize_limit, validate_query
from app.core.constants import CORS_HEADERS
from app.core.container import get_container
from app.core.exceptions import InvalidRequestError, SearchUnavailableError, StorageError
from app.core.logging import get_logger, setup_logging
from app.settings import settings

setup_logging(level=settings.log_level, log_file=settings.log_file)
logger = get_logger("api")

SEARCH_PATH = "/functions/v1/semantic-search"
METHOD_NOT_ALLOWED = "Method not allowed. Use POST."
PUBLIC_STORAGE_PATH = "/storage/v1/object/public"

SearchServiceFactory = Callable[[], ContextManager[SemanticSearchService]]

app = FastAPI(title="Standup Tracker - Semantic Search")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error(status_code: int, message: str) -> JSONResponse:
    payload = ErrorResponse(error=message, timestamp=_timestamp())
    return JSONResponse(payload.model_dump(), status_code=status_code, headers=CORS_HEADERS)


@contextmanager
def open_search_service() -> Iterator[SemanticSearchService]:
    """One session and one orchestrator per request."""
    container = get_container()
    with container.session_scope() as db:
        yield container.search_service(db)


def get_search_service_factory() -> SearchServiceFactory:
    """Dependency returning the factory; nothing is opened until it is called."""
    return open_search_service


def _run_search(factory: SearchServiceFactory, query: str, limit: int) -> SearchOutcome:
    with factory() as service:
        return service.search(query, limit)


@app.get("/health")
def health():
    """Basic health check."""
    return {"status": "ok"}


@app.options(SEARCH_PATH)
def semantic_search_options():
    """CORS preflight for clients that bypass the middleware."""
    return Response(status_code=200, headers=CORS_HEADERS)


@app.api_route(SEARCH_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"])
def semantic_search_method_not_allowed():
    return _error(405, METHOD_NOT_ALLOWED)


@app.exception_handler(StarletteHTTPException)
async def search_path_http_exception(request: Request, exc: StarletteHTTPException):
    """Methods without a route on the search path still get the JSON envelope."""
    if exc.status_code == 405 and request.url.path == SEARCH_PATH:
        return _error(405, METHOD_NOT_ALLOWED)
    return await http_exception_handler(request, exc)


@app.post(SEARCH_PATH)
async def semantic_search(
    request: Request,
    search_factory: SearchServiceFactory = Depends(get_search_service_factory),
):
    """
    Search members by free text.
    - Body: {"query": str, "limit": int (optional, default 10, max 50)}
    - Validates before any backend call (400 on bad JSON, missing or short query)
    - Semantic search first, text search if it fails, 500 if both fail
    """
    start_time = time.perf_counter()

    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Invalid JSON in request body")

    if not isinstance(body, dict):
        return _error(400, 'Missing or invalid "query" field in request body')

    try:
        query = validate_query(body.get("query"))
        limit = normalize_limit(body.get("limit"))
    except InvalidRequestError as e:
        logger.warning("POST semantic-search rejected: %s", e.message)
        return _error(400, e.message)

    logger.info("POST semantic-search start: query='%s', limit=%d", query, limit)
    try:
        outcome = await run_in_threadpool(_run_search, search_factory, query, limit)
    except SearchUnavailableError as e:
        logger.error("POST semantic-search failed: %s (%s)", e.message, e.details)
        return _error(500, e.message)
    except Exception as e:
        logger.exception("POST semantic-search error")
        return _error(500, str(e) or "An unexpected error occurred")

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "POST semantic-search success: mode=%s, results=%d, latency=%.2fms",
        outcome.mode,
        outcome.count,
        elapsed_ms,
    )
    payload = SearchResponse(
        query=outcome.query,
        results=outcome.results,
        count=outcome.count,
        timestamp=_timestamp(),
    )
    return JSONResponse(payload.model_dump(), headers=CORS_HEADERS)


@app.get(PUBLIC_STORAGE_PATH + "/{bucket}/{object_path:path}")
def public_object(bucket: str, object_path: str):
    """Serve an object from a public bucket."""
    try:
        path = get_container().storage.open_public_object(bucket, object_path)
    except StorageError:
        return JSONResponse({"error": "Object not found"}, status_code=404)
    return FileResponse(path)
