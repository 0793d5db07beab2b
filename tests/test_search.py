"""Unit tests for search orchestration (semantic first, text fallback)."""

import pytest

from app.ai.schemas import SearchResult
from app.ai.search import SemanticSearchService, normalize_limit, validate_query
from app.ai.text_search import search_members_by_text
from app.core.exceptions import (
    EmbeddingError,
    InvalidRequestError,
    SearchUnavailableError,
    SimilarityQueryError,
    TextSearchError,
)
from app.settings import Settings
from tests.conftest import FakeEmbeddingService, FakeSession


def _result(id, name, score, description=None):
    return SearchResult(id=id, name=name, similarity_score=score, description=description)


class RecordingMatcher:
    """Matcher stub that records its calls."""

    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.calls = []

    def __call__(self, db, arg, limit=10, **kwargs):
        self.calls.append({"arg": arg, "limit": limit, **kwargs})
        if self.error is not None:
            raise self.error
        return list(self.results)


@pytest.fixture
def search_settings():
    return Settings(
        search_default_limit=10,
        search_max_limit=50,
        search_min_query_length=3,
        similarity_threshold=0.1,
        text_match_weight=0.2,
    )


class TestValidateQuery:
    """Tests for query validation."""

    def test_query_trimmed(self):
        """Test surrounding whitespace is removed."""
        assert validate_query("  react  ", min_length=3) == "react"

    def test_missing_query(self):
        """Test a missing query is rejected."""
        with pytest.raises(InvalidRequestError, match="Missing or invalid"):
            validate_query(None, min_length=3)

    def test_non_string_query(self):
        """Test a non-string query is rejected."""
        with pytest.raises(InvalidRequestError, match="Missing or invalid"):
            validate_query(42, min_length=3)

    def test_short_query(self):
        """Test a query under 3 characters is rejected."""
        with pytest.raises(InvalidRequestError, match="at least 3 characters"):
            validate_query("ab", min_length=3)

    def test_short_after_trim(self):
        """Test length is checked after trimming."""
        with pytest.raises(InvalidRequestError):
            validate_query("  ab  ", min_length=3)


class TestNormalizeLimit:
    """Tests for limit defaulting and capping."""

    def test_missing_limit_defaults(self):
        """Test a missing limit becomes the default."""
        assert normalize_limit(None, default=10, maximum=50) == 10

    def test_limit_capped(self):
        """Test limits above the maximum are capped."""
        assert normalize_limit(500, default=10, maximum=50) == 50

    def test_non_positive_limit_defaults(self):
        """Test zero and negative limits fall back to the default."""
        assert normalize_limit(0, default=10, maximum=50) == 10
        assert normalize_limit(-3, default=10, maximum=50) == 10

    def test_whole_float_accepted(self):
        """Test 5.0 is treated as 5."""
        assert normalize_limit(5.0, default=10, maximum=50) == 5

    def test_non_numeric_rejected(self):
        """Test strings and booleans are rejected."""
        with pytest.raises(InvalidRequestError):
            normalize_limit("ten", default=10, maximum=50)
        with pytest.raises(InvalidRequestError):
            normalize_limit(True, default=10, maximum=50)


class TestSemanticSearchService:
    """Tests for the semantic → text degradation path."""

    def test_semantic_results_returned(self, search_settings):
        """Test semantic matches are returned when everything works."""
        semantic = RecordingMatcher([_result(1, "Alice", 0.9), _result(2, "Bob", 0.5)])
        text = RecordingMatcher()
        embeddings = FakeEmbeddingService()
        service = SemanticSearchService(
            FakeSession(), embeddings, search_settings,
            semantic_matcher=semantic, text_matcher=text,
        )

        outcome = service.search("React developer", limit=5)

        assert outcome.mode == "semantic"
        assert outcome.count == 2
        assert embeddings.calls == ["React developer"]
        assert semantic.calls[0]["limit"] == 5
        assert semantic.calls[0]["similarity_threshold"] == 0.1
        assert text.calls == []

    def test_embedding_failure_falls_back(self, search_settings):
        """Test a failed embedding call switches to text search."""
        semantic = RecordingMatcher()
        text = RecordingMatcher([_result(3, "Carol", 0.4)])
        db = FakeSession()
        service = SemanticSearchService(
            db, FakeEmbeddingService(error=EmbeddingError("rate limited")), search_settings,
            semantic_matcher=semantic, text_matcher=text,
        )

        outcome = service.search("React developer", limit=5)

        assert outcome.mode == "text"
        assert [r.name for r in outcome.results] == ["Carol"]
        assert semantic.calls == []
        assert text.calls[0]["arg"] == "React developer"
        assert text.calls[0]["weight"] == 0.2

    def test_query_failure_rolls_back_before_fallback(self, search_settings):
        """Test the session is rolled back after the vector query fails."""
        db = FakeSession()
        service = SemanticSearchService(
            db, FakeEmbeddingService(), search_settings,
            semantic_matcher=RecordingMatcher(error=SimilarityQueryError("boom")),
            text_matcher=RecordingMatcher([_result(1, "Alice", 0.2)]),
        )

        outcome = service.search("python", limit=3)

        assert outcome.mode == "text"
        assert db.rollbacks == 1

    def test_both_paths_fail(self, search_settings):
        """Test SearchUnavailableError when the text search also fails."""
        service = SemanticSearchService(
            FakeSession(), FakeEmbeddingService(), search_settings,
            semantic_matcher=RecordingMatcher(error=SimilarityQueryError("vector down")),
            text_matcher=RecordingMatcher(error=TextSearchError("db down")),
        )

        with pytest.raises(SearchUnavailableError) as exc_info:
            service.search("python", limit=3)

        assert exc_info.value.message == "Search functionality is currently unavailable"
        assert "vector down" in exc_info.value.details["semantic_error"]
        assert "db down" in exc_info.value.details["text_error"]

    def test_short_query_touches_nothing(self, search_settings):
        """Test validation happens before any backend call."""
        embeddings = FakeEmbeddingService()
        semantic = RecordingMatcher()
        text = RecordingMatcher()
        db = FakeSession()
        service = SemanticSearchService(
            db, embeddings, search_settings, semantic_matcher=semantic, text_matcher=text,
        )

        with pytest.raises(InvalidRequestError):
            service.search("ab")

        assert embeddings.calls == []
        assert semantic.calls == []
        assert text.calls == []
        assert db.rollbacks == 0

    def test_limit_capped_even_if_matcher_overflows(self, search_settings):
        """Test at most 50 results are returned for an oversized limit."""
        many = [_result(i, f"M{i}", 0.9) for i in range(80)]
        semantic = RecordingMatcher(many)
        service = SemanticSearchService(
            FakeSession(), FakeEmbeddingService(), search_settings,
            semantic_matcher=semantic, text_matcher=RecordingMatcher(),
        )

        outcome = service.search("react", limit=1000)

        assert semantic.calls[0]["limit"] == 50
        assert outcome.count == 50

    def test_default_limit(self, search_settings):
        """Test a missing limit searches for 10 members."""
        semantic = RecordingMatcher()
        service = SemanticSearchService(
            FakeSession(), FakeEmbeddingService(), search_settings,
            semantic_matcher=semantic, text_matcher=RecordingMatcher(),
        )
        service.search("react")
        assert semantic.calls[0]["limit"] == 10

    def test_highlight_added(self, search_settings):
        """Test descriptions containing a term get a highlighted snippet."""
        semantic = RecordingMatcher([
            _result(1, "Alice", 0.8, description="Builds React dashboards"),
            _result(2, "Bob", 0.6, description="Python and SQL"),
        ])
        service = SemanticSearchService(
            FakeSession(), FakeEmbeddingService(), search_settings,
            semantic_matcher=semantic, text_matcher=RecordingMatcher(),
        )

        results = service.search("react", limit=5).results

        assert results[0].highlighted_text == "Builds <mark>React</mark> dashboards"
        assert results[1].highlighted_text is None

    def test_text_fallback_end_to_end(self, search_settings, sample_members):
        """Test "React developer" with limit 5 when the vector path is down."""
        db = FakeSession(rows=sample_members)
        service = SemanticSearchService(
            db, FakeEmbeddingService(error=EmbeddingError("model unavailable")), search_settings,
            text_matcher=search_members_by_text,
        )

        outcome = service.search("React developer", limit=5)

        assert outcome.mode == "text"
        assert 0 < outcome.count <= 5
        assert [r.name for r in outcome.results][:2] == ["Alice Brown", "Carol White"]
        for result in outcome.results:
            assert 0.0 <= result.similarity_score <= 1.0
        scores = [r.similarity_score for r in outcome.results]
        assert scores == sorted(scores, reverse=True)
