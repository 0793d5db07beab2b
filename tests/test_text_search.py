"""Unit tests for the text fallback search."""

import pytest
from sqlalchemy.dialects import postgresql

from app.ai.text_search import (
    _like_pattern,
    build_search_terms,
    build_text_predicate,
    highlight_snippet,
    member_search_text,
    score_member_text,
    search_members_by_text,
)
from app.core.exceptions import TextSearchError
from tests.conftest import FakeSession


class TestSearchTerms:
    """Tests for query term extraction."""

    def test_terms_are_lowercased(self):
        """Test terms are lower-cased and split on whitespace."""
        assert build_search_terms("React Developer") == ["react", "developer"]

    def test_short_terms_dropped(self):
        """Test terms of 2 characters or fewer are dropped."""
        assert build_search_terms("UI in js and CSS") == ["and", "css"]

    def test_only_short_terms(self):
        """Test a query made of short terms yields no terms."""
        assert build_search_terms("a b c") == []

    def test_extra_whitespace(self):
        """Test repeated whitespace does not produce empty terms."""
        assert build_search_terms("  python    sql ") == ["python", "sql"]


class TestTextPredicate:
    """Tests for the SQL predicate."""

    def test_no_terms_no_predicate(self):
        """Test no predicate is built without terms."""
        assert build_text_predicate([]) is None

    def test_predicate_uses_ilike_per_field(self):
        """Test each term matches name, role, description and skills."""
        predicate = build_text_predicate(["react", "developer"])
        sql = str(predicate.compile(dialect=postgresql.dialect()))
        assert sql.count("ILIKE") == 8
        assert "array_to_string" in sql
        assert " OR " in sql

    def test_like_pattern_escapes_wildcards(self):
        """Test LIKE wildcards in terms are matched literally."""
        assert _like_pattern("100%") == "%100\\%%"
        assert _like_pattern("snake_case") == "%snake\\_case%"


class TestScoring:
    """Tests for term-count scoring."""

    def test_score_per_term(self):
        """Test each matched term adds 0.2."""
        text = member_search_text("Alice", "mentor", "Senior React developer", ["TypeScript"])
        assert score_member_text(text, ["react", "developer"]) == pytest.approx(0.4)

    def test_score_ignores_missing_terms(self):
        """Test terms absent from the text add nothing."""
        text = member_search_text("Bob", "trainee", "Python", [])
        assert score_member_text(text, ["react", "python"]) == pytest.approx(0.2)

    def test_score_capped_at_one(self):
        """Test the score never exceeds 1.0."""
        text = "one two three four five six seven"
        terms = ["one", "two", "three", "four", "five", "six", "seven"]
        assert score_member_text(text, terms) == 1.0

    def test_skills_count_as_text(self):
        """Test skills are part of the scored text."""
        text = member_search_text("Carol", None, None, ["Flutter", "Dart"])
        assert score_member_text(text, ["flutter"]) == pytest.approx(0.2)


class TestHighlight:
    """Tests for snippet highlighting."""

    def test_first_term_marked(self):
        """Test the earliest matching term is wrapped in <mark>."""
        snippet = highlight_snippet("Senior React developer building dashboards", ["developer", "react"])
        assert snippet == "Senior <mark>React</mark> developer building dashboards"

    def test_no_match_returns_none(self):
        """Test None is returned when no term occurs."""
        assert highlight_snippet("Python and SQL", ["react"]) is None

    def test_empty_text_returns_none(self):
        """Test None is returned for a missing description."""
        assert highlight_snippet(None, ["react"]) is None

    def test_long_text_gets_ellipses(self):
        """Test context is cut around the term and marked with ellipses."""
        text = ("x" * 100) + " React " + ("y" * 100)
        snippet = highlight_snippet(text, ["react"], radius=10)
        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert "<mark>React</mark>" in snippet

    def test_description_html_escaped(self):
        """Test markup typed into a description is escaped; only <mark> is HTML."""
        snippet = highlight_snippet('<img src=x onerror="alert(1)"> React dev', ["react"])
        assert "<img" not in snippet
        assert snippet.startswith("&lt;img src=x onerror=&quot;alert(1)&quot;&gt;")
        assert snippet.endswith("<mark>React</mark> dev")

    def test_marked_term_escaped(self):
        """Test special characters inside the matched term are escaped too."""
        snippet = highlight_snippet("Knows C&C++ well", ["c&c++"])
        assert snippet == "Knows <mark>C&amp;C++</mark> well"

    def test_case_folding_changes_length(self):
        """Test characters that grow when lower-cased do not shift the mark."""
        snippet = highlight_snippet("\u0130\u0130 React developer", ["react"])
        assert snippet == "\u0130\u0130 <mark>React</mark> developer"


class TestSearchMembersByText:
    """Tests for the fallback search against a fake session."""

    def test_results_sorted_by_score(self, sample_members):
        """Test members are ranked by matched term count."""
        db = FakeSession(rows=sample_members)
        results = search_members_by_text(db, "React developer", limit=10)

        assert [r.name for r in results][:2] == ["Alice Brown", "Carol White"]
        assert results[0].similarity_score == pytest.approx(0.4)
        scores = [r.similarity_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_name_order(self, sample_members):
        """Test equal scores keep the database name order."""
        db = FakeSession(rows=sample_members)
        results = search_members_by_text(db, "zzz_nothing", limit=10)

        assert [r.name for r in results] == [m.name for m in sample_members]
        assert all(r.similarity_score == 0.0 for r in results)

    def test_limit_applied(self, sample_members):
        """Test the limit is passed to the query and respected."""
        db = FakeSession(rows=sample_members)
        results = search_members_by_text(db, "developer", limit=2)

        assert len(results) == 2
        assert db.queries[0].limit_value == 2

    def test_filter_applied_for_terms(self, sample_members):
        """Test a predicate is added when the query has usable terms."""
        db = FakeSession(rows=sample_members)
        search_members_by_text(db, "react", limit=5)
        assert len(db.queries[0].filters) == 1

    def test_no_filter_without_terms(self, sample_members):
        """Test no predicate is added when all terms are too short."""
        db = FakeSession(rows=sample_members)
        search_members_by_text(db, "ab cd", limit=5)
        assert db.queries[0].filters == []

    def test_team_included(self, sample_members):
        """Test the team name is carried into the result."""
        db = FakeSession(rows=sample_members[:1])
        result = search_members_by_text(db, "react", limit=5)[0]
        assert result.team.name == "Frontend"
        assert result.skills == ["React", "TypeScript"]

    def test_query_error_wrapped(self):
        """Test database failures surface as TextSearchError."""
        db = FakeSession(query_error=RuntimeError("connection lost"))
        with pytest.raises(TextSearchError) as exc_info:
            search_members_by_text(db, "react", limit=5)
        assert exc_info.value.stage == "text"
