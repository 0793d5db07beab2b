"""Unit tests for the pgvector similarity query."""

import pytest

from app.ai.embedding_search import MATCH_MEMBERS_QUERY, find_matching_members
from app.core.exceptions import SimilarityQueryError
from tests.conftest import FakeSession


def _row(id, name, score, team=None, description=None, skills=None):
    return {
        "id": id,
        "name": name,
        "email": f"{name.lower()}@example.com",
        "role": "trainee",
        "description": description,
        "skills": skills,
        "profile_picture": None,
        "team": team,
        "match_score": score,
        "distance": 1 - score,
    }


class TestFindMatchingMembers:
    """Tests for find_matching_members."""

    def test_results_sorted_descending(self):
        """Test results come back ordered by similarity."""
        db = FakeSession(execute_rows=[
            _row(1, "Alice", 0.42),
            _row(2, "Bob", 0.87),
            _row(3, "Carol", 0.65),
        ])
        results = find_matching_members(db, [0.1] * 384, limit=10)

        assert [r.name for r in results] == ["Bob", "Carol", "Alice"]
        assert results[0].similarity_score == pytest.approx(0.87)

    def test_parameters_passed(self):
        """Test the vector, count and threshold reach the database function."""
        db = FakeSession()
        find_matching_members(db, [0.5, 0.25], limit=7, similarity_threshold=0.3)

        statement, params = db.executed[0]
        assert statement is MATCH_MEMBERS_QUERY
        assert params["query_embedding"] == "[0.5, 0.25]"
        assert params["match_count"] == 7
        assert params["similarity_threshold"] == 0.3

    def test_limit_enforced(self):
        """Test no more than limit rows are returned."""
        rows = [_row(i, f"M{i}", 0.9 - i * 0.01) for i in range(12)]
        db = FakeSession(execute_rows=rows)
        assert len(find_matching_members(db, [0.1], limit=5)) == 5

    def test_no_rows(self):
        """Test an empty match list is not an error."""
        assert find_matching_members(FakeSession(), [0.1], limit=5) == []

    def test_scores_clamped(self):
        """Test out-of-range scores are clamped into [0, 1]."""
        db = FakeSession(execute_rows=[_row(1, "Alice", 1.0000002), _row(2, "Bob", -0.1)])
        scores = [r.similarity_score for r in find_matching_members(db, [0.1], limit=5)]
        assert scores == [1.0, 0.0]

    def test_team_and_skills_mapped(self):
        """Test team name and skills are carried into the result."""
        db = FakeSession(execute_rows=[_row(1, "Alice", 0.5, team="Frontend", skills=["React"])])
        result = find_matching_members(db, [0.1], limit=5)[0]
        assert result.team.name == "Frontend"
        assert result.skills == ["React"]

    def test_missing_team(self):
        """Test members without a team get team None."""
        db = FakeSession(execute_rows=[_row(1, "Alice", 0.5)])
        assert find_matching_members(db, [0.1], limit=5)[0].team is None

    def test_database_error_wrapped(self):
        """Test database failures surface as SimilarityQueryError."""
        db = FakeSession(execute_error=RuntimeError("function match_members does not exist"))
        with pytest.raises(SimilarityQueryError) as exc_info:
            find_matching_members(db, [0.1], limit=5)
        assert exc_info.value.stage == "semantic"
        assert "match_members" in exc_info.value.message
