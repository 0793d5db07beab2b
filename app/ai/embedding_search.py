"""Embedding-based member search using pgvector."""

from typing import List, Sequence

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.ai.schemas import SearchResult, TeamRef, clamp_score
from app.core.exceptions import SimilarityQueryError
from app.core.logging import get_logger

logger = get_logger("ai.embedding_search")

# Default minimum cosine similarity for a match
DEFAULT_SIMILARITY_THRESHOLD = 0.1

MATCH_MEMBERS_QUERY = text(
    """
    SELECT id, name, email, role, description, skills, profile_picture,
           team, match_score, distance
    FROM match_members(
        CAST(:query_embedding AS vector),
        :match_count,
        :similarity_threshold
    )
    """
)


def find_matching_members(
    db: Session,
    query_embedding: Sequence[float],
    limit: int = 10,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> List[SearchResult]:
    """Find members whose profile embedding is close to the query.

    Calls the ``match_members`` database function, which ranks by cosine
    distance and drops rows below the threshold.

    Args:
        db: Database session
        query_embedding: Query vector
        limit: Maximum number of members to return
        similarity_threshold: Minimum cosine similarity

    Returns:
        SearchResults sorted by descending similarity

    Raises:
        SimilarityQueryError: If the database call fails
    """
    try:
        rows = db.execute(
            MATCH_MEMBERS_QUERY,
            {
                "query_embedding": str(list(query_embedding)),
                "match_count": limit,
                "similarity_threshold": similarity_threshold,
            },
        ).mappings().all()
    except Exception as e:
        logger.error("Vector search error: %s", e)
        raise SimilarityQueryError(f"Vector search failed: {e}") from e

    if not rows:
        logger.info("No semantic matches found")
        return []

    results = [_row_to_result(row) for row in rows[:limit]]

    # Stable sort keeps the distance order of the database for ties
    results.sort(key=lambda r: r.similarity_score, reverse=True)

    logger.debug("Found %d semantic matches", len(results))
    return results


def _row_to_result(row) -> SearchResult:
    team_name = row.get("team")
    return SearchResult(
        id=row["id"],
        name=row["name"],
        email=row.get("email"),
        role=row.get("role"),
        description=row.get("description"),
        skills=list(row.get("skills") or []),
        profile_picture=row.get("profile_picture"),
        team=TeamRef(name=team_name) if team_name else None,
        similarity_score=clamp_score(row.get("match_score")),
    )
