"""SQL for the vector search objects that live inside PostgreSQL.

``match_members`` is the database function the similarity matcher calls.
It ranks members by cosine distance (``<=>``) and reports
``match_score = 1 - distance``.
"""

from typing import List

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.settings import EMBEDDING_DIMENSION

logger = get_logger("db.functions")

ENABLE_VECTOR_EXTENSION_SQL = "CREATE EXTENSION IF NOT EXISTS vector"

EMBEDDING_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS members_embedding_idx ON members
USING ivfflat (embedding vector_cosine_ops)
WITH (lists = 100)
"""

MATCH_MEMBERS_SQL = """
CREATE OR REPLACE FUNCTION match_members(
  query_embedding vector({dimension}),
  match_count int DEFAULT 10,
  similarity_threshold float DEFAULT 0.1
)
RETURNS TABLE (
  id int,
  name text,
  email text,
  role text,
  description text,
  skills text[],
  profile_picture text,
  team text,
  match_score float,
  distance float
)
LANGUAGE plpgsql
AS $$
BEGIN
  RETURN QUERY
  SELECT
    m.id,
    m.name::text,
    m.email::text,
    m.role::text,
    m.description,
    m.skills::text[],
    m.profile_picture,
    t.name::text AS team,
    1 - (m.embedding <=> query_embedding) AS match_score,
    m.embedding <=> query_embedding AS distance
  FROM members m
  LEFT JOIN teams t ON m.team_id = t.id
  WHERE m.embedding IS NOT NULL
    AND 1 - (m.embedding <=> query_embedding) >= similarity_threshold
  ORDER BY m.embedding <=> query_embedding
  LIMIT match_count;
END;
$$
"""


def search_function_statements(dimension: int = EMBEDDING_DIMENSION) -> List[str]:
    """Statements installing the vector search objects, in execution order."""
    return [
        ENABLE_VECTOR_EXTENSION_SQL,
        EMBEDDING_INDEX_SQL,
        MATCH_MEMBERS_SQL.format(dimension=dimension),
    ]


def install_search_functions(db: Session, dimension: int = EMBEDDING_DIMENSION) -> None:
    """Create the embedding index and the match_members function.

    Expects the members table to exist.

    Raises:
        DatabaseError: If a statement fails (the session is rolled back)
    """
    try:
        for statement in search_function_statements(dimension):
            db.execute(text(statement))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise DatabaseError(
            f"Installing search functions failed: {e}",
            operation="install_search_functions",
            table="members",
        ) from e
    logger.info("Installed match_members (vector(%d)) and embedding index", dimension)
