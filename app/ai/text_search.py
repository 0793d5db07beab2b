"""Text fallback search over member profiles (ILIKE substring matching)."""

import html
import re
from typing import Iterable, List, Optional

from sqlalchemy import String, func, or_
from sqlalchemy.orm import Session, joinedload

from app.ai.schemas import SearchResult, TeamRef, clamp_score
from app.core.constants import MIN_TERM_LENGTH
from app.core.exceptions import TextSearchError
from app.core.logging import get_logger
from app.db.models import Member

logger = get_logger("ai.text_search")

# Score contributed by each matched term
TERM_MATCH_WEIGHT = 0.2

# Characters of context kept on each side of a highlighted term
SNIPPET_RADIUS = 60


def build_search_terms(query: str) -> List[str]:
    """Lower-case the query and keep whitespace-separated terms longer than 2 chars."""
    return [term for term in query.lower().split() if len(term) > MIN_TERM_LENGTH]


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_text_predicate(terms: List[str]):
    """OR of case-insensitive substring matches on name/role/description/skills.

    Returns None when there are no terms.
    """
    if not terms:
        return None

    skills_text = func.array_to_string(Member.skills, " ", type_=String)
    conditions = []
    for term in terms:
        pattern = _like_pattern(term)
        conditions.extend([
            Member.name.ilike(pattern, escape="\\"),
            Member.role.ilike(pattern, escape="\\"),
            Member.description.ilike(pattern, escape="\\"),
            skills_text.ilike(pattern, escape="\\"),
        ])
    return or_(*conditions)


def member_search_text(
    name: Optional[str],
    role: Optional[str],
    description: Optional[str],
    skills: Optional[Iterable[str]],
) -> str:
    """Lower-cased text the fallback score is computed on."""
    parts = [name or "", role or "", description or ""]
    parts.extend(skills or [])
    return " ".join(parts).lower()


def score_member_text(
    member_text: str,
    terms: List[str],
    weight: float = TERM_MATCH_WEIGHT,
) -> float:
    """Score = weight per term found in the text, capped at 1.0."""
    hits = sum(1 for term in terms if term in member_text)
    return min(round(hits * weight, 4), 1.0)


def highlight_snippet(
    text: Optional[str],
    terms: List[str],
    radius: int = SNIPPET_RADIUS,
) -> Optional[str]:
    """HTML snippet of ``text`` around the first term it contains, term in <mark>.

    The text itself is HTML-escaped; <mark> is the only markup.

    Returns None when no term occurs.
    """
    if not text or not terms:
        return None

    # Matched on the original text: lower-casing can change string length
    matches = [re.search(re.escape(term), text, re.IGNORECASE) for term in terms]
    matches = [m for m in matches if m is not None]
    if not matches:
        return None

    first = min(matches, key=lambda m: (m.start(), m.end()))
    pos, end = first.start(), first.end()
    start_cut = max(0, pos - radius)
    end_cut = min(len(text), end + radius)

    snippet = (
        f"{html.escape(text[start_cut:pos])}<mark>{html.escape(text[pos:end])}</mark>"
        f"{html.escape(text[end:end_cut])}"
    )
    snippet = re.sub(r"\s+", " ", snippet).strip()
    if start_cut > 0:
        snippet = f"...{snippet}"
    if end_cut < len(text):
        snippet = f"{snippet}..."
    return snippet


def search_members_by_text(
    db: Session,
    query: str,
    limit: int = 10,
    weight: float = TERM_MATCH_WEIGHT,
) -> List[SearchResult]:
    """Fallback search: substring predicate in SQL, term-count score in Python.

    Args:
        db: Database session
        query: Raw query string
        limit: Maximum number of members to fetch
        weight: Score per matched term

    Returns:
        SearchResults sorted by descending score (name order breaks ties)

    Raises:
        TextSearchError: If the database query fails
    """
    terms = build_search_terms(query)
    logger.info("Performing fallback text search for '%s' (%d terms)", query, len(terms))

    try:
        member_query = db.query(Member).options(joinedload(Member.team))
        predicate = build_text_predicate(terms)
        if predicate is not None:
            member_query = member_query.filter(predicate)
        members = member_query.order_by(Member.name).limit(limit).all()
    except Exception as e:
        logger.error("Text search failed: %s", e)
        raise TextSearchError(f"Text search failed: {e}") from e

    results = []
    for member in members[:limit]:
        member_text = member_search_text(
            member.name, member.role, member.description, member.skills
        )
        results.append(
            SearchResult(
                id=member.id,
                name=member.name,
                email=member.email,
                role=member.role,
                description=member.description,
                skills=list(member.skills or []),
                profile_picture=member.profile_picture,
                team=TeamRef(name=member.team.name) if member.team else None,
                similarity_score=clamp_score(score_member_text(member_text, terms, weight)),
            )
        )

    results.sort(key=lambda r: r.similarity_score, reverse=True)

    logger.info("Found %d text matches", len(results))
    return results
