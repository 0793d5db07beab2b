"""Member profiles: lookup, editing and embedding upkeep."""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.constants import MEMBER_ROLE_TRAINEE, MEMBER_ROLES
from app.core.exceptions import EmbeddingError, InvalidRequestError, NotFoundError
from app.core.logging import get_logger
from app.db.models import Member
from app.services.embedding_service import EmbeddingService, build_profile_text

logger = get_logger("services.member")

# Shortest profile text worth embedding
MIN_PROFILE_TEXT_LENGTH = 3


def normalize_skills(skills: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop empty entries and de-duplicate, keeping first occurrence order."""
    seen = set()
    result = []
    for skill in skills or []:
        cleaned = (skill or "").strip()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            result.append(cleaned)
    return result


class MemberService:
    """Reads and edits member profiles; keeps embeddings in step."""

    def __init__(self, db: Session, embedding_service: Optional[EmbeddingService] = None):
        self._db = db
        self._embedding_service = embedding_service

    def get_member(self, member_id: int) -> Member:
        member = (
            self._db.query(Member)
            .options(joinedload(Member.team))
            .filter(Member.id == member_id)
            .first()
        )
        if member is None:
            raise NotFoundError("Member", member_id)
        return member

    def list_members(self, team_id: Optional[int] = None) -> List[Member]:
        query = self._db.query(Member).options(joinedload(Member.team))
        if team_id is not None:
            query = query.filter(Member.team_id == team_id)
        return query.order_by(Member.name).all()

    def create_member(
        self,
        name: str,
        email: str,
        team_id: Optional[int] = None,
        role: str = MEMBER_ROLE_TRAINEE,
        description: Optional[str] = None,
        skills: Optional[Iterable[str]] = None,
        **fields,
    ) -> Member:
        if role not in MEMBER_ROLES:
            raise InvalidRequestError(f"Unknown role '{role}'")
        member = Member(
            name=name,
            email=email,
            team_id=team_id,
            role=role,
            description=description,
            skills=normalize_skills(skills),
            **fields,
        )
        self._db.add(member)
        self.refresh_embedding(member)
        self._db.commit()
        logger.info("Created member %s (ID: %s)", member.name, member.id)
        return member

    def update_description(self, member_id: int, description: str) -> Member:
        member = self.get_member(member_id)
        member.description = description
        self.refresh_embedding(member)
        self._db.commit()
        return member

    def update_skills(self, member_id: int, skills: Iterable[str]) -> Member:
        return self._set_skills(self.get_member(member_id), skills)

    def add_skill(self, member_id: int, skill: str) -> Member:
        member = self.get_member(member_id)
        return self._set_skills(member, list(member.skills or []) + [skill])

    def remove_skill(self, member_id: int, skill: str) -> Member:
        member = self.get_member(member_id)
        return self._set_skills(member, [s for s in (member.skills or []) if s != skill])

    def _set_skills(self, member: Member, skills: Iterable[str]) -> Member:
        member.skills = normalize_skills(skills)
        self.refresh_embedding(member)
        self._db.commit()
        return member

    def refresh_embedding(self, member: Member) -> bool:
        """Recompute the member's embedding from its profile text.

        The embedding is cleared when the text is too short or the model
        fails; the backfill script picks such members up later.

        Returns:
            True if a fresh embedding was stored
        """
        if self._embedding_service is None:
            member.embedding = None
            return False

        profile_text = build_profile_text(
            member.name, member.role, member.description, member.skills
        )
        if len(profile_text) < MIN_PROFILE_TEXT_LENGTH:
            member.embedding = None
            return False

        try:
            member.embedding = self._embedding_service.create_embedding(profile_text)
        except EmbeddingError as e:
            logger.warning("Embedding for member %s not updated: %s", member.name, e)
            member.embedding = None
            return False
        return True
