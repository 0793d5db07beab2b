"""Database queries for the Streamlit UI."""

from datetime import date
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models import Leave, Member, Standup, Team
from app.db.session import SessionLocal


def get_session() -> Session:
    """Get a database session."""
    return SessionLocal()


# --- Dashboard Statistics ---


def get_overview_stats(session: Session) -> dict:
    """Counts for the dashboard.

    Returns:
        Dict with teams, members, members_without_embedding, standups_today,
        leaves_today
    """
    today = date.today()
    return {
        "teams": session.query(func.count(Team.id)).scalar() or 0,
        "members": session.query(func.count(Member.id)).scalar() or 0,
        "members_without_embedding": (
            session.query(func.count(Member.id))
            .filter(Member.embedding.is_(None))
            .scalar()
        ) or 0,
        "standups_today": (
            session.query(func.count(Standup.id))
            .filter(Standup.date == today)
            .scalar()
        ) or 0,
        "leaves_today": (
            session.query(func.count(Leave.id))
            .filter(Leave.date == today, Leave.approved.is_(True))
            .scalar()
        ) or 0,
    }


def get_team_sizes(session: Session) -> List[dict]:
    """Member count per team, largest first."""
    rows = (
        session.query(Team.name, func.count(Member.id))
        .outerjoin(Member, Member.team_id == Team.id)
        .group_by(Team.id, Team.name)
        .order_by(func.count(Member.id).desc(), Team.name)
        .all()
    )
    return [{"team": name, "members": count} for name, count in rows]


# --- Teams & Members ---


def get_teams(session: Session) -> List[Team]:
    return session.query(Team).order_by(Team.name).all()

