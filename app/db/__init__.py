from app.db.models import Base, Team, Member, Standup, Leave
from app.db.session import engine, SessionLocal, get_session

__all__ = [
    "Base",
    "Team",
    "Member",
    "Standup",
    "Leave",
    "engine",
    "SessionLocal",
    "get_session",
]
