from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime,
    ForeignKey, ARRAY, Index
)
from sqlalchemy.orm import declarative_base, relationship
from pgvector.sqlalchemy import Vector

from app.core.constants import MEMBER_ROLE_TRAINEE
from app.settings import EMBEDDING_DIMENSION

Base = declarative_base()


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    profile_picture = Column(Text)

    members = relationship("Member", back_populates="team")


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50))
    internship_start = Column(Date)
    internship_end = Column(Date)
    team_id = Column(Integer, ForeignKey("teams.id"))
    role = Column(String(20), default=MEMBER_ROLE_TRAINEE)  # "trainee" | "mentor"
    username = Column(String(100))
    admin = Column(Boolean, default=False)
    mentor_id = Column(Integer, ForeignKey("members.id"))
    description = Column(Text)
    skills = Column(ARRAY(String))
    profile_picture = Column(Text)  # Public URL in the profile-pictures bucket
    # NULL until computed from the profile text, never a placeholder vector
    embedding = Column(Vector(EMBEDDING_DIMENSION))
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_members_team_id", "team_id"),
        Index("ix_members_name", "name"),
    )

    team = relationship("Team", back_populates="members")
    mentor = relationship("Member", remote_side=[id])
    standups = relationship("Standup", back_populates="member")
    leaves = relationship("Leave", back_populates="member")


class Standup(Base):
    __tablename__ = "standups"

    id = Column(Integer, primary_key=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id"))
    date = Column(Date, nullable=False)
    content = Column(ARRAY(Text))  # Tasks and blocker lines
    content_stat = Column(ARRAY(Boolean))  # Completion flags, parallel to content
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_standups_member_date", "member_id", "date"),
    )

    member = relationship("Member", back_populates="standups")
    team = relationship("Team")


class Leave(Base):
    __tablename__ = "leaves"

    id = Column(Integer, primary_key=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id"))
    date = Column(Date, nullable=False)
    reason = Column(Text)
    type = Column(String(20), default="other")  # "sick" | "personal" | "other"
    approved = Column(Boolean, default=False)

    __table_args__ = (
        Index("ix_leaves_member_approved", "member_id", "approved"),
    )

    member = relationship("Member", back_populates="leaves")
    team = relationship("Team")
