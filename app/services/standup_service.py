"""Standup history of a member, parsed into tasks and blockers."""

import calendar
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session, joinedload

from app.core.constants import BLOCKER_MARKERS, RECENT_STANDUPS_LIMIT
from app.db.models import Standup

BLOCKER_PREFIX = re.compile(r"^blockers?:\s*", re.IGNORECASE)


@dataclass
class StandupTask:
    id: str
    text: str
    completed: bool = False


@dataclass
class StandupView:
    """A standup as displayed: tasks with completion plus one blocker text."""
    id: int
    member_id: int
    member_name: str
    date: date
    tasks: List[StandupTask] = field(default_factory=list)
    blockers: str = ""
    timestamp: Optional[datetime] = None


def parse_standup_content(
    standup_id: int,
    content: Optional[Sequence[str]],
    content_stat: Optional[Sequence[bool]],
) -> Tuple[List[StandupTask], str]:
    """Split standup lines into tasks and a blocker text.

    Lines mentioning "blocker" or "challenge" are blockers (the last one
    wins, "Blocker(s):" prefix stripped); everything else is a task whose
    completion flag comes from the parallel ``content_stat`` list.
    """
    content = content or []
    content_stat = content_stat or []
    tasks = []
    blockers = ""

    for index, item in enumerate(content):
        lowered = item.lower()
        if any(marker in lowered for marker in BLOCKER_MARKERS):
            blockers = BLOCKER_PREFIX.sub("", item.strip()).strip()
        else:
            completed = bool(content_stat[index]) if index < len(content_stat) else False
            tasks.append(
                StandupTask(id=f"task-{standup_id}-{index}", text=item.strip(), completed=completed)
            )
    return tasks, blockers


def to_standup_view(standup: Standup, member_name: Optional[str] = None) -> StandupView:
    tasks, blockers = parse_standup_content(standup.id, standup.content, standup.content_stat)
    name = standup.member.name if standup.member is not None else member_name
    return StandupView(
        id=standup.id,
        member_id=standup.member_id,
        member_name=name or "Unknown Member",
        date=standup.date,
        tasks=tasks,
        blockers=blockers,
        timestamp=standup.created_at,
    )


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def get_recent_standups(
    db: Session,
    member_id: int,
    limit: int = RECENT_STANDUPS_LIMIT,
) -> List[StandupView]:
    """Latest standups of a member, newest first."""
    standups = (
        db.query(Standup)
        .options(joinedload(Standup.member))
        .filter(Standup.member_id == member_id)
        .order_by(Standup.date.desc())
        .limit(limit)
        .all()
    )
    return [to_standup_view(s) for s in standups]


def get_standups_for_month(
    db: Session,
    member_id: int,
    year: int,
    month: int,
) -> List[StandupView]:
    """Standups of a member within one calendar month, newest first."""
    start, end = month_bounds(year, month)
    standups = (
        db.query(Standup)
        .options(joinedload(Standup.member))
        .filter(
            Standup.member_id == member_id,
            Standup.date >= start,
            Standup.date <= end,
        )
        .order_by(Standup.date.desc())
        .all()
    )
    return [to_standup_view(s) for s in standups]
