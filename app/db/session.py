"""Database engine and session scope.

One pooled engine per process; callers open short-lived sessions through
``get_session`` (API requests, scripts) or ``SessionLocal`` (Streamlit pages).
"""

from contextlib import contextmanager
from typing import Callable, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from app.settings import settings

engine = create_engine(
    settings.database_url,
    poolclass=QueuePool,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_pool_max_overflow,
    pool_pre_ping=True,
    pool_recycle=3600,
    echo=False,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_session(
    session_factory: Optional[Callable[[], Session]] = None,
) -> Generator[Session, None, None]:
    """Session scope: commit on success, rollback on error, close always.

    Usage:
        with get_session() as session:
            member = session.get(Member, 1)

    Args:
        session_factory: Optional factory (defaults to SessionLocal)

    Yields:
        Database session
    """
    session = (session_factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
