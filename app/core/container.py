"""Dependency injection container.

Holds the process-wide clients (OpenAI, bucket storage) and builds the
per-session services on top of them.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from openai import OpenAI
from sqlalchemy.orm import Session

from app.ai.search import SemanticSearchService
from app.core.logging import get_logger
from app.db.session import SessionLocal, get_session
from app.services.embedding_service import EmbeddingService
from app.services.member_service import MemberService
from app.services.profile_picture_service import ProfilePictureService
from app.services.storage_service import BucketStorage
from app.settings import Settings, settings as default_settings

logger = get_logger("core.container")


@dataclass
class ApplicationContainer:
    """Lazily created clients plus factories for session-bound services.

    Nothing talks to OpenAI, the database or the storage root until a
    caller asks for it.
    """

    settings: Settings = field(default_factory=lambda: default_settings)
    _openai_client: Optional[OpenAI] = field(default=None, repr=False)
    _embedding_service: Optional[EmbeddingService] = field(default=None, repr=False)
    _storage: Optional[BucketStorage] = field(default=None, repr=False)

    @classmethod
    def create(cls, settings: Optional[Settings] = None) -> "ApplicationContainer":
        container = cls(settings=settings or default_settings)
        logger.debug("Created ApplicationContainer (embedding model %s)",
                     container.settings.embedding_model)
        return container

    # --- Shared clients ---

    @property
    def openai_client(self) -> OpenAI:
        if self._openai_client is None:
            self._openai_client = OpenAI(api_key=self.settings.openai_api_key)
        return self._openai_client

    @property
    def embedding_service(self) -> EmbeddingService:
        if self._embedding_service is None:
            self._embedding_service = EmbeddingService(
                openai_client=self.openai_client,
                settings=self.settings,
            )
        return self._embedding_service

    @property
    def storage(self) -> BucketStorage:
        if self._storage is None:
            self._storage = BucketStorage.from_settings(self.settings)
        return self._storage

    # --- Sessions ---

    def get_db_session(self) -> Session:
        """New session; the caller closes it."""
        return SessionLocal()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on error."""
        with get_session() as session:
            yield session

    # --- Session-bound services ---

    def member_service(self, db: Session) -> MemberService:
        return MemberService(db, embedding_service=self.embedding_service)

    def search_service(self, db: Session) -> SemanticSearchService:
        return SemanticSearchService(
            db=db,
            embedding_service=self.embedding_service,
            settings=self.settings,
        )

    def profile_picture_service(self, db: Session) -> ProfilePictureService:
        return ProfilePictureService(db, storage=self.storage, settings=self.settings)


_container: Optional[ApplicationContainer] = None


def get_container() -> ApplicationContainer:
    """Get or create the process-wide container."""
    global _container
    if _container is None:
        _container = ApplicationContainer.create()
    return _container


def reset_container() -> None:
    """Drop the process-wide container; the next get_container() builds a new one."""
    global _container
    _container = None
