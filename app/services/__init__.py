"""Service layer - business logic encapsulation."""

from app.services.embedding_service import EmbeddingService
from app.services.member_service import MemberService
from app.services.profile_picture_service import ProfilePictureService
from app.services.storage_service import BucketStorage

__all__ = [
    "EmbeddingService",
    "MemberService",
    "ProfilePictureService",
    "BucketStorage",
]
