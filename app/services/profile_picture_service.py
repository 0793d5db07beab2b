"""Profile picture upload: validate, store in the bucket, point the member at it.

The three steps (upload, public URL, row update) run in sequence without
rollback. If the URL lookup or the row update fails the uploaded file stays
in the bucket.
"""

import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from sqlalchemy.orm import Session

from app.core.constants import PROFILE_PICTURE_FOLDER, PROFILE_PICTURE_UPLOAD_TYPES
from app.core.exceptions import InvalidRequestError, NotFoundError
from app.core.logging import get_logger
from app.db.models import Member
from app.services.storage_service import BucketStorage
from app.settings import Settings, settings as default_settings

logger = get_logger("services.profile_picture")


@dataclass
class UploadedPicture:
    member_id: int
    path: str
    public_url: str


def validate_picture(
    content_type: Optional[str],
    size: int,
    max_bytes: Optional[int] = None,
) -> None:
    """Reject anything but jpeg/png images up to the size limit."""
    if max_bytes is None:
        max_bytes = default_settings.profile_picture_max_bytes
    if content_type not in PROFILE_PICTURE_UPLOAD_TYPES:
        raise InvalidRequestError(
            "Please select a valid image file (.jpg, .jpeg, or .png)"
        )
    if size > max_bytes:
        raise InvalidRequestError(
            f"File size must be less than {max_bytes // (1024 * 1024)}MB"
        )


def build_picture_path(member_id: int, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """``profiles/<member_id>-<epoch ms>.<ext>``"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    extension = PurePosixPath(filename or "").suffix.lstrip(".").lower() or "jpg"
    return f"{PROFILE_PICTURE_FOLDER}/{member_id}-{timestamp_ms}.{extension}"


class ProfilePictureService:
    """Uploads member profile pictures."""

    def __init__(
        self,
        db: Session,
        storage: BucketStorage,
        settings: Optional[Settings] = None,
    ):
        self._db = db
        self._storage = storage
        self._settings = settings or default_settings

    def upload(
        self,
        member_id: int,
        filename: str,
        content_type: str,
        data: bytes,
        timestamp_ms: Optional[int] = None,
    ) -> UploadedPicture:
        """Store the picture and save its public URL on the member.

        Raises:
            InvalidRequestError: Wrong type or too large
            NotFoundError: Member does not exist
            StorageError: Upload or URL lookup failed
        """
        validate_picture(content_type, len(data), self._settings.profile_picture_max_bytes)

        member = self._db.get(Member, member_id)
        if member is None:
            raise NotFoundError("Member", member_id)

        bucket = self._settings.profile_picture_bucket
        path = build_picture_path(member_id, filename, timestamp_ms)

        # "image/jpg" is not a registered type; the bucket only knows image/jpeg
        if content_type == "image/jpg":
            content_type = "image/jpeg"

        self._storage.upload(bucket, path, data, content_type=content_type, upsert=True)

        try:
            public_url = self._storage.get_public_url(bucket, path)
            member.profile_picture = public_url
            self._db.commit()
        except Exception:
            self._db.rollback()
            logger.warning(
                "Profile update failed after upload; orphaned object %s/%s", bucket, path
            )
            raise

        logger.info("Updated profile picture of member %d: %s", member_id, path)
        return UploadedPicture(member_id=member_id, path=path, public_url=public_url)
