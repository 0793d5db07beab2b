"""Filesystem-backed object storage with public buckets.

Layout under ``root``::

    <bucket>/.bucket.json     bucket policy (public, size limit, MIME allowlist)
    <bucket>/<object path>    object bytes
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional

from app.core.exceptions import StorageError
from app.core.logging import get_logger
from app.settings import Settings, settings as default_settings

logger = get_logger("services.storage")

BUCKET_META_FILE = ".bucket.json"


@dataclass
class Bucket:
    """Bucket policy."""
    name: str
    public: bool = False
    file_size_limit: Optional[int] = None
    allowed_mime_types: List[str] = field(default_factory=list)


class BucketStorage:
    """Object storage rooted at a local directory."""

    def __init__(self, root: Path, public_url: str):
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "BucketStorage":
        settings = settings or default_settings
        return cls(root=settings.storage_root, public_url=settings.storage_public_url)

    # --- Buckets ---

    def list_buckets(self) -> List[Bucket]:
        if not self.root.exists():
            return []
        buckets = []
        for meta_path in sorted(self.root.glob(f"*/{BUCKET_META_FILE}")):
            buckets.append(self._read_bucket(meta_path))
        return buckets

    def get_bucket(self, name: str) -> Optional[Bucket]:
        meta_path = self.root / name / BUCKET_META_FILE
        if not meta_path.exists():
            return None
        return self._read_bucket(meta_path)

    def create_bucket(
        self,
        name: str,
        public: bool = False,
        file_size_limit: Optional[int] = None,
        allowed_mime_types: Optional[List[str]] = None,
    ) -> Bucket:
        """Create a bucket; raises StorageError if it already exists."""
        self._check_name(name)
        if self.get_bucket(name) is not None:
            raise StorageError(f"Bucket '{name}' already exists", bucket=name)

        bucket = Bucket(
            name=name,
            public=public,
            file_size_limit=file_size_limit,
            allowed_mime_types=list(allowed_mime_types or []),
        )
        bucket_dir = self.root / name
        try:
            bucket_dir.mkdir(parents=True, exist_ok=True)
            (bucket_dir / BUCKET_META_FILE).write_text(
                json.dumps(asdict(bucket), indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise StorageError(f"Failed to create bucket '{name}': {e}", bucket=name) from e

        logger.info("Created bucket %s (public=%s)", name, public)
        return bucket

    # --- Objects ---

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> str:
        """Store ``data`` at ``path`` inside ``bucket``.

        Enforces the bucket's size limit and MIME allowlist.

        Returns:
            The object path
        """
        policy = self._require_bucket(bucket)
        target = self._object_path(bucket, path)

        if policy.file_size_limit is not None and len(data) > policy.file_size_limit:
            raise StorageError(
                f"Object exceeds the bucket size limit of {policy.file_size_limit} bytes",
                bucket=bucket,
                path=path,
            )
        if policy.allowed_mime_types and content_type not in policy.allowed_mime_types:
            raise StorageError(
                f"MIME type {content_type} is not allowed in bucket '{bucket}'",
                bucket=bucket,
                path=path,
            )
        if target.exists() and not upsert:
            raise StorageError("Object already exists", bucket=bucket, path=path)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Upload failed: {e}", bucket=bucket, path=path) from e

        logger.debug("Uploaded %s/%s (%d bytes)", bucket, path, len(data))
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        policy = self._require_bucket(bucket)
        if not policy.public:
            raise StorageError(f"Bucket '{bucket}' is not public", bucket=bucket, path=path)
        self._object_path(bucket, path)
        return f"{self.public_url}/{bucket}/{path}"

    def open_public_object(self, bucket: str, path: str) -> Path:
        """Filesystem path of an object in a public bucket, for serving."""
        policy = self.get_bucket(bucket)
        if policy is None or not policy.public:
            raise StorageError("Object not found", bucket=bucket, path=path)
        target = self._object_path(bucket, path)
        if not target.is_file():
            raise StorageError("Object not found", bucket=bucket, path=path)
        return target

    def remove(self, bucket: str, paths: List[str]) -> List[str]:
        """Delete objects; returns the paths that existed and were removed."""
        self._require_bucket(bucket)
        removed = []
        for path in paths:
            target = self._object_path(bucket, path)
            if target.is_file():
                try:
                    target.unlink()
                except OSError as e:
                    raise StorageError(f"Remove failed: {e}", bucket=bucket, path=path) from e
                removed.append(path)
        return removed

    # --- Helpers ---

    def _require_bucket(self, name: str) -> Bucket:
        policy = self.get_bucket(name)
        if policy is None:
            raise StorageError(f"Bucket '{name}' not found", bucket=name)
        return policy

    def _object_path(self, bucket: str, path: str) -> Path:
        relative = PurePosixPath(path)
        if (
            not path
            or relative.is_absolute()
            or ".." in relative.parts
            or relative.name == BUCKET_META_FILE
        ):
            raise StorageError("Invalid object path", bucket=bucket, path=path)
        return self.root / bucket / Path(*relative.parts)

    @staticmethod
    def _check_name(name: str) -> None:
        if not name or "/" in name or name.startswith("."):
            raise StorageError(f"Invalid bucket name '{name}'", bucket=name)

    @staticmethod
    def _read_bucket(meta_path: Path) -> Bucket:
        try:
            data = json.loads(meta_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(
                f"Unreadable bucket policy: {e}", bucket=meta_path.parent.name
            ) from e
        return Bucket(
            name=data.get("name", meta_path.parent.name),
            public=bool(data.get("public", False)),
            file_size_limit=data.get("file_size_limit"),
            allowed_mime_types=list(data.get("allowed_mime_types") or []),
        )
