#!/usr/bin/env python
"""
Profile picture storage setup and diagnostics.

Usage:
    python scripts/setup_storage.py

Checks:
- members.profile_picture column exists
- profile-pictures bucket exists (created public, 5MB, image MIME allowlist)
- a test object can be uploaded and removed again
"""
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text

from app.core.constants import SEPARATOR_LINE
from app.core.exceptions import StorageError
from app.db.session import SessionLocal
from app.services.storage_service import BucketStorage
from app.settings import settings


def check_column_exists(db, table: str, column: str) -> bool:
    """Check if a column exists in a table."""
    result = db.execute(text("""
        SELECT column_name
        FROM information_schema.columns
        WHERE table_name = :table AND column_name = :column
    """), {"table": table, "column": column})
    return result.fetchone() is not None


def check_database_setup() -> bool:
    print("Checking database setup...")
    db = SessionLocal()
    try:
        if check_column_exists(db, "members", "profile_picture"):
            print("  profile_picture column exists")
            return True
        print("  profile_picture column not found in members table")
        print("  Run: ALTER TABLE members ADD COLUMN profile_picture TEXT;")
        return False
    except Exception as e:
        print(f"  Database error: {e}")
        return False
    finally:
        db.close()


def ensure_bucket(storage: BucketStorage) -> bool:
    name = settings.profile_picture_bucket
    print("Checking storage setup...")
    print(f"  Available buckets: {[b.name for b in storage.list_buckets()]}")

    bucket = storage.get_bucket(name)
    if bucket is not None:
        print(f"  {name} bucket exists (public={bucket.public})")
        return True

    print(f"  {name} bucket not found, creating...")
    try:
        storage.create_bucket(
            name,
            public=True,
            file_size_limit=settings.profile_picture_max_bytes,
            allowed_mime_types=settings.profile_picture_mime_types,
        )
    except StorageError as e:
        print(f"  Failed to create bucket: {e.message}")
        return False
    print("  Bucket created successfully")
    return True


def check_upload(storage: BucketStorage) -> bool:
    name = settings.profile_picture_bucket
    test_path = f"test/test-{int(time.time() * 1000)}.png"
    print("Testing upload permissions...")
    try:
        storage.upload(name, test_path, b"test", content_type="image/png", upsert=True)
    except StorageError as e:
        print(f"  Upload test failed: {e.message}")
        return False
    print("  Upload test successful")

    storage.remove(name, [test_path])
    print("  Test file cleaned up")
    return True


def main():
    print(SEPARATOR_LINE)
    print("PROFILE PICTURE SETUP")
    print(SEPARATOR_LINE)

    storage = BucketStorage.from_settings(settings)
    ok = check_database_setup()
    print()
    ok = ensure_bucket(storage) and check_upload(storage) and ok

    print()
    print("Diagnostics complete!" if ok else "Setup incomplete, see messages above.")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
