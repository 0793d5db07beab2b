"""Compute profile embeddings for members that have none."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.container import get_container
from app.db.models import Member


def backfill_embeddings() -> int:
    """Embed every member with a NULL embedding; returns the number of failures."""
    container = get_container()
    db = container.get_db_session()
    failures = 0
    try:
        members = db.query(Member).filter(Member.embedding.is_(None)).order_by(Member.id).all()
        print(f"Found {len(members)} members without embedding")

        service = container.member_service(db)
        for member in members:
            print(f"  Generating embedding for {member.name}...")
            if service.refresh_embedding(member):
                db.commit()
                print(f"    Saved: {member.name} (ID: {member.id})")
            else:
                failures += 1
                print(f"    Skipped: {member.name} (no usable profile text or model error)")

        remaining = db.query(Member).filter(Member.embedding.is_(None)).count()
        print(f"\nMembers still without embedding: {remaining}")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()
    return failures


if __name__ == "__main__":
    sys.exit(0 if backfill_embeddings() == 0 else 1)
