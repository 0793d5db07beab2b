"""
Database initialization script.

Enables pgvector, creates all tables and installs the match_members
search function with its embedding index.
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect, text

from app.core.exceptions import DatabaseError
from app.db.functions import ENABLE_VECTOR_EXTENSION_SQL, install_search_functions
from app.db.models import Base
from app.db.session import SessionLocal, engine
from app.settings import settings


def init_database():
    """Create the vector extension and all tables."""
    print("Enabling vector extension...")
    with engine.begin() as conn:
        conn.execute(text(ENABLE_VECTOR_EXTENSION_SQL))
    print("Creating database tables...")
    Base.metadata.create_all(engine)
    print("Tables created successfully.")


def install_functions():
    """Install match_members and the ivfflat index."""
    db = SessionLocal()
    try:
        install_search_functions(db, dimension=settings.embedding_dimension)
        print(f"Installed match_members (vector({settings.embedding_dimension})).")
        return True
    except DatabaseError as e:
        print(f"Error installing search functions: {e.message}")
        return False
    finally:
        db.close()


def list_tables():
    """List all tables in the database."""
    inspector = inspect(engine)
    tables = inspector.get_table_names()
    print("\nDatabase tables:")
    for table in sorted(tables):
        print(f"  - {table}")
    return tables


if __name__ == "__main__":
    init_database()

    tables = list_tables()
    required = ["teams", "members", "standups", "leaves"]
    missing = [t for t in required if t not in tables]
    if missing:
        print(f"\nWarning: Missing tables: {missing}")
        sys.exit(1)

    print()
    if install_functions():
        print("\nDatabase is ready.")
    else:
        print("\nSearch function setup failed. Check your database connection.")
        sys.exit(1)
