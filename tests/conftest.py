"""Shared fakes: no test talks to PostgreSQL or OpenAI."""

from types import SimpleNamespace
from typing import List, Optional

import pytest

from app.core.exceptions import EmbeddingError

DIMENSION = 384


class FakeQuery:
    """Records the ORM query chain and returns canned rows."""

    def __init__(self, rows, error: Optional[Exception] = None):
        self._rows = list(rows)
        self._error = error
        self.filters = []
        self.order_by_args = []
        self.limit_value = None

    def options(self, *args):
        return self

    def filter(self, *criteria):
        self.filters.extend(criteria)
        return self

    def order_by(self, *args):
        self.order_by_args.extend(args)
        return self

    def limit(self, value):
        self.limit_value = value
        return self

    def all(self):
        if self._error is not None:
            raise self._error
        if self.limit_value is not None:
            return self._rows[: self.limit_value]
        return list(self._rows)

    def first(self):
        rows = self.all()
        return rows[0] if rows else None


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return list(self._rows)


class FakeSession:
    """Session stand-in with call counters."""

    def __init__(self, rows=None, query_error=None, execute_rows=None, execute_error=None):
        self.rows = rows or []
        self.query_error = query_error
        self.execute_rows = execute_rows or []
        self.execute_error = execute_error
        self.queries: List[FakeQuery] = []
        self.executed = []
        self.added = []
        self.objects = {}
        self.commits = 0
        self.rollbacks = 0
        self.fail_commit = False
        self.closed = False

    def query(self, *entities):
        query = FakeQuery(self.rows, self.query_error)
        self.queries.append(query)
        return query

    def execute(self, statement, params=None):
        self.executed.append((statement, params))
        if self.execute_error is not None:
            raise self.execute_error
        return FakeResult(self.execute_rows)

    def get(self, model, key):
        return self.objects.get(key)

    def add(self, obj):
        self.added.append(obj)

    def commit(self):
        if self.fail_commit:
            raise RuntimeError("commit failed")
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeEmbeddingService:
    def __init__(self, vector=None, error: Optional[Exception] = None):
        self.vector = vector if vector is not None else [0.1] * DIMENSION
        self.error = error
        self.calls = []

    def create_embedding(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.vector)


def make_member(
    id: int,
    name: str,
    role: str = "trainee",
    description: str = "",
    skills=None,
    team: Optional[str] = None,
    email: Optional[str] = None,
):
    return SimpleNamespace(
        id=id,
        name=name,
        email=email or f"{name.split()[0].lower()}@example.com",
        role=role,
        description=description,
        skills=skills or [],
        profile_picture=None,
        team=SimpleNamespace(name=team) if team else None,
    )


@pytest.fixture
def fake_embedding_service():
    return FakeEmbeddingService()


@pytest.fixture
def failing_embedding_service():
    return FakeEmbeddingService(error=EmbeddingError("Failed to generate embedding"))


@pytest.fixture
def sample_members():
    return [
        make_member(1, "Alice Brown", "mentor", "Senior React developer building dashboards",
                    ["React", "TypeScript"], team="Frontend"),
        make_member(2, "Bob Stone", "trainee", "Learning Python and SQL", ["Python"], team="Data"),
        make_member(3, "Carol White", "trainee", "Frontend developer, likes CSS", ["CSS", "React"]),
        make_member(4, "Dan Green", "trainee", "Mobile apps with Flutter", ["Dart"]),
    ]
