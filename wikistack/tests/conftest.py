"""
Test configuration for WikiStack unit tests.

Services and routes run against an in-memory collection that understands the
subset of the filter language they use, so no Postgres server is needed.
"""

import copy
import os
import tempfile
import uuid
from types import SimpleNamespace

import pytest

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="wikistack-logs-"))
os.environ.setdefault("REQUEST_LOGGING_ENABLED", "false")

from wikistack.database import InsertOneResult, db_instance  # noqa: E402
from wikistack.models.page import WikiPage  # noqa: E402
from wikistack.models.user import User  # noqa: E402


def _matches(doc, filt):
    for key, condition in (filt or {}).items():
        value = doc.get(key)
        if isinstance(condition, dict):
            for op, expected in condition.items():
                if op == "$ne" and value == expected:
                    return False
                if op == "$all" and not all(v in (value or []) for v in expected):
                    return False
                if op == "$overlap" and not any(v in (value or []) for v in expected):
                    return False
                if op == "$in" and value not in expected:
                    return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs
        self._sorts = []

    def sort(self, key, direction=1):
        self._sorts.append((key, direction))
        return self

    async def to_list(self, length):
        docs = list(self._docs)
        for key, direction in reversed(self._sorts):
            docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return docs if length is None else docs[:length]


class FakeCollection:
    """In-memory stand-in for PostgresCollection."""

    def __init__(self, name):
        self.name = name
        self.docs = []

    def seed(self, document):
        doc = copy.deepcopy(document)
        doc.setdefault("_id", str(uuid.uuid4()))
        self.docs.append(doc)
        return doc["_id"]

    def find(self, filt=None, limit=None):
        found = [copy.deepcopy(d) for d in self.docs if _matches(d, filt)]
        return FakeCursor(found if limit is None else found[:limit])

    async def find_one(self, filt=None):
        for doc in self.docs:
            if _matches(doc, filt):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, document):
        return InsertOneResult(inserted_id=self.seed(document))

    async def count_documents(self, filt=None):
        return len([d for d in self.docs if _matches(d, filt)])


@pytest.fixture
def fake_db(monkeypatch):
    """Mark the database connected and back it with in-memory collections."""
    collections = {"pages": FakeCollection("pages"), "users": FakeCollection("users")}
    monkeypatch.setattr(db_instance, "is_connected", True)
    monkeypatch.setattr(db_instance, "_wrapped_collections", collections)
    return SimpleNamespace(**collections)


@pytest.fixture
def offline_db(monkeypatch):
    monkeypatch.setattr(db_instance, "is_connected", False)
    monkeypatch.setattr(db_instance, "_wrapped_collections", {})


@pytest.fixture
def add_page(fake_db):
    """Store a page directly in the in-memory pages collection."""

    def _add(**fields):
        page = WikiPage(**fields)
        page.id = fake_db.pages.seed(page.to_document())
        return page

    return _add


@pytest.fixture
def add_user(fake_db):
    def _add(**fields):
        user = User(**fields)
        user.id = fake_db.users.seed(user.to_document())
        return user

    return _add


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from wikistack.server import app

    # Not used as a context manager, so startup never tries to reach Postgres
    return TestClient(app)
