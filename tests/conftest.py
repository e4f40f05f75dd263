"""
Pytest configuration and shared fixtures.
"""

import asyncio
import copy

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.results import DeleteResult, InsertManyResult, InsertOneResult

from api.main import create_app
from library.database import ConnectionState, MongoConnection
from library.seeder import seed_database


def _matches(document, query):
    for key, condition in (query or {}).items():
        value = document.get(key)
        if isinstance(condition, dict) and "$in" in condition:
            if value not in condition["$in"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    """Cursor over an in-memory result set."""

    def __init__(self, documents):
        self.documents = documents

    async def to_list(self, length=None):
        if length is None:
            return list(self.documents)
        return list(self.documents[:length])


class FakeCollection:
    """In-memory stand-in for the motor collection calls the project makes."""

    def __init__(self, name):
        self.name = name
        self.documents = []

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(doc) for doc in self.documents if _matches(doc, query)])

    async def find_one(self, query=None):
        for doc in self.documents:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], acknowledged=True)

    async def insert_many(self, documents):
        inserted_ids = []
        for document in documents:
            result = await self.insert_one(document)
            inserted_ids.append(result.inserted_id)
        return InsertManyResult(inserted_ids, acknowledged=True)

    async def delete_many(self, query):
        kept = [doc for doc in self.documents if not _matches(doc, query)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return DeleteResult({"n": deleted, "ok": 1.0}, acknowledged=True)


class FakeDatabase:
    """In-memory database handing out FakeCollection instances by name."""

    def __init__(self, name="books"):
        self.name = name
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


@pytest.fixture
def fake_database():
    """Create an empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def connection(fake_database):
    """Create a connected store handle backed by the in-memory database."""
    handle = MongoConnection("mongodb://localhost/books", "books")
    handle.database = fake_database
    handle._set_state(ConnectionState.CONNECTED)
    return handle


@pytest.fixture
def app(connection):
    """Create the application around the test connection handle."""
    return create_app(connection)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def seed_result(fake_database):
    """Seed the in-memory database with the fixture dataset."""
    return asyncio.run(seed_database(fake_database))
