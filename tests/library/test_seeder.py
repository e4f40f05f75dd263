"""
Unit tests for the fixture seeder.
"""

import pytest
from bson import ObjectId
from unittest.mock import AsyncMock
from pymongo.errors import AutoReconnect

from library.seeder import FIXTURE_AUTHORS, FIXTURE_BOOKS, LibrarySeeder, seed_database


class TestLibrarySeeder:
    """Test cases for LibrarySeeder."""

    @pytest.mark.asyncio
    async def test_seed_inserts_fixtures(self, fake_database):
        result = await seed_database(fake_database)

        assert result.authors_inserted == 2
        assert result.books_inserted == 9
        assert result.authors_deleted == 0
        assert result.books_deleted == 0

        names = [doc["name"] for doc in fake_database["authors"].documents]
        assert names == ["J.R.R. Tolkien", "J.K. Rowling"]
        assert len(fake_database["books"].documents) == 9

    @pytest.mark.asyncio
    async def test_books_reference_inserted_authors(self, fake_database):
        result = await seed_database(fake_database)

        tolkien = ObjectId(result.author_ids["J.R.R. Tolkien"])
        rowling = ObjectId(result.author_ids["J.K. Rowling"])
        books = fake_database["books"].documents

        assert sum(1 for doc in books if doc["author"] == rowling) == 7
        tolkien_titles = sorted(doc["title"] for doc in books if doc["author"] == tolkien)
        assert tolkien_titles == ["The Hobbit", "The Lord of the Rings"]

    @pytest.mark.asyncio
    async def test_seed_clears_existing_documents(self, fake_database):
        fake_database["authors"].documents.append({"_id": ObjectId(), "name": "Stale"})
        fake_database["books"].documents.extend([
            {"_id": ObjectId(), "title": "Stale one"},
            {"_id": ObjectId(), "title": "Stale two"},
        ])

        result = await seed_database(fake_database)

        assert result.authors_deleted == 1
        assert result.books_deleted == 2
        assert "Stale" not in [doc["name"] for doc in fake_database["authors"].documents]
        assert len(fake_database["books"].documents) == 9

    @pytest.mark.asyncio
    async def test_reseed_generates_fresh_ids(self, fake_database):
        first = await seed_database(fake_database)
        second = await seed_database(fake_database)

        assert len(fake_database["authors"].documents) == 2
        assert len(fake_database["books"].documents) == 9
        assert second.authors_deleted == 2
        assert second.books_deleted == 9
        assert set(first.author_ids.values()).isdisjoint(second.author_ids.values())

    @pytest.mark.asyncio
    async def test_failure_propagates_without_rollback(self, fake_database):
        fake_database["authors"].documents.append({"_id": ObjectId(), "name": "Stale"})
        seeder = LibrarySeeder(fake_database)
        seeder.books_collection.insert_many = AsyncMock(side_effect=AutoReconnect("connection reset"))

        with pytest.raises(AutoReconnect):
            await seeder.seed()

        # Authors were cleared and reinserted, books never made it
        assert [doc["name"] for doc in fake_database["authors"].documents] == FIXTURE_AUTHORS
        assert fake_database["books"].documents == []

    def test_fixture_dataset_shape(self):
        assert len(FIXTURE_AUTHORS) == 2
        assert len(FIXTURE_BOOKS) == 9
        assert {author for _, author in FIXTURE_BOOKS} == set(FIXTURE_AUTHORS)
