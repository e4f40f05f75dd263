"""
Fixture seeding for the library collections.

Clears both collections and inserts a fixed set of authors and books. The
steps run in order without a transaction: if one fails the error propagates
and the store may be left half-seeded.
"""

import time
from typing import Dict, List, Tuple

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from .models import (
    AUTHORS_COLLECTION, BOOKS_COLLECTION,
    AuthorDocument, BookDocument, SeedResult
)

logger = structlog.get_logger(__name__)


FIXTURE_AUTHORS: List[str] = [
    "J.R.R. Tolkien",
    "J.K. Rowling",
]

# (title, author name)
FIXTURE_BOOKS: List[Tuple[str, str]] = [
    ("Harry Potter and the Philosopher's Stone", "J.K. Rowling"),
    ("Harry Potter and the Chamber of Secrets", "J.K. Rowling"),
    ("Harry Potter and the Prisoner of Azkaban", "J.K. Rowling"),
    ("Harry Potter and the Goblet of Fire", "J.K. Rowling"),
    ("Harry Potter and the Order of the Phoenix", "J.K. Rowling"),
    ("Harry Potter and the Half-Blood Prince", "J.K. Rowling"),
    ("Harry Potter and the Deathly Hallows", "J.K. Rowling"),
    ("The Lord of the Rings", "J.R.R. Tolkien"),
    ("The Hobbit", "J.R.R. Tolkien"),
]


class LibrarySeeder:
    """Resets the authors and books collections to the fixture dataset."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database
        self.authors_collection = database[AUTHORS_COLLECTION]
        self.books_collection = database[BOOKS_COLLECTION]

    async def seed(self) -> SeedResult:
        """
        Clear both collections and insert the fixture dataset.

        Returns:
            SeedResult with deletion and insertion counts
        """
        start = time.monotonic()
        logger.info("Resetting database")

        authors_deleted = (await self.authors_collection.delete_many({})).deleted_count
        books_deleted = (await self.books_collection.delete_many({})).deleted_count
        logger.debug("Cleared collections",
                     authors_deleted=authors_deleted,
                     books_deleted=books_deleted)

        author_ids = await self._insert_authors()
        books_inserted = await self._insert_books(author_ids)

        result = SeedResult(
            authors_deleted=authors_deleted,
            books_deleted=books_deleted,
            authors_inserted=len(author_ids),
            books_inserted=books_inserted,
            author_ids={name: str(oid) for name, oid in author_ids.items()},
            duration_seconds=round(time.monotonic() - start, 3),
        )
        logger.info("Database seeded",
                    authors_inserted=result.authors_inserted,
                    books_inserted=result.books_inserted,
                    duration_seconds=result.duration_seconds)
        return result

    async def _insert_authors(self) -> Dict[str, ObjectId]:
        author_ids = {}
        for name in FIXTURE_AUTHORS:
            inserted = await self.authors_collection.insert_one(
                AuthorDocument(name=name).to_document()
            )
            author_ids[name] = inserted.inserted_id
        return author_ids

    async def _insert_books(self, author_ids: Dict[str, ObjectId]) -> int:
        documents = [
            BookDocument(title=title, author=author_ids[author_name]).to_document()
            for title, author_name in FIXTURE_BOOKS
        ]
        result = await self.books_collection.insert_many(documents)
        return len(result.inserted_ids)


async def seed_database(database: AsyncIOMotorDatabase) -> SeedResult:
    """Run the fixture seeder once against the given database."""
    return await LibrarySeeder(database).seed()
