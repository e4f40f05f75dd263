"""
Database service layer for the FastAPI application.
"""

from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.errors import translate_store_errors
from api.models import AuthorResponse, BookResponse, BookWithAuthorResponse
from library.models import AUTHORS_COLLECTION, BOOKS_COLLECTION

logger = structlog.get_logger(__name__)


def _author_from_document(author_doc: Dict[str, Any]) -> AuthorResponse:
    return AuthorResponse(id=str(author_doc["_id"]), name=author_doc.get("name"))


def _book_from_document(book_doc: Dict[str, Any]) -> BookResponse:
    author_id = book_doc.get("author")
    return BookResponse(
        id=str(book_doc["_id"]),
        title=book_doc.get("title"),
        author=str(author_id) if author_id is not None else None,
    )


class APIDatabaseService:
    """Database service for API operations."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database
        self.authors_collection = database[AUTHORS_COLLECTION]
        self.books_collection = database[BOOKS_COLLECTION]

    async def get_authors(self) -> List[AuthorResponse]:
        """Get every author in the collection."""
        with translate_store_errors("get_authors"):
            author_docs = await self.authors_collection.find().to_list(length=None)

        return [_author_from_document(doc) for doc in author_docs]

    async def get_author_by_id(self, author_id: str) -> Optional[AuthorResponse]:
        """
        Get a single author by ID.

        Args:
            author_id: Author identifier (MongoDB ObjectId hex string)

        Returns:
            AuthorResponse if found, None otherwise

        Raises:
            InvalidIdentifierError: author_id is not a valid ObjectId
        """
        with translate_store_errors("get_author_by_id", identifier=author_id):
            author_doc = await self.authors_collection.find_one({"_id": ObjectId(author_id)})

        if author_doc is None:
            return None
        return _author_from_document(author_doc)

    async def get_books_by_author(self, author_id: str) -> Optional[List[BookResponse]]:
        """
        Get the books referencing an author.

        Args:
            author_id: Author identifier (MongoDB ObjectId hex string)

        Returns:
            List of BookResponse with the author left as a raw id, or None if
            the author does not exist
        """
        author = await self.get_author_by_id(author_id)
        if author is None:
            return None

        with translate_store_errors("get_books_by_author", identifier=author_id):
            book_docs = await self.books_collection.find(
                {"author": ObjectId(author.id)}
            ).to_list(length=None)

        logger.debug("Retrieved books by author", author_id=author.id, count=len(book_docs))
        return [_book_from_document(doc) for doc in book_docs]

    async def get_books_with_authors(self) -> List[BookWithAuthorResponse]:
        """
        Get every book with its author reference resolved.

        Authors are fetched with a single $in query over the referenced ids.
        Books whose reference is unset or points at a missing author get a
        null author.
        """
        with translate_store_errors("get_books_with_authors"):
            book_docs = await self.books_collection.find().to_list(length=None)

            author_ids = list({doc["author"] for doc in book_docs if doc.get("author") is not None})
            authors_by_id = {}
            if author_ids:
                author_docs = await self.authors_collection.find(
                    {"_id": {"$in": author_ids}}
                ).to_list(length=None)
                authors_by_id = {doc["_id"]: _author_from_document(doc) for doc in author_docs}

        books = []
        for book_doc in book_docs:
            books.append(BookWithAuthorResponse(
                id=str(book_doc["_id"]),
                title=book_doc.get("title"),
                author=authors_by_id.get(book_doc.get("author")),
            ))
        return books
