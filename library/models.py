"""
Pydantic models for the documents stored in the library collections.
Authors and books live in separate collections; a book points at its
author through an ObjectId reference field.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


AUTHORS_COLLECTION = "authors"
BOOKS_COLLECTION = "books"


class AuthorDocument(BaseModel):
    """Author document as stored in the authors collection."""
    name: str = Field(..., description="Author name")

    def to_document(self) -> Dict[str, Any]:
        """Render the BSON document; the store assigns _id."""
        return self.model_dump()


class BookDocument(BaseModel):
    """
    Book document as stored in the books collection.

    The author reference is not checked against the authors collection, so it
    may point at an author that no longer exists.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str = Field(..., description="Book title")
    author: Optional[ObjectId] = Field(None, description="ObjectId of the referenced author")

    def to_document(self) -> Dict[str, Any]:
        """Render the BSON document; the store assigns _id."""
        return self.model_dump()


class SeedResult(BaseModel):
    """Summary of a seeding run."""
    authors_deleted: int = Field(..., description="Author documents removed before inserting")
    books_deleted: int = Field(..., description="Book documents removed before inserting")
    authors_inserted: int = Field(..., description="Author documents inserted")
    books_inserted: int = Field(..., description="Book documents inserted")
    author_ids: Dict[str, str] = Field(default_factory=dict, description="Inserted author ids by name")
    duration_seconds: float = Field(..., description="Total seeding duration in seconds")
    finished_at: datetime = Field(default_factory=datetime.utcnow, description="When the run finished")
