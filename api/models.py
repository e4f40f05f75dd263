"""
API models and schemas for the FastAPI application.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AuthorResponse(BaseModel):
    """Author response model for API."""
    id: str = Field(..., description="Unique author identifier")
    name: Optional[str] = Field(None, description="Author name")


class BookResponse(BaseModel):
    """Book response model with the author reference left as a raw id."""
    id: str = Field(..., description="Unique book identifier")
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Identifier of the referenced author")


class BookWithAuthorResponse(BaseModel):
    """Book response model with the author reference resolved."""
    id: str = Field(..., description="Unique book identifier")
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[AuthorResponse] = Field(
        None, description="Referenced author, null when unset or dangling"
    )


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details, debug mode only")
