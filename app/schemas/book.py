"""
Pydantic schemas for Book model.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.models.book import BookCategory


# Book Base Schema
class BookBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=500, description="Title of the book")
    description: str = Field(..., min_length=1, description="Short description shown in the library")
    author: str = Field("Unknown Author", max_length=255)
    category: BookCategory = BookCategory.OTHER


class BookCreate(BookBase):
    """Schema for the metadata part of an upload form."""

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, value):
        if value is None or not str(value).strip():
            return "Unknown Author"
        return str(value).strip()

    @field_validator("category", mode="before")
    @classmethod
    def normalise_category(cls, value):
        return BookCategory.parse(value)


class BookResponse(BookBase):
    """Schema for book response."""
    id: UUID
    file_name: str
    original_name: str
    file_path: str
    file_size: int
    file_type: Optional[str] = None
    upload_date: datetime
    is_public: bool

    class Config:
        from_attributes = True


class FileClassification(BaseModel):
    """Presentation flags derived from a book's extension."""
    extension: str
    is_pdf: bool = False
    is_text: bool = False
    is_image: bool = False
    is_downloadable: bool = False

    @property
    def display_mode(self) -> str:
        # PDF wins over every other flag
        if self.is_pdf:
            return "pdf"
        if self.is_text:
            return "text"
        if self.is_image:
            return "image"
        if self.is_downloadable:
            return "download"
        return "unknown"


class BookReadResponse(BaseModel):
    """Book plus everything the reader view needs."""
    book: BookResponse
    classification: FileClassification
    content: str = ""


class ReferenceBook(BaseModel):
    """A fixed catalog entry used to annotate the library view."""
    title: str
    description: str
    author: str
    category: BookCategory
    search_terms: List[str]


class ReferenceBookStatus(ReferenceBook):
    """Reference entry annotated with its upload status."""
    is_uploaded: bool = False
    uploaded_book_id: Optional[UUID] = None


class LibraryResponse(BaseModel):
    """Schema for the library listing."""
    books: List[BookResponse]
    reference_books: List[ReferenceBookStatus]
    total: int
