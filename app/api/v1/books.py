"""
JSON endpoints mirroring the library and reader pages.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.exceptions import PersistenceError
from app.services.book_service import BookService
from app.services.catalog_service import CatalogService
from app.services.file_classifier import classify_book, load_text_content
from app.services.storage_service import LocalStorageService, get_storage_service
from app.schemas.book import (
    BookResponse,
    BookReadResponse,
    LibraryResponse,
    ReferenceBookStatus
)

router = APIRouter()


def _store_unavailable(e: PersistenceError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=e.message
    )


@router.get("/books", response_model=List[BookResponse])
async def get_books(db: AsyncSession = Depends(get_db)):
    """Get all books, most recent upload first."""
    try:
        return await BookService.get_all_books(db)
    except PersistenceError as e:
        raise _store_unavailable(e)


@router.get("/books/{book_id}", response_model=BookReadResponse)
async def get_book(
    book_id: str,
    db: AsyncSession = Depends(get_db),
    storage: LocalStorageService = Depends(get_storage_service)
):
    """Get a book with its file classification and, for text, its content."""
    try:
        book = await BookService.get_book_by_id(db, book_id)
    except PersistenceError as e:
        raise _store_unavailable(e)
    if not book:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )

    classification = classify_book(book)
    return BookReadResponse(
        book=BookResponse.model_validate(book),
        classification=classification,
        content=load_text_content(storage, book) if classification.is_text else ""
    )


@router.get("/library", response_model=LibraryResponse)
async def get_library(db: AsyncSession = Depends(get_db)):
    """Books plus the annotated legendary texts."""
    try:
        books, reference_books = await CatalogService.get_library(db)
    except PersistenceError as e:
        raise _store_unavailable(e)
    return LibraryResponse(
        books=[BookResponse.model_validate(book) for book in books],
        reference_books=reference_books,
        total=len(books)
    )


@router.get("/library/references", response_model=List[ReferenceBookStatus])
async def get_reference_books(db: AsyncSession = Depends(get_db)):
    """Legendary texts annotated with their upload status."""
    try:
        _, reference_books = await CatalogService.get_library(db)
    except PersistenceError as e:
        raise _store_unavailable(e)
    return reference_books
