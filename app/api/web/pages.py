"""
HTML pages: home, library, static pages, upload form and reader.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import PersistenceError
from app.core.templates import templates
from app.services.book_service import BookService
from app.services.catalog_service import CatalogService
from app.services.file_classifier import classify_book, load_text_content
from app.services.storage_service import LocalStorageService, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def home(request: Request):
    return templates.TemplateResponse(request, "index.html", {"page": "home"})


@router.get("/library")
async def library(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """List every book, newest first, with the legendary texts annotated."""
    try:
        books, reference_books = await CatalogService.get_library(db)
    except PersistenceError as e:
        logger.error(f"Error fetching books: {e}")
        books, reference_books = [], []

    return templates.TemplateResponse(
        request,
        "library.html",
        {
            "page": "library",
            "books": books,
            "reference_books": reference_books
        }
    )


@router.get("/societies")
async def societies(request: Request):
    return templates.TemplateResponse(request, "societies.html", {"page": "societies"})


@router.get("/contact")
async def contact(request: Request):
    return templates.TemplateResponse(request, "contact.html", {"page": "contact"})


@router.get("/upload-book")
async def upload_form(
    request: Request,
    title: Optional[str] = Query(None),
    author: Optional[str] = Query(None),
    category: Optional[str] = Query(None)
):
    """Upload form, optionally pre-filled from a legendary text link."""
    return templates.TemplateResponse(
        request,
        "upload.html",
        {
            "page": "upload",
            "title": title or "",
            "author": author or "",
            "category": category or ""
        }
    )


@router.get("/read/{book_id}")
async def read_book(
    request: Request,
    book_id: str,
    db: AsyncSession = Depends(get_db),
    storage: LocalStorageService = Depends(get_storage_service)
):
    """Reader view. Text books are inlined; other types are embedded or linked."""
    try:
        book = await BookService.get_book_by_id(db, book_id)
    except PersistenceError as e:
        logger.error(f"Error fetching book {book_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error loading the forbidden text"
        )

    if not book:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found in the archives"
        )

    classification = classify_book(book)
    book_content = load_text_content(storage, book) if classification.is_text else ""

    return templates.TemplateResponse(
        request,
        "reader.html",
        {
            "page": "reader",
            "book": book,
            "book_content": book_content,
            "classification": classification,
            "file_url": f"/upload/file/{quote(book.file_name)}"
        }
    )
