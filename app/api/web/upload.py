"""
Upload, file serving and delete endpoints.

None of these endpoints are authenticated: anyone can upload, fetch a
file by name, or delete a book.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status, UploadFile, File, Form
from fastapi.responses import FileResponse, RedirectResponse
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ArchiveError, ValidationError
from app.core.templates import templates
from app.schemas.book import BookCreate
from app.services.book_service import BookService
from app.services.storage_service import LocalStorageService, get_storage_service
from app.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter()


def render_upload_error(request: Request, message: str, status_code: int, form: dict):
    return templates.TemplateResponse(
        request,
        "upload.html",
        {"page": "upload", "error": message, **form},
        status_code=status_code
    )


async def upload_book(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    author: str = Form(""),
    category: str = Form(""),
    book_file: Optional[UploadFile] = File(None, alias="bookFile"),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorageService = Depends(get_storage_service)
):
    """Accept a book upload and redirect to the library."""
    form = {"title": title, "author": author, "category": category}

    try:
        book_data = BookCreate(
            title=title.strip(),
            description=description.strip(),
            author=author,
            category=category
        )
    except SchemaValidationError as e:
        message = "Title and description are required."
        for error in e.errors():
            if error["type"] == "string_too_long":
                field = str(error["loc"][0]).capitalize()
                message = f"{field} must be at most {error['ctx']['max_length']} characters."
                break
        return render_upload_error(request, message, status.HTTP_400_BAD_REQUEST, form)

    try:
        await UploadService.upload_book(
            db,
            storage,
            book_data,
            file=book_file.file if book_file else None,
            original_name=book_file.filename if book_file else None,
            declared_size=book_file.size if book_file else None
        )
    except ValidationError as e:
        return render_upload_error(request, e.message, status.HTTP_400_BAD_REQUEST, form)
    except ArchiveError as e:
        logger.error(f"Upload error: {e}")
        return render_upload_error(
            request,
            "Error uploading book. Please try again.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            form
        )
    finally:
        if book_file:
            await book_file.close()

    return RedirectResponse(url="/library", status_code=status.HTTP_303_SEE_OTHER)


async def get_file(
    request: Request,
    filename: str,
    storage: LocalStorageService = Depends(get_storage_service)
):
    """Serve a stored file by its generated name."""
    path = storage.resolve_path(filename)
    if path is None or not path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )
    return FileResponse(path)


async def delete_book(
    request: Request,
    book_id: str,
    db: AsyncSession = Depends(get_db),
    storage: LocalStorageService = Depends(get_storage_service)
):
    """Delete a book's file and record. Unknown IDs are ignored."""
    try:
        await BookService.delete_book(db, storage, book_id)
    except ArchiveError as e:
        logger.error(f"Error deleting book {book_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting book"
        )
    return RedirectResponse(url="/library", status_code=status.HTTP_303_SEE_OTHER)


# Rate limit file operations in production
if settings.is_production:
    from app.middleware.rate_limit import limiter, RateLimits

    upload_book = limiter.limit(RateLimits.FILE_UPLOAD)(upload_book)
    get_file = limiter.limit(RateLimits.FILE_DOWNLOAD)(get_file)
    delete_book = limiter.limit(RateLimits.FILE_DELETE)(delete_book)

router.post("/book")(upload_book)
router.get("/file/{filename}")(get_file)
router.post("/delete/{book_id}")(delete_book)
