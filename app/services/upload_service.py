"""
Upload pipeline: validate, store the bytes, record the metadata.
"""

import logging
from typing import BinaryIO, Optional
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PersistenceError, ValidationError
from app.models.book import Book
from app.schemas.book import BookCreate
from app.services.book_service import BookService
from app.services.storage_service import LocalStorageService, split_file_name

logger = logging.getLogger(__name__)


class UploadService:
    """Service for accepting book uploads."""

    @staticmethod
    async def upload_book(
        db: AsyncSession,
        storage: LocalStorageService,
        book_data: BookCreate,
        file: Optional[BinaryIO],
        original_name: Optional[str],
        declared_size: Optional[int] = None
    ) -> Book:
        """
        Validate and store an uploaded book.

        Nothing is written when validation fails. If the record cannot be
        saved after the write, the stored file is left behind as an orphan.

        Raises:
            ValidationError: missing file, disallowed type or too large
            StorageIOError: the file could not be written
            PersistenceError: the record could not be saved
        """
        if file is None or not original_name:
            raise ValidationError("No file selected or file type not allowed")

        is_valid, error_message = storage.validate_file(original_name, declared_size)
        if not is_valid:
            logger.info(f"Rejected upload {original_name}: {error_message}")
            raise ValidationError(error_message)

        stored_file = await run_in_threadpool(storage.save_file, file, original_name)
        file_type = split_file_name(original_name)[1].lower()
        logger.info(
            f"Upload details: original_name={original_name} "
            f"file_name={stored_file['file_name']} file_size={stored_file['file_size']}"
        )

        try:
            return await BookService.create_book(
                db,
                book_data,
                stored_file,
                original_name=original_name,
                file_type=file_type
            )
        except PersistenceError:
            logger.warning(f"Stored file {stored_file['file_name']} left without a record")
            raise
