"""
Service for managing book records in the archive.
"""

import logging
from typing import List, Optional, Union
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select

from app.core.exceptions import PersistenceError
from app.models.book import Book
from app.schemas.book import BookCreate
from app.services.storage_service import LocalStorageService

logger = logging.getLogger(__name__)


def parse_book_id(book_id: Union[str, UUID]) -> Optional[UUID]:
    """Return the UUID for a path parameter, or None if it is malformed."""
    if isinstance(book_id, UUID):
        return book_id
    try:
        return UUID(str(book_id))
    except ValueError:
        return None


class BookService:
    """Service for managing uploaded books."""

    @staticmethod
    async def create_book(
        db: AsyncSession,
        book_data: BookCreate,
        stored_file: dict,
        original_name: str,
        file_type: str
    ) -> Book:
        """Create a book record for a file already written to storage."""
        book = Book(
            title=book_data.title,
            description=book_data.description,
            author=book_data.author,
            file_name=stored_file["file_name"],
            original_name=original_name,
            file_path=stored_file["file_path"],
            file_size=stored_file["file_size"],
            file_type=file_type,
            category=book_data.category,
            is_public=True
        )
        try:
            db.add(book)
            await db.commit()
            await db.refresh(book)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error saving book {book_data.title}: {e}")
            raise PersistenceError("Error uploading book. Please try again.") from e

        logger.info(f"New book uploaded: {book.title} (file_type={book.file_type})")
        return book

    @staticmethod
    async def get_book_by_id(
        db: AsyncSession,
        book_id: Union[str, UUID]
    ) -> Optional[Book]:
        """Get a book by its ID. Malformed IDs resolve to None."""
        parsed = parse_book_id(book_id)
        if parsed is None:
            return None
        try:
            result = await db.execute(
                select(Book).where(Book.id == parsed)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching book {book_id}: {e}")
            raise PersistenceError("Error loading book") from e
        return result.scalars().first()

    @staticmethod
    async def get_all_books(db: AsyncSession) -> List[Book]:
        """Get every book, most recent upload first."""
        try:
            result = await db.execute(
                select(Book).order_by(Book.upload_date.desc())
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching books: {e}")
            raise PersistenceError("Error fetching books") from e
        return list(result.scalars().all())

    @staticmethod
    async def delete_book(
        db: AsyncSession,
        storage: LocalStorageService,
        book_id: Union[str, UUID]
    ) -> bool:
        """
        Delete a book's file and then its record.

        Unknown IDs are a no-op. A file that is already gone does not
        stop the record from being removed. Not transactional: if the
        record delete fails after the file is gone, the record dangles.

        Returns:
            True if a record was deleted, False if there was nothing to delete
        """
        book = await BookService.get_book_by_id(db, book_id)
        if not book:
            logger.info(f"Delete requested for unknown book {book_id}")
            return False

        storage.delete_file(book.file_name)

        try:
            await db.delete(book)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error deleting book record {book_id}: {e}")
            raise PersistenceError("Error deleting book") from e

        logger.info(f"Deleted book: {book.title}")
        return True
