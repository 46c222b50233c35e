"""
Library listing and the legendary-books cross reference.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.book import Book
from app.schemas.book import ReferenceBook, ReferenceBookStatus
from app.services.book_service import BookService
from app.utils.reference_books import REFERENCE_BOOKS

logger = logging.getLogger(__name__)


def find_matching_book(reference: ReferenceBook, books: Iterable[Book]) -> Optional[Book]:
    """First book whose lower-cased title contains any search term."""
    terms = [term.lower() for term in reference.search_terms]
    for book in books:
        title = (book.title or "").lower()
        if any(term in title for term in terms):
            return book
    return None


def annotate_reference_books(
    books: Sequence[Book],
    references: Iterable[ReferenceBook] = REFERENCE_BOOKS
) -> List[ReferenceBookStatus]:
    """Attach upload status to each reference entry."""
    annotated = []
    for reference in references:
        match = find_matching_book(reference, books)
        annotated.append(
            ReferenceBookStatus(
                **reference.model_dump(),
                is_uploaded=match is not None,
                uploaded_book_id=match.id if match is not None else None,
            )
        )
    return annotated


class CatalogService:
    """Service backing the library page."""

    @staticmethod
    async def get_library(db: AsyncSession) -> tuple[List[Book], List[ReferenceBookStatus]]:
        """
        Get all books, newest first, with the annotated reference list.

        Raises:
            PersistenceError: the books could not be loaded
        """
        books = await BookService.get_all_books(db)
        reference_books = annotate_reference_books(books)
        uploaded = sum(1 for ref in reference_books if ref.is_uploaded)
        logger.info(f"Library loaded: {len(books)} books, {uploaded}/{len(reference_books)} legendary texts present")
        return books, reference_books
