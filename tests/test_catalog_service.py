"""Tests for the library listing and legendary-book cross reference."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

from app.models.book import Book, BookCategory
from app.services.book_service import BookService
from app.services.catalog_service import CatalogService, annotate_reference_books
from app.utils.reference_books import REFERENCE_BOOKS


def make_book(title: str, uploaded_at=None) -> Book:
    file_name = f"{uuid.uuid4().hex}.pdf"
    return Book(
        id=uuid.uuid4(),
        title=title,
        description="desc",
        author="Unknown",
        file_name=file_name,
        original_name="x.pdf",
        file_path=f"/uploads/{file_name}",
        file_size=10,
        file_type=".pdf",
        category=BookCategory.OTHER,
        is_public=True,
        upload_date=uploaded_at or datetime.now(timezone.utc),
    )


def by_title(annotated, title):
    return next(ref for ref in annotated if ref.title == title)


class TestAnnotateReferenceBooks:
    def test_thoth_marked_uploaded(self) -> None:
        book = make_book("The Book of Thoth, Vol. 1")
        thoth = by_title(annotate_reference_books([book]), "Book of Thoth")
        assert thoth.is_uploaded
        assert thoth.uploaded_book_id == book.id

    def test_not_uploaded_without_matching_title(self) -> None:
        annotated = annotate_reference_books([make_book("Liber Null")])
        thoth = by_title(annotated, "Book of Thoth")
        assert not thoth.is_uploaded
        assert thoth.uploaded_book_id is None

    def test_matching_is_case_insensitive_substring(self) -> None:
        annotated = annotate_reference_books([make_book("my PICATRIX translation")])
        assert by_title(annotated, "Picatrix").is_uploaded

    def test_first_matching_book_wins(self) -> None:
        first = make_book("Ripley Scroll (facsimile)")
        second = make_book("Another scroll")
        ripley = by_title(annotate_reference_books([first, second]), "Ripley Scroll")
        assert ripley.uploaded_book_id == first.id

    def test_every_reference_entry_is_returned(self) -> None:
        annotated = annotate_reference_books([])
        assert [ref.title for ref in annotated] == [ref.title for ref in REFERENCE_BOOKS]
        assert not any(ref.is_uploaded for ref in annotated)


class TestLibraryQuery:
    def test_books_are_newest_first(self, session_factory) -> None:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        offsets = [3, 0, 5, 1, 4, 2]

        async def scenario():
            async with session_factory() as db:
                for hours in offsets:
                    db.add(make_book(f"Book {hours}", base + timedelta(hours=hours)))
                await db.commit()
            async with session_factory() as db:
                return await CatalogService.get_library(db)

        books, references = asyncio.run(scenario())

        dates = [book.upload_date for book in books]
        assert dates == sorted(dates, reverse=True)
        assert [book.title for book in books] == [f"Book {h}" for h in sorted(offsets, reverse=True)]
        assert len(references) == len(REFERENCE_BOOKS)

    def test_reference_annotation_against_stored_books(self, session_factory) -> None:
        async def scenario():
            async with session_factory() as db:
                db.add(make_book("The Book of Thoth, Vol. 1"))
                await db.commit()
            async with session_factory() as db:
                return await CatalogService.get_library(db)

        books, references = asyncio.run(scenario())
        assert by_title(references, "Book of Thoth").uploaded_book_id == books[0].id
        assert not by_title(references, "Necronomicon").is_uploaded

    def test_empty_library(self, session_factory) -> None:
        async def scenario():
            async with session_factory() as db:
                return await BookService.get_all_books(db)

        assert asyncio.run(scenario()) == []
