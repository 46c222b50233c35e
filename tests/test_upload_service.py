"""Tests for the upload pipeline and book deletion."""

import asyncio
import io

import pytest

from app.core.exceptions import PersistenceError, ValidationError
from app.models.book import BookCategory
from app.schemas.book import BookCreate
from app.services.book_service import BookService
from app.services.upload_service import UploadService

MIB = 1024 * 1024


class ZeroStream:
    """Readable that yields ``size`` zero bytes without holding them in memory."""

    def __init__(self, size: int):
        self.remaining = size

    def read(self, n: int = -1) -> bytes:
        if self.remaining <= 0:
            return b""
        if n < 0 or n > self.remaining:
            n = self.remaining
        self.remaining -= n
        return b"\0" * n


def book_data(**overrides) -> BookCreate:
    fields = {"title": "Corpus Hermeticum", "description": "Dialogues of Hermes", "author": "", "category": ""}
    fields.update(overrides)
    return BookCreate(**fields)


def stored_files(storage):
    if not storage.upload_dir.exists():
        return []
    return list(storage.upload_dir.iterdir())


def upload(session_factory, storage, file, name, declared_size=None, data=None):
    async def scenario():
        async with session_factory() as db:
            return await UploadService.upload_book(
                db, storage, data or book_data(), file, name, declared_size
            )

    return asyncio.run(scenario())


def all_books(session_factory):
    async def scenario():
        async with session_factory() as db:
            return await BookService.get_all_books(db)

    return asyncio.run(scenario())


class TestBookCreate:
    def test_defaults_blank_author_and_category(self) -> None:
        data = book_data()
        assert data.author == "Unknown Author"
        assert data.category is BookCategory.OTHER

    def test_unknown_category_becomes_other(self) -> None:
        assert book_data(category="necromancy").category is BookCategory.OTHER
        assert book_data(category="Alchemy").category is BookCategory.ALCHEMY


class TestUploadBook:
    def test_accepted_upload_creates_record_and_file(self, session_factory, storage) -> None:
        book = upload(session_factory, storage, io.BytesIO(b"%PDF-1.4"), "Corpus.PDF", 8)

        assert book.id is not None
        assert book.original_name == "Corpus.PDF"
        assert book.file_type == ".pdf"
        assert book.file_name.endswith(".PDF")
        assert book.file_path == f"/uploads/{book.file_name}"
        assert book.file_size == 8
        assert book.author == "Unknown Author"
        assert book.category is BookCategory.OTHER
        assert book.is_public is True
        assert (storage.upload_dir / book.file_name).read_bytes() == b"%PDF-1.4"

    def test_exe_is_rejected(self, session_factory, storage) -> None:
        with pytest.raises(ValidationError, match=".exe"):
            upload(session_factory, storage, io.BytesIO(b"MZ"), "summon.exe", 2)
        assert all_books(session_factory) == []
        assert stored_files(storage) == []

    def test_missing_file_is_rejected(self, session_factory, storage) -> None:
        with pytest.raises(ValidationError):
            upload(session_factory, storage, None, None)
        with pytest.raises(ValidationError):
            upload(session_factory, storage, io.BytesIO(b""), "")
        assert all_books(session_factory) == []

    def test_declared_oversize_rejected_before_write(self, session_factory, storage) -> None:
        with pytest.raises(ValidationError):
            upload(session_factory, storage, ZeroStream(101 * MIB), "huge.pdf", 101 * MIB)
        assert all_books(session_factory) == []
        assert stored_files(storage) == []

    def test_undeclared_oversize_rejected_while_streaming(self, session_factory, storage) -> None:
        with pytest.raises(ValidationError):
            upload(session_factory, storage, ZeroStream(101 * MIB), "huge.pdf")
        assert all_books(session_factory) == []
        assert stored_files(storage) == []

    def test_persistence_failure_leaves_orphan_file(self, session_factory, storage, monkeypatch) -> None:
        async def failing_create_book(*args, **kwargs):
            raise PersistenceError("database down")

        monkeypatch.setattr(BookService, "create_book", failing_create_book)

        with pytest.raises(PersistenceError):
            upload(session_factory, storage, io.BytesIO(b"text"), "orphan.txt", 4)
        assert len(stored_files(storage)) == 1


class TestDeleteBook:
    def delete(self, session_factory, storage, book_id):
        async def scenario():
            async with session_factory() as db:
                return await BookService.delete_book(db, storage, book_id)

        return asyncio.run(scenario())

    def test_removes_file_and_record(self, session_factory, storage) -> None:
        book = upload(session_factory, storage, io.BytesIO(b"text"), "scroll.txt", 4)

        assert self.delete(session_factory, storage, str(book.id)) is True
        assert all_books(session_factory) == []
        assert stored_files(storage) == []

    def test_file_already_removed(self, session_factory, storage) -> None:
        book = upload(session_factory, storage, io.BytesIO(b"text"), "scroll.txt", 4)
        (storage.upload_dir / book.file_name).unlink()

        assert self.delete(session_factory, storage, book.id) is True
        assert all_books(session_factory) == []

    def test_unknown_and_malformed_ids_are_noops(self, session_factory, storage) -> None:
        assert self.delete(session_factory, storage, "00000000-0000-0000-0000-000000000000") is False
        assert self.delete(session_factory, storage, "not-a-uuid") is False
