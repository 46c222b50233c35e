"""
Decides how the reader view presents a stored book.

The stored ``file_type`` wins over the extension of the original name.
Older rows may have no ``file_type`` and occasionally an inconsistent
one, so the PDF, text and image checks also look at the names directly.
"""

import logging
import os
from typing import Optional

from app.core.exceptions import NotFoundError, StorageIOError
from app.models.book import Book
from app.schemas.book import FileClassification
from app.services.storage_service import LocalStorageService

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.bmp')
DOWNLOADABLE_EXTENSIONS = ('.doc', '.docx', '.epub', '.zip', '.rar')

MISSING_TEXT_MESSAGE = "File not found on server. Please download the file instead."
UNREADABLE_TEXT_MESSAGE = "Unable to read the text content. Please download the file instead."


def resolve_extension(file_type: Optional[str], original_name: Optional[str]) -> str:
    if file_type:
        return file_type
    return os.path.splitext(original_name or "")[1].lower()


def classify(
    file_type: Optional[str],
    original_name: Optional[str],
    file_name: Optional[str]
) -> FileClassification:
    """Compute the presentation flags for one book."""
    extension = resolve_extension(file_type, original_name)
    original = (original_name or "").lower()
    stored = (file_name or "").lower()

    return FileClassification(
        extension=extension,
        is_pdf=extension == ".pdf" or original.endswith(".pdf") or ".pdf" in stored,
        is_text=extension == ".txt" or original.endswith(".txt"),
        is_image=extension in IMAGE_EXTENSIONS or original.endswith(IMAGE_EXTENSIONS),
        is_downloadable=extension in DOWNLOADABLE_EXTENSIONS,
    )


def classify_book(book: Book) -> FileClassification:
    classification = classify(book.file_type, book.original_name, book.file_name)
    logger.info(
        f"File type detection for {book.file_name}: extension={classification.extension} "
        f"pdf={classification.is_pdf} text={classification.is_text} "
        f"image={classification.is_image} downloadable={classification.is_downloadable}"
    )
    return classification


def load_text_content(storage: LocalStorageService, book: Book) -> str:
    """
    Read a text book for inline display.

    Never raises: a missing or unreadable file yields a fallback message.
    """
    try:
        return storage.read_text(book.file_name)
    except NotFoundError:
        logger.warning(f"Text file for book {book.id} missing: {book.file_name}")
        return MISSING_TEXT_MESSAGE
    except StorageIOError as e:
        logger.error(f"Error reading text file for book {book.id}: {e}")
        return UNREADABLE_TEXT_MESSAGE
