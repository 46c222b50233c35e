"""
Book Model for documents uploaded to the archive.

Each row describes one uploaded file; the bytes themselves live in the
upload directory under ``file_name``.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Boolean, Integer, Text, Uuid, Enum as SQLEnum
import enum
import uuid

from app.core.database import Base


class BookCategory(enum.Enum):
    """Fixed set of archive categories."""
    ALCHEMY = "alchemy"
    HERMETIC = "hermetic"
    QABALAH = "qabalah"
    SOCIETIES = "societies"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "BookCategory":
        """Map a free-form form value onto the set, falling back to OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.OTHER


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Book(Base):
    """
    Metadata for one uploaded document.

    Rows are created by the upload handler and removed by the delete
    handler; there is no update path.
    """
    __tablename__ = "books"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    author = Column(String(255), default="Unknown")

    # Storage
    file_name = Column(String(512), nullable=False, unique=True)
    original_name = Column(String(512), nullable=False)
    file_path = Column(String(600), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_type = Column(String(20), nullable=True)  # NULL on legacy rows

    category = Column(
        SQLEnum(
            BookCategory,
            name="book_category",
            values_callable=lambda members: [member.value for member in members],
        ),
        default=BookCategory.OTHER,
        nullable=False,
    )
    is_public = Column(Boolean, default=True, nullable=False)

    # Metadata
    upload_date = Column(DateTime(timezone=True), default=utc_now, index=True)

    def __repr__(self):
        return f"<Book(title='{self.title}', file_name='{self.file_name}')>"
