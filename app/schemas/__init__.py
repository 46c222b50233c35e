# Schemas package
from .book import (
    BookBase, BookCreate, BookResponse, BookReadResponse,
    FileClassification, ReferenceBook, ReferenceBookStatus, LibraryResponse
)
