# Models package
from .book import Book, BookCategory
