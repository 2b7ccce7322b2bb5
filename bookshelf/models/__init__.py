"""SQLAlchemy models. Importing this package registers every table with Base.metadata."""

from bookshelf.models.book import Book, BookAuthor, BookReview
from bookshelf.models.shelf import Shelf, shelf_books
from bookshelf.models.user import User

__all__ = ["User", "Shelf", "shelf_books", "Book", "BookAuthor", "BookReview"]
