"""Book catalogue service: CRUD, search and reviews."""

import logging
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.database import MAX_ID
from bookshelf.errors import DuplicateIdentityError, NotFoundError
from bookshelf.models.book import DEFAULT_COVER_IMAGE_URL, Book, BookAuthor, BookReview
from bookshelf.models.shelf import shelf_books
from bookshelf.services.shelf import get_shelf_service

logger = logging.getLogger("bookshelf")


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BookService:
    """Handles books and their reviews."""

    def list_books(self, db: Session) -> list[Book]:
        """Get all books in storage order."""
        return db.query(Book).order_by(Book.id).all()

    def get_book(self, db: Session, book_id: int) -> Book:
        book = db.get(Book, book_id) if 1 <= book_id <= MAX_ID else None
        if not book:
            raise NotFoundError("Book not found")
        return book

    def list_books_on_shelf(self, db: Session, shelf_id: int, requester_id: int) -> list[Book]:
        """Get the books assigned to one of the requester's shelves."""
        shelf = get_shelf_service().get_shelf(db, shelf_id, requester_id)
        return db.query(Book).filter(Book.shelf_id == shelf.id).order_by(Book.id).all()

    def _check_isbn_free(self, db: Session, isbn: str | None, book_id: int | None = None) -> None:
        if not isbn:
            return
        query = db.query(Book.id).filter(Book.isbn == isbn)
        if book_id is not None:
            query = query.filter(Book.id != book_id)
        if query.first():
            raise DuplicateIdentityError("A book with this ISBN already exists")

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateIdentityError("A book with this ISBN already exists") from None

    def create_book(self, db: Session, data: dict[str, Any], requester_id: int) -> Book:
        """Create a book. A shelf assignment must name one of the requester's shelves."""
        data = dict(data)
        shelf_id = data.pop("shelf", None)
        if shelf_id is not None:
            get_shelf_service().get_shelf(db, shelf_id, requester_id)
        self._check_isbn_free(db, data.get("isbn"))

        book = Book(
            title=data["title"],
            authors=data["authors"],
            genre=data.get("genre"),
            publication_date=data.get("publication_date"),
            cover_image_url=data.get("cover_image_url") or DEFAULT_COVER_IMAGE_URL,
            isbn=data.get("isbn"),
            tags=data.get("tags") or [],
            personal_notes=data.get("personal_notes"),
            status=data.get("status") or "Want to Read",
            shelf_id=shelf_id,
        )
        db.add(book)
        self._commit(db)
        db.refresh(book)
        logger.info("Book %s created", book.id)
        return book

    def update_book(self, db: Session, book_id: int, changes: dict[str, Any], requester_id: int) -> Book:
        """Apply the fields present in ``changes``. ``shelf: None`` unassigns the book."""
        book = self.get_book(db, book_id)
        changes = dict(changes)

        if "shelf" in changes:
            shelf_id = changes.pop("shelf")
            if shelf_id is not None:
                get_shelf_service().get_shelf(db, shelf_id, requester_id)
            book.shelf_id = shelf_id

        if "isbn" in changes:
            self._check_isbn_free(db, changes["isbn"], book_id=book.id)
        if "cover_image_url" in changes and not changes["cover_image_url"]:
            changes["cover_image_url"] = DEFAULT_COVER_IMAGE_URL
        if "tags" in changes and changes["tags"] is None:
            changes["tags"] = []

        for field in ("title", "authors", "status"):
            if field in changes and changes[field] is None:
                del changes[field]

        for field, value in changes.items():
            setattr(book, field, value)

        self._commit(db)
        db.refresh(book)
        return book

    def delete_book(self, db: Session, book_id: int) -> None:
        """Delete a book and drop it from any shelf's book set."""
        book = self.get_book(db, book_id)
        db.execute(shelf_books.delete().where(shelf_books.c.book_id == book.id))
        db.delete(book)
        db.commit()
        logger.info("Book %s deleted", book_id)

    def search_books(self, db: Session, query: str) -> list[Book]:
        """Case-insensitive substring match against the title or any author."""
        pattern = _like_pattern(query)
        return (
            db.query(Book)
            .filter(
                or_(
                    Book.title.ilike(pattern, escape="\\"),
                    Book.author_entries.any(BookAuthor.name.ilike(pattern, escape="\\")),
                )
            )
            .order_by(Book.id)
            .all()
        )

    def add_review(self, db: Session, book_id: int, reviewer_id: int, rating: int, comment: str | None = None) -> Book:
        book = self.get_book(db, book_id)
        book.reviews.append(BookReview(reviewer_id=reviewer_id, rating=rating, comment=comment))
        db.commit()
        db.refresh(book)
        return book


_book_service: BookService | None = None


def get_book_service() -> BookService:
    """Get singleton book service instance."""
    global _book_service
    if _book_service is None:
        _book_service = BookService()
    return _book_service
