"""Ownership-scoped shelf service."""

import logging

from sqlalchemy.orm import Session

from bookshelf.database import MAX_ID
from bookshelf.errors import AlreadyPresentError, NotFoundError, NotFoundOrForbiddenError, ValidationError
from bookshelf.models.book import Book
from bookshelf.models.shelf import DEFAULT_SHELF_NAME, Shelf

logger = logging.getLogger("bookshelf")


class ShelfService:
    """Shelves are only visible to, and only changed by, their owner."""

    def _load_books(self, db: Session, book_ids: list[int]) -> list[Book]:
        """Resolve book ids in order, rejecting duplicates and unknown ids."""
        if len(set(book_ids)) != len(book_ids):
            raise ValidationError(
                "Duplicate books are not allowed on the same shelf.",
                errors=[{"field": "books", "message": "Duplicate books are not allowed on the same shelf."}],
            )
        if not book_ids:
            return []

        found = {book.id: book for book in db.query(Book).filter(Book.id.in_(book_ids)).all()}
        missing = [book_id for book_id in book_ids if book_id not in found]
        if missing:
            raise ValidationError(
                errors=[{"field": "books", "message": f"Unknown book ids: {', '.join(map(str, missing))}"}],
            )
        return [found[book_id] for book_id in book_ids]

    def list_shelves(self, db: Session, owner_id: int) -> list[Shelf]:
        """Get all shelves owned by a user."""
        return db.query(Shelf).filter(Shelf.owner_id == owner_id).order_by(Shelf.id).all()

    def create_shelf(self, db: Session, owner_id: int, name: str | None = None, book_ids: list[int] | None = None) -> Shelf:
        """Create a shelf. The owner is fixed for the shelf's lifetime."""
        shelf = Shelf(
            owner_id=owner_id,
            name=(name or "").strip() or DEFAULT_SHELF_NAME,
            books=self._load_books(db, book_ids or []),
        )
        db.add(shelf)
        db.commit()
        db.refresh(shelf)
        logger.info("Shelf %s created for user %s", shelf.id, owner_id)
        return shelf

    def get_shelf(self, db: Session, shelf_id: int, requester_id: int) -> Shelf:
        """Get a shelf by ID, scoped to its owner.

        A missing shelf and someone else's shelf raise the same error.
        """
        if not 1 <= shelf_id <= MAX_ID:
            raise NotFoundOrForbiddenError()
        shelf = db.query(Shelf).filter(Shelf.id == shelf_id, Shelf.owner_id == requester_id).first()
        if not shelf:
            raise NotFoundOrForbiddenError()
        return shelf

    def update_shelf(
        self,
        db: Session,
        shelf_id: int,
        requester_id: int,
        name: str | None = None,
        book_ids: list[int] | None = None,
    ) -> Shelf:
        """Apply a partial update. Fields left as None are unchanged."""
        shelf = self.get_shelf(db, shelf_id, requester_id)
        if name is not None:
            shelf.name = name
        if book_ids is not None:
            shelf.books = self._load_books(db, book_ids)
        db.commit()
        db.refresh(shelf)
        return shelf

    def delete_shelf(self, db: Session, shelf_id: int, requester_id: int) -> int:
        """Delete a shelf after detaching every book that points at it.

        Both steps share one transaction. Returns the number of books detached.
        """
        shelf = self.get_shelf(db, shelf_id, requester_id)
        detached = (
            db.query(Book)
            .filter(Book.shelf_id == shelf.id)
            .update({Book.shelf_id: None}, synchronize_session="fetch")
        )
        db.delete(shelf)
        db.commit()
        logger.info("Shelf %s deleted, %d book(s) detached", shelf_id, detached)
        return detached

    def add_book_to_shelf(self, db: Session, shelf_id: int, requester_id: int, book_id: int) -> Shelf:
        """Add a book to a shelf. Raises AlreadyPresentError if it is already there."""
        shelf = self.get_shelf(db, shelf_id, requester_id)
        if book_id in shelf.book_ids:
            raise AlreadyPresentError()

        book = db.get(Book, book_id) if 1 <= book_id <= MAX_ID else None
        if not book:
            raise NotFoundError("Book not found")

        shelf.books.append(book)
        db.commit()
        db.refresh(shelf)
        return shelf

    def remove_book_from_shelf(self, db: Session, shelf_id: int, requester_id: int, book_id: int) -> Shelf:
        """Remove a book from a shelf. Removing an absent book is a no-op."""
        shelf = self.get_shelf(db, shelf_id, requester_id)
        remaining = [book for book in shelf.books if book.id != book_id]
        if len(remaining) != len(shelf.books):
            shelf.books = remaining
            db.commit()
            db.refresh(shelf)
        return shelf


_shelf_service: ShelfService | None = None


def get_shelf_service() -> ShelfService:
    """Get singleton shelf service instance."""
    global _shelf_service
    if _shelf_service is None:
        _shelf_service = ShelfService()
    return _shelf_service
