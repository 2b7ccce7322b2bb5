"""Shelf model and shelf membership table."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from bookshelf.database import Base

DEFAULT_SHELF_NAME = "New Shelf"

shelf_books = Table(
    "shelf_books",
    Base.metadata,
    Column("shelf_id", Integer, ForeignKey("shelves.id", ondelete="CASCADE"), primary_key=True),
    Column("book_id", Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
)


class Shelf(Base):
    """Named, user-owned collection of books."""

    __tablename__ = "shelves"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(50), nullable=False, default=DEFAULT_SHELF_NAME)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    books = relationship("Book", secondary=shelf_books, order_by="Book.id", lazy="selectin")

    @property
    def book_ids(self) -> list[int]:
        return [book.id for book in self.books]
