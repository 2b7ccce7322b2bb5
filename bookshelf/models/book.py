"""Book, author and review models."""

from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from bookshelf.database import Base

DEFAULT_COVER_IMAGE_URL = "https://images.pexels.com/photos/1148399/pexels-photo-1148399.jpeg"
BOOK_STATUSES = ("Read", "Currently Reading", "Want to Read")


class Book(Base):
    """Book in the catalogue, optionally assigned to one shelf."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(512), nullable=False, index=True)
    genre = Column(String(128), nullable=True)
    publication_date = Column(Date, nullable=True)
    cover_image_url = Column(String(1024), nullable=False, default=DEFAULT_COVER_IMAGE_URL)
    isbn = Column(String(13), nullable=True, unique=True)
    tags = Column(JSON, nullable=False, default=list)
    personal_notes = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="Want to Read")
    shelf_id = Column(Integer, ForeignKey("shelves.id"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    author_entries = relationship(
        "BookAuthor",
        order_by="BookAuthor.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    reviews = relationship(
        "BookReview",
        order_by="BookReview.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def authors(self) -> list[str]:
        return [entry.name for entry in self.author_entries]

    @authors.setter
    def authors(self, names: list[str]) -> None:
        self.author_entries = [BookAuthor(position=i, name=name) for i, name in enumerate(names)]

    @property
    def author_list(self) -> str:
        return ", ".join(self.authors)

    @property
    def average_rating(self) -> float:
        if not self.reviews:
            return 0
        return sum(review.rating for review in self.reviews) / len(self.reviews)


class BookAuthor(Base):
    """One entry of a book's ordered author list."""

    __tablename__ = "book_authors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    name = Column(String(256), nullable=False, index=True)


class BookReview(Base):
    """User review of a book."""

    __tablename__ = "book_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(String(1000), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
