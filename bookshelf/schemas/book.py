"""Pydantic schemas for book endpoints."""

import re
from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import Field, field_validator

from bookshelf.schemas.common import APIModel, EntityId

ISBN_PATTERN = re.compile(r"^(97(8|9))?\d{9}(\d|X)$")
COVER_URL_PATTERN = re.compile(r"^https?://.*\.(jpeg|jpg|png|gif|webp)$")

AuthorName = Annotated[str, Field(max_length=256)]

BookStatus = Literal["Read", "Currently Reading", "Want to Read"]


def _clean_authors(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    names = [name.strip() for name in v]
    if not names or any(not name for name in names):
        raise ValueError("At least one author is required")
    return names


def _check_isbn(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        return None
    if not ISBN_PATTERN.match(v):
        raise ValueError(f"{v} is not a valid ISBN number!")
    return v


def _check_cover_url(v: str | None) -> str | None:
    if v and not COVER_URL_PATTERN.match(v):
        raise ValueError(f"{v} is not a valid image URL!")
    return v or None


class BookCreate(APIModel):
    title: str = Field(min_length=2, max_length=512)
    authors: list[AuthorName] = Field(min_length=1)
    genre: str | None = Field(default=None, max_length=128)
    publication_date: date | None = None
    cover_image_url: str | None = Field(default=None, max_length=1024)
    isbn: str | None = None
    tags: list[str] = []
    personal_notes: str | None = Field(default=None, max_length=2000)
    status: BookStatus = "Want to Read"
    shelf: EntityId | None = None

    @field_validator("title", "genre", "personal_notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("authors")
    @classmethod
    def clean_authors(cls, v):
        return _clean_authors(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return [tag.strip() for tag in v if tag.strip()]

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, v):
        return _check_isbn(v)

    @field_validator("cover_image_url")
    @classmethod
    def check_cover_url(cls, v):
        return _check_cover_url(v)


class BookUpdate(APIModel):
    """Partial update. Only fields present in the request body are applied."""

    title: str | None = Field(default=None, min_length=2, max_length=512)
    authors: list[AuthorName] | None = Field(default=None, min_length=1)
    genre: str | None = Field(default=None, max_length=128)
    publication_date: date | None = None
    cover_image_url: str | None = Field(default=None, max_length=1024)
    isbn: str | None = None
    tags: list[str] | None = None
    personal_notes: str | None = Field(default=None, max_length=2000)
    status: BookStatus | None = None
    shelf: EntityId | None = None

    @field_validator("title", "genre", "personal_notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("authors")
    @classmethod
    def clean_authors(cls, v):
        return _clean_authors(v)

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, v):
        return _check_isbn(v)

    @field_validator("cover_image_url")
    @classmethod
    def check_cover_url(cls, v):
        return _check_cover_url(v)


class ReviewCreate(APIModel):
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=1000)

    @field_validator("comment", mode="before")
    @classmethod
    def strip_comment(cls, v):
        return v.strip() if isinstance(v, str) else v


class ReviewResponse(APIModel):
    id: int
    reviewer_id: int
    rating: int
    comment: str | None
    created_at: datetime


class BookResponse(APIModel):
    id: int
    title: str
    authors: list[str]
    author_list: str
    genre: str | None
    publication_date: date | None
    cover_image_url: str
    isbn: str | None
    tags: list[str]
    personal_notes: str | None
    status: str
    shelf_id: int | None
    reviews: list[ReviewResponse]
    average_rating: float
    created_at: datetime
    updated_at: datetime
