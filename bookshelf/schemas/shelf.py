"""Pydantic schemas for shelf endpoints."""

from datetime import datetime

from pydantic import Field, field_validator

from bookshelf.schemas.book import BookResponse
from bookshelf.schemas.common import APIModel, EntityId


def _check_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if v and not 2 <= len(v) <= 50:
        raise ValueError("Shelf name must be between 2 and 50 characters long")
    return v


class ShelfCreate(APIModel):
    name: str | None = None
    books: list[EntityId] = []

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _check_name(v)


class ShelfUpdate(APIModel):
    name: str | None = Field(default=None, min_length=1)
    books: list[EntityId] | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        v = _check_name(v)
        if v == "":
            raise ValueError("Shelf name must be between 2 and 50 characters long")
        return v


class ShelfBookRequest(APIModel):
    book_id: EntityId


class ShelfResponse(APIModel):
    id: int
    owner_id: int
    name: str
    books: list[BookResponse]
    created_at: datetime
    updated_at: datetime
