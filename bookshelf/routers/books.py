"""Book API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.database import get_db
from bookshelf.dependencies import get_current_user
from bookshelf.errors import ValidationError
from bookshelf.models.user import User
from bookshelf.schemas.book import BookCreate, BookResponse, BookUpdate, ReviewCreate
from bookshelf.schemas.common import MessageResponse
from bookshelf.services.book import get_book_service

router = APIRouter(prefix=f"{get_settings().API_PREFIX}/books", tags=["Books"])


@router.get("", response_model=list[BookResponse])
def list_books(db: Session = Depends(get_db)) -> list[BookResponse]:
    """List all books."""
    books = get_book_service().list_books(db)
    return [BookResponse.model_validate(b) for b in books]


@router.get("/search", response_model=list[BookResponse])
def search_books(
    q: str = Query(min_length=1, max_length=200),
    db: Session = Depends(get_db),
) -> list[BookResponse]:
    """Search books by title or author (case-insensitive substring)."""
    q = q.strip()
    if not q:
        raise ValidationError(errors=[{"field": "q", "message": "Search query must not be blank"}])
    books = get_book_service().search_books(db, q)
    return [BookResponse.model_validate(b) for b in books]


@router.get("/shelf/{shelf_id}", response_model=list[BookResponse])
def list_books_on_shelf(
    shelf_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[BookResponse]:
    """List books assigned to one of the current user's shelves."""
    books = get_book_service().list_books_on_shelf(db, shelf_id, user.id)
    return [BookResponse.model_validate(b) for b in books]


@router.get("/{book_id}", response_model=BookResponse)
def get_book(book_id: int, db: Session = Depends(get_db)) -> BookResponse:
    return BookResponse.model_validate(get_book_service().get_book(db, book_id))


@router.post("", response_model=BookResponse, status_code=201)
def create_book(
    body: BookCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BookResponse:
    book = get_book_service().create_book(db, body.model_dump(), user.id)
    return BookResponse.model_validate(book)


@router.put("/{book_id}", response_model=BookResponse)
def update_book(
    book_id: int,
    body: BookUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BookResponse:
    """Update book fields, including its shelf assignment."""
    book = get_book_service().update_book(db, book_id, body.model_dump(exclude_unset=True), user.id)
    return BookResponse.model_validate(book)


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    get_book_service().delete_book(db, book_id)
    return MessageResponse(message="Book deleted successfully")


@router.post("/{book_id}/review", response_model=BookResponse, status_code=201)
def add_review(
    book_id: int,
    body: ReviewCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BookResponse:
    """Add the current user's review to a book."""
    book = get_book_service().add_review(db, book_id, user.id, body.rating, body.comment)
    return BookResponse.model_validate(book)
