"""Shelf API endpoints. Every route is scoped to the authenticated owner."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.database import get_db
from bookshelf.dependencies import get_current_user
from bookshelf.models.user import User
from bookshelf.schemas.common import MessageResponse
from bookshelf.schemas.shelf import ShelfBookRequest, ShelfCreate, ShelfResponse, ShelfUpdate
from bookshelf.services.shelf import get_shelf_service

router = APIRouter(prefix=f"{get_settings().API_PREFIX}/shelves", tags=["Shelves"])


@router.get("", response_model=list[ShelfResponse])
def list_shelves(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ShelfResponse]:
    """List the current user's shelves."""
    shelves = get_shelf_service().list_shelves(db, user.id)
    return [ShelfResponse.model_validate(s) for s in shelves]


@router.post("", response_model=ShelfResponse, status_code=201)
def create_shelf(
    body: ShelfCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ShelfResponse:
    shelf = get_shelf_service().create_shelf(db, user.id, name=body.name, book_ids=body.books)
    return ShelfResponse.model_validate(shelf)


@router.get("/{shelf_id}", response_model=ShelfResponse)
def get_shelf(
    shelf_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ShelfResponse:
    shelf = get_shelf_service().get_shelf(db, shelf_id, user.id)
    return ShelfResponse.model_validate(shelf)


@router.put("/{shelf_id}", response_model=ShelfResponse)
def update_shelf(
    shelf_id: int,
    body: ShelfUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ShelfResponse:
    """Rename a shelf and/or replace its book set."""
    shelf = get_shelf_service().update_shelf(db, shelf_id, user.id, name=body.name, book_ids=body.books)
    return ShelfResponse.model_validate(shelf)


@router.delete("/{shelf_id}", response_model=MessageResponse)
def delete_shelf(
    shelf_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a shelf. Books assigned to it are left unassigned."""
    get_shelf_service().delete_shelf(db, shelf_id, user.id)
    return MessageResponse(message="Shelf deleted successfully")


@router.post("/{shelf_id}/books", response_model=ShelfResponse)
def add_book_to_shelf(
    shelf_id: int,
    body: ShelfBookRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ShelfResponse:
    shelf = get_shelf_service().add_book_to_shelf(db, shelf_id, user.id, body.book_id)
    return ShelfResponse.model_validate(shelf)


@router.delete("/{shelf_id}/books", response_model=ShelfResponse)
def remove_book_from_shelf(
    shelf_id: int,
    body: ShelfBookRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ShelfResponse:
    shelf = get_shelf_service().remove_book_from_shelf(db, shelf_id, user.id, body.book_id)
    return ShelfResponse.model_validate(shelf)
