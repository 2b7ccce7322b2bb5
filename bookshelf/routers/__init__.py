"""API routers."""

from bookshelf.routers.auth import router as auth_router
from bookshelf.routers.books import router as books_router
from bookshelf.routers.shelves import router as shelves_router
from bookshelf.routers.users import router as users_router

__all__ = ["auth_router", "users_router", "shelves_router", "books_router"]
