"""Service-level tests that do not go through HTTP."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from sqlalchemy.orm import Session

from bookshelf.config import Settings, get_settings
from bookshelf.errors import (
    AlreadyPresentError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    NotFoundOrForbiddenError,
)
from bookshelf.models.book import Book
from bookshelf.models.user import User
from bookshelf.services.auth import AuthService, hash_reset_token
from bookshelf.services.book import BookService
from bookshelf.services.jwt import JWTService
from bookshelf.services.passwords import hash_password, verify_password
from bookshelf.services.shelf import ShelfService


class TestPasswords:
    """Tests for bcrypt password hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password("secret1")
        assert hashed != "secret1"
        assert hashed.startswith("$2")
        assert verify_password("secret1", hashed)
        assert not verify_password("secret2", hashed)

    def test_same_password_different_hashes(self):
        assert hash_password("secret1") != hash_password("secret1")

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("secret1", "not-a-bcrypt-hash")

    def test_password_is_write_only(self):
        user = User(username="carol", email="carol@example.com", password="secret1")
        assert user.check_password("secret1")
        with pytest.raises(AttributeError):
            _ = user.password


class TestJWTService:
    """Tests for session token handling."""

    def test_roundtrip(self):
        service = JWTService()
        assert service.get_user_id(service.create_token(42)) == 42

    def test_expired_token(self):
        service = JWTService()
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": "42", "iat": past, "exp": past + timedelta(hours=1)},
            service.secret_key,
            algorithm=service.algorithm,
        )
        assert service.decode_token(token) is None
        assert service.get_user_id(token) is None

    def test_tampered_token(self):
        service = JWTService()
        token = service.create_token(42)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        assert service.get_user_id(tampered) is None

    def test_missing_subject(self):
        service = JWTService()
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            service.secret_key,
            algorithm=service.algorithm,
        )
        assert service.get_user_id(token) is None


class TestSettings:
    """Tests for configuration warnings."""

    def test_test_settings(self):
        settings = get_settings()
        assert settings.APP_ENV == "test"
        assert not settings.is_production

    def test_missing_secret_is_generated(self, monkeypatch):
        monkeypatch.setattr(Settings, "JWT_SECRET_KEY", "")
        settings = Settings()
        assert settings.JWT_SECRET_KEY
        assert any("JWT_SECRET_KEY" in warning for warning in settings.validate())


class TestAuthService:
    """Tests for authentication rules."""

    def test_login_failures_are_identical(self, db_session: Session, test_user: dict):
        service = AuthService()
        with pytest.raises(InvalidCredentialsError) as unknown:
            service.login(db_session, "nobody@example.com", "secret1")
        with pytest.raises(InvalidCredentialsError) as wrong:
            service.login(db_session, "alice@example.com", "wrong")
        assert unknown.value.message == wrong.value.message
        assert unknown.value.status_code == wrong.value.status_code == 401

    def test_request_reset_unknown_email(self, db_session: Session):
        with pytest.raises(NotFoundError):
            AuthService().request_password_reset(db_session, "nobody@example.com")

    def test_reset_consumes_token(self, db_session: Session, test_user: dict):
        service = AuthService()
        user = db_session.get(User, test_user["user_id"])
        token = service.issue_password_reset_token(db_session, user)
        assert user.password_reset_token == hash_reset_token(token)

        service.reset_password(db_session, token, "brandnew1")
        with pytest.raises(InvalidOrExpiredTokenError):
            service.reset_password(db_session, token, "another1")

    def test_expired_reset_token(self, db_session: Session, test_user: dict):
        service = AuthService()
        user = db_session.get(User, test_user["user_id"])
        token = service.issue_password_reset_token(db_session, user)
        user.password_reset_expires = datetime.utcnow() - timedelta(minutes=1)
        db_session.commit()

        with pytest.raises(InvalidOrExpiredTokenError):
            service.reset_password(db_session, token, "brandnew1")
        db_session.refresh(user)
        assert user.check_password("secret1")


class TestShelfService:
    """Tests for ownership and membership rules."""

    def _book(self, db_session: Session, title: str, shelf_id: int | None = None) -> Book:
        book = Book(title=title, authors=["Anon"], shelf_id=shelf_id)
        db_session.add(book)
        db_session.commit()
        return book

    def test_missing_and_foreign_raise_same_error(self, db_session: Session, test_user: dict, other_user: dict):
        service = ShelfService()
        shelf = service.create_shelf(db_session, test_user["user_id"], "Private")

        with pytest.raises(NotFoundOrForbiddenError) as foreign:
            service.get_shelf(db_session, shelf.id, other_user["user_id"])
        with pytest.raises(NotFoundOrForbiddenError) as missing:
            service.get_shelf(db_session, 9999, other_user["user_id"])
        assert foreign.value.message == missing.value.message

    def test_add_twice(self, db_session: Session, test_user: dict):
        service = ShelfService()
        book = self._book(db_session, "Dune")
        shelf = service.create_shelf(db_session, test_user["user_id"], "Sci-Fi")
        service.add_book_to_shelf(db_session, shelf.id, test_user["user_id"], book.id)

        with pytest.raises(AlreadyPresentError):
            service.add_book_to_shelf(db_session, shelf.id, test_user["user_id"], book.id)
        assert service.get_shelf(db_session, shelf.id, test_user["user_id"]).book_ids == [book.id]

    def test_remove_absent(self, db_session: Session, test_user: dict):
        service = ShelfService()
        book = self._book(db_session, "Dune")
        shelf = service.create_shelf(db_session, test_user["user_id"], "Sci-Fi", [book.id])

        result = service.remove_book_from_shelf(db_session, shelf.id, test_user["user_id"], book.id + 100)
        assert result.book_ids == [book.id]

    def test_delete_detaches_books(self, db_session: Session, test_user: dict):
        service = ShelfService()
        shelf = service.create_shelf(db_session, test_user["user_id"], "Doomed")
        books = [self._book(db_session, f"Book {i}", shelf.id) for i in range(4)]

        assert service.delete_shelf(db_session, shelf.id, test_user["user_id"]) == 4
        for book in books:
            db_session.refresh(book)
            assert book.shelf_id is None


class TestBookService:
    """Tests for catalogue search."""

    def test_search_title_or_author(self, db_session: Session):
        service = BookService()
        harry = Book(title="Harry Potter", authors=["Someone Else"])
        hyphenated = Book(title="Untitled", authors=["J.K. Rowling-Potter"])
        hunger = Book(title="Hunger Games", authors=["Suzanne Collins"])
        db_session.add_all([harry, hyphenated, hunger])
        db_session.commit()

        assert [b.id for b in service.search_books(db_session, "potter")] == [harry.id, hyphenated.id]
        assert service.search_books(db_session, "nobody") == []
