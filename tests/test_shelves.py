"""Tests for shelf endpoints and ownership scoping."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookshelf.models.book import Book
from bookshelf.models.shelf import Shelf, shelf_books


def _create_shelf(client: TestClient, user: dict, **payload) -> dict:
    response = client.post("/api/shelves", json=payload, headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateShelf:
    """Tests for creating shelves."""

    def test_create_shelf(self, client: TestClient, test_user: dict):
        shelf = _create_shelf(client, test_user, name="Favorites")
        assert shelf["name"] == "Favorites"
        assert shelf["ownerId"] == test_user["user_id"]
        assert shelf["books"] == []

    def test_default_name(self, client: TestClient, test_user: dict):
        assert _create_shelf(client, test_user)["name"] == "New Shelf"
        assert _create_shelf(client, test_user, name="   ")["name"] == "New Shelf"

    def test_create_with_books(self, client: TestClient, test_user: dict, book_factory):
        first = book_factory("Dune")
        second = book_factory("Emma", ["Jane Austen"])
        shelf = _create_shelf(client, test_user, name="Classics", books=[second["id"], first["id"]])
        assert [b["id"] for b in shelf["books"]] == sorted([first["id"], second["id"]])
        assert shelf["books"][0]["title"] == "Dune"

    def test_duplicate_books_rejected(self, client: TestClient, test_user: dict, book_factory):
        book = book_factory()
        response = client.post(
            "/api/shelves",
            json={"name": "Dupes", "books": [book["id"], book["id"]]},
            headers=test_user["headers"],
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Duplicate books are not allowed on the same shelf."

    def test_unknown_book_rejected(self, client: TestClient, test_user: dict):
        response = client.post("/api/shelves", json={"name": "Ghosts", "books": [999]}, headers=test_user["headers"])
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "books"

    def test_name_too_long(self, client: TestClient, test_user: dict):
        response = client.post("/api/shelves", json={"name": "x" * 51}, headers=test_user["headers"])
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

    def test_requires_auth(self, client: TestClient):
        response = client.post("/api/shelves", json={"name": "Favorites"})
        assert response.status_code == 401


class TestReadShelves:
    """Tests for listing and fetching shelves."""

    def test_list_only_own_shelves(self, client: TestClient, test_user: dict, other_user: dict):
        _create_shelf(client, test_user, name="Alice One")
        _create_shelf(client, test_user, name="Alice Two")
        _create_shelf(client, other_user, name="Bob Only")

        response = client.get("/api/shelves", headers=test_user["headers"])
        assert response.status_code == 200
        assert [s["name"] for s in response.json()] == ["Alice One", "Alice Two"]

        response = client.get("/api/shelves", headers=other_user["headers"])
        assert [s["name"] for s in response.json()] == ["Bob Only"]

    def test_get_own_shelf(self, client: TestClient, test_user: dict):
        shelf = _create_shelf(client, test_user, name="Favorites")
        response = client.get(f"/api/shelves/{shelf['id']}", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json()["name"] == "Favorites"

    def test_foreign_shelf_looks_missing(self, client: TestClient, test_user: dict, other_user: dict):
        """Another user's shelf and a nonexistent shelf are indistinguishable."""
        shelf = _create_shelf(client, test_user, name="Private")

        foreign = client.get(f"/api/shelves/{shelf['id']}", headers=other_user["headers"])
        missing = client.get("/api/shelves/9999", headers=other_user["headers"])
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json() == {"message": "Shelf not found"}

    def test_oversized_id_looks_missing(self, client: TestClient, test_user: dict):
        """An id too large for the store is just another missing shelf."""
        oversized = client.get("/api/shelves/99999999999999999999", headers=test_user["headers"])
        missing = client.get("/api/shelves/9999", headers=test_user["headers"])
        assert oversized.status_code == missing.status_code == 404
        assert oversized.json() == missing.json()

        for method in ("PUT", "DELETE"):
            response = client.request(
                method, "/api/shelves/99999999999999999999", json={"name": "Nope"}, headers=test_user["headers"]
            )
            assert response.status_code == 404

    def test_oversized_book_ids_rejected(self, client: TestClient, test_user: dict):
        shelf = _create_shelf(client, test_user, name="Reading")
        response = client.post(
            f"/api/shelves/{shelf['id']}/books",
            json={"bookId": 99999999999999999999},
            headers=test_user["headers"],
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "bookId"

        response = client.post(
            "/api/shelves",
            json={"name": "Huge", "books": [99999999999999999999]},
            headers=test_user["headers"],
        )
        assert response.status_code == 400

        response = client.post(f"/api/shelves/{shelf['id']}/books", json={"bookId": 0}, headers=test_user["headers"])
        assert response.status_code == 400


class TestUpdateShelf:
    """Tests for renaming shelves and replacing their books."""

    def test_rename(self, client: TestClient, test_user: dict):
        shelf = _create_shelf(client, test_user, name="Old")
        response = client.put(f"/api/shelves/{shelf['id']}", json={"name": "New"}, headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json()["name"] == "New"

    def test_blank_name_rejected(self, client: TestClient, test_user: dict):
        shelf = _create_shelf(client, test_user, name="Keep")
        response = client.put(f"/api/shelves/{shelf['id']}", json={"name": "  "}, headers=test_user["headers"])
        assert response.status_code == 400

    def test_replace_books(self, client: TestClient, test_user: dict, book_factory):
        first = book_factory("Dune")
        second = book_factory("Emma", ["Jane Austen"])
        shelf = _create_shelf(client, test_user, name="Mixed", books=[first["id"]])

        response = client.put(
            f"/api/shelves/{shelf['id']}",
            json={"books": [second["id"]]},
            headers=test_user["headers"],
        )
        assert response.status_code == 200
        assert [b["id"] for b in response.json()["books"]] == [second["id"]]
        assert response.json()["name"] == "Mixed"

    def test_cannot_update_foreign_shelf(self, client: TestClient, test_user: dict, other_user: dict):
        shelf = _create_shelf(client, test_user, name="Mine")
        response = client.put(f"/api/shelves/{shelf['id']}", json={"name": "Stolen"}, headers=other_user["headers"])
        assert response.status_code == 404

        unchanged = client.get(f"/api/shelves/{shelf['id']}", headers=test_user["headers"])
        assert unchanged.json()["name"] == "Mine"


class TestShelfMembership:
    """Tests for adding and removing single books."""

    def test_add_book(self, client: TestClient, test_user: dict, book_factory):
        book = book_factory()
        shelf = _create_shelf(client, test_user, name="Reading")
        response = client.post(
            f"/api/shelves/{shelf['id']}/books",
            json={"bookId": book["id"]},
            headers=test_user["headers"],
        )
        assert response.status_code == 200
        assert [b["id"] for b in response.json()["books"]] == [book["id"]]

    def test_add_duplicate_rejected(self, client: TestClient, test_user: dict, book_factory):
        book = book_factory()
        shelf = _create_shelf(client, test_user, name="Reading", books=[book["id"]])
        response = client.post(
            f"/api/shelves/{shelf['id']}/books",
            json={"bookId": book["id"]},
            headers=test_user["headers"],
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Book is already in the shelf."

        current = client.get(f"/api/shelves/{shelf['id']}", headers=test_user["headers"])
        assert [b["id"] for b in current.json()["books"]] == [book["id"]]

    def test_add_unknown_book(self, client: TestClient, test_user: dict):
        shelf = _create_shelf(client, test_user, name="Reading")
        response = client.post(f"/api/shelves/{shelf['id']}/books", json={"bookId": 424242}, headers=test_user["headers"])
        assert response.status_code == 404
        assert response.json()["message"] == "Book not found"

    def test_remove_book(self, client: TestClient, test_user: dict, book_factory):
        kept = book_factory("Dune")
        removed = book_factory("Emma", ["Jane Austen"])
        shelf = _create_shelf(client, test_user, name="Reading", books=[kept["id"], removed["id"]])

        response = client.request(
            "DELETE",
            f"/api/shelves/{shelf['id']}/books",
            json={"bookId": removed["id"]},
            headers=test_user["headers"],
        )
        assert response.status_code == 200
        assert [b["id"] for b in response.json()["books"]] == [kept["id"]]

    def test_remove_absent_book_is_noop(self, client: TestClient, test_user: dict, book_factory):
        book = book_factory()
        shelf = _create_shelf(client, test_user, name="Reading", books=[book["id"]])

        response = client.request(
            "DELETE",
            f"/api/shelves/{shelf['id']}/books",
            json={"bookId": 31337},
            headers=test_user["headers"],
        )
        assert response.status_code == 200
        assert [b["id"] for b in response.json()["books"]] == [book["id"]]

    def test_membership_on_foreign_shelf(self, client: TestClient, test_user: dict, other_user: dict, book_factory):
        book = book_factory()
        shelf = _create_shelf(client, test_user, name="Mine")
        response = client.post(
            f"/api/shelves/{shelf['id']}/books",
            json={"bookId": book["id"]},
            headers=other_user["headers"],
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Shelf not found"


class TestDeleteShelf:
    """Tests for deleting shelves."""

    def test_delete_detaches_all_books(
        self, client: TestClient, test_user: dict, book_factory, db_session: Session
    ):
        shelf = _create_shelf(client, test_user, name="Doomed")
        book_ids = [book_factory(f"Book {i}", shelf=shelf["id"])["id"] for i in range(3)]
        client.post(f"/api/shelves/{shelf['id']}/books", json={"bookId": book_ids[0]}, headers=test_user["headers"])

        response = client.delete(f"/api/shelves/{shelf['id']}", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json() == {"message": "Shelf deleted successfully"}

        db_session.expire_all()
        assert db_session.get(Shelf, shelf["id"]) is None
        for book_id in book_ids:
            book = db_session.get(Book, book_id)
            assert book is not None
            assert book.shelf_id is None
        remaining = db_session.execute(shelf_books.select().where(shelf_books.c.shelf_id == shelf["id"])).all()
        assert remaining == []

    def test_delete_then_get(self, client: TestClient, test_user: dict):
        shelf = _create_shelf(client, test_user, name="Gone")
        client.delete(f"/api/shelves/{shelf['id']}", headers=test_user["headers"])
        response = client.get(f"/api/shelves/{shelf['id']}", headers=test_user["headers"])
        assert response.status_code == 404

    def test_cannot_delete_foreign_shelf(self, client: TestClient, test_user: dict, other_user: dict):
        shelf = _create_shelf(client, test_user, name="Mine")
        response = client.delete(f"/api/shelves/{shelf['id']}", headers=other_user["headers"])
        assert response.status_code == 404

        still_there = client.get(f"/api/shelves/{shelf['id']}", headers=test_user["headers"])
        assert still_there.status_code == 200
