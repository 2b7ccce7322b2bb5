"""Create shelf and book tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "shelves",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_shelves_owner_id"), "shelves", ["owner_id"], unique=False)

    op.create_table(
        "books",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("genre", sa.String(length=128), nullable=True),
        sa.Column("publication_date", sa.Date(), nullable=True),
        sa.Column("cover_image_url", sa.String(length=1024), nullable=False),
        sa.Column("isbn", sa.String(length=13), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("personal_notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("shelf_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["shelf_id"], ["shelves.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("isbn"),
    )
    op.create_index(op.f("ix_books_title"), "books", ["title"], unique=False)
    op.create_index(op.f("ix_books_shelf_id"), "books", ["shelf_id"], unique=False)

    op.create_table(
        "book_authors",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.ForeignKeyConstraint(["book_id"], ["books.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_book_authors_book_id"), "book_authors", ["book_id"], unique=False)
    op.create_index(op.f("ix_book_authors_name"), "book_authors", ["name"], unique=False)

    op.create_table(
        "book_reviews",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("reviewer_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["book_id"], ["books.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_book_reviews_book_id"), "book_reviews", ["book_id"], unique=False)
    op.create_index(op.f("ix_book_reviews_reviewer_id"), "book_reviews", ["reviewer_id"], unique=False)

    op.create_table(
        "shelf_books",
        sa.Column("shelf_id", sa.Integer(), nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["shelf_id"], ["shelves.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["book_id"], ["books.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("shelf_id", "book_id"),
    )


def downgrade() -> None:
    op.drop_table("shelf_books")
    op.drop_index(op.f("ix_book_reviews_reviewer_id"), table_name="book_reviews")
    op.drop_index(op.f("ix_book_reviews_book_id"), table_name="book_reviews")
    op.drop_table("book_reviews")
    op.drop_index(op.f("ix_book_authors_name"), table_name="book_authors")
    op.drop_index(op.f("ix_book_authors_book_id"), table_name="book_authors")
    op.drop_table("book_authors")
    op.drop_index(op.f("ix_books_shelf_id"), table_name="books")
    op.drop_index(op.f("ix_books_title"), table_name="books")
    op.drop_table("books")
    op.drop_index(op.f("ix_shelves_owner_id"), table_name="shelves")
    op.drop_table("shelves")
