"""
QuoteBook Backend — Quote SQLAlchemy Model
============================================

What:  ORM model for the `quotes` table.
Who:   Used by SqlQuoteStore for CRUD and by Alembic for schema management.

Table Design:
    - Integer autoincrement primary key: the database hands out ids, so two
      concurrent inserts can never collide, and ascending id order is
      insertion order.
    - author / category: short VARCHAR columns
    - content: TEXT, quotes can be arbitrarily long
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quotebook.database import Base

AUTHOR_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 100

# Upper bound of the Integer id column (PostgreSQL int4). Larger ids can match
# no row, and drivers reject them outright instead of returning nothing.
MAX_QUOTE_ID = 2**31 - 1


class Quote(Base):
    """A single quote row. Mutated only through the update operation."""

    __tablename__ = "quotes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    author: Mapped[str] = mapped_column(
        String(AUTHOR_MAX_LENGTH),
        nullable=False,
        comment="Who said it",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="The quote itself",
    )

    category: Mapped[str] = mapped_column(
        String(CATEGORY_MAX_LENGTH),
        nullable=False,
        comment="Free-form grouping label",
    )

    # SQLite otherwise hands a deleted max id to the next insert
    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, author='{self.author}', category='{self.category}')>"
