"""Create quotes table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `quotes` table, the only table of the service.
Portable: plain Integer/String/Text columns, runs on PostgreSQL and SQLite.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author", sa.String(255), nullable=False, comment="Who said it"),
        sa.Column("content", sa.Text(), nullable=False, comment="The quote itself"),
        sa.Column(
            "category",
            sa.String(100),
            nullable=False,
            comment="Free-form grouping label",
        ),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    """Drops the table and every quote in it."""
    op.drop_table("quotes")
