"""Create backend group table.

Revision ID: 0001_create_be_groups
Revises:
Create Date: 2026-10-19 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_create_be_groups"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "be_groups",
        sa.Column("uid", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("explicit_allowdeny", sa.Text(), nullable=False, server_default=""),
        sa.PrimaryKeyConstraint("uid", name=op.f("pk_be_groups")),
    )


def downgrade() -> None:
    op.drop_table("be_groups")
