"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-01-20 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    scope_enum = sa.Enum("lifetime", "year", "month", name="scope_enum")
    scope_enum.create(op.get_bind(), checkfirst=True)

    # --- watch_records ---
    op.create_table(
        "watch_records",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("watch_date", sa.Date(), nullable=False),
        sa.Column("source_id", sa.String(255), nullable=True),
        sa.Column("counts_toward_membership", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("added_manually", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_watch_records_watch_date", "watch_records", ["watch_date"])

    # --- user_settings ---
    op.create_table(
        "user_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("letterboxd_username", sa.String(64), nullable=False, server_default=""),
        sa.Column("last_sync", sa.DateTime(timezone=True), nullable=True),
        sa.Column("subscription_cost", sa.Numeric(10, 2), nullable=False, server_default="23.95"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("avg_ticket_price", sa.Numeric(10, 2), nullable=False, server_default="18.50"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("default_view", sa.Enum(
            "lifetime", "year", "month", name="scope_enum", create_type=False,
        ), nullable=False, server_default="lifetime"),
        sa.Column("currency", sa.String(8), nullable=False, server_default="USD"),
        sa.Column("notifications", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("user_settings")
    op.drop_index("ix_watch_records_watch_date", table_name="watch_records")
    op.drop_table("watch_records")
    sa.Enum(name="scope_enum").drop(op.get_bind(), checkfirst=True)
