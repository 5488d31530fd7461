"""create users, manufacturers, status_types, advertisements, chats

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nickname", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("is_cpf_document", sa.Boolean(), server_default="true", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- manufacturers ---
    op.create_table(
        "manufacturers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_manufacturers"),
        sa.UniqueConstraint("name", name="uq_manufacturers_name"),
    )

    # --- status_types ---
    status_types = op.create_table(
        "status_types",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("description", sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_status_types"),
    )
    op.bulk_insert(
        status_types,
        [
            {"id": 1, "description": "Ativo"},
            {"id": 2, "description": "Removido"},
            {"id": 3, "description": "Pausado"},
            {"id": 4, "description": "Vendido"},
        ],
    )

    # --- advertisements ---
    op.create_table(
        "advertisements",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("manufacturer_id", sa.Integer(), nullable=True),
        sa.Column("status_id", sa.Integer(), server_default="1", nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("model_description", sa.String(length=255), nullable=False),
        sa.Column("brand_description", sa.String(length=255), nullable=True),
        sa.Column("value", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("year_manufacture", sa.Integer(), nullable=False),
        sa.Column("year_model", sa.Integer(), nullable=False),
        sa.Column("views", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_stopped", sa.Integer(), server_default="0", nullable=False),
        sa.Column("paused_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("images", sa.String(length=512), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_advertisements"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE",
            name="fk_advertisements_user_id_users",
        ),
        sa.ForeignKeyConstraint(
            ["manufacturer_id"], ["manufacturers.id"],
            name="fk_advertisements_manufacturer_id_manufacturers",
        ),
        sa.ForeignKeyConstraint(
            ["status_id"], ["status_types.id"],
            name="fk_advertisements_status_id_status_types",
        ),
        sa.CheckConstraint("value >= 0", name="ck_advertisements_value_non_negative"),
        sa.CheckConstraint("status_id IN (1, 2, 3, 4)", name="ck_advertisements_status_known"),
    )
    op.create_index("ix_advertisements_user_id", "advertisements", ["user_id"])
    op.create_index("ix_advertisements_manufacturer_id", "advertisements", ["manufacturer_id"])
    op.create_index("ix_advertisements_status_id", "advertisements", ["status_id"])

    # --- chats ---
    op.create_table(
        "chats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("advertisement_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_chats"),
        sa.ForeignKeyConstraint(
            ["advertisement_id"], ["advertisements.id"], ondelete="CASCADE",
            name="fk_chats_advertisement_id_advertisements",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="SET NULL",
            name="fk_chats_user_id_users",
        ),
    )
    op.create_index("ix_chats_advertisement_id", "chats", ["advertisement_id"])


def downgrade() -> None:
    op.drop_index("ix_chats_advertisement_id", table_name="chats")
    op.drop_table("chats")

    op.drop_index("ix_advertisements_status_id", table_name="advertisements")
    op.drop_index("ix_advertisements_manufacturer_id", table_name="advertisements")
    op.drop_index("ix_advertisements_user_id", table_name="advertisements")
    op.drop_table("advertisements")

    op.drop_table("status_types")
    op.drop_table("manufacturers")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
