"""Create categories, fx_rates and merchant_category_maps.

Revision ID: 5e1a9c3f7b20
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5e1a9c3f7b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) Category directory (user_id NULL = global default).
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("icon", sa.String(length=50), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_categories"),
    )
    op.create_index("ix_categories_user_id_is_active", "categories", ["user_id", "is_active"])
    op.create_index("ix_categories_name", "categories", ["name"])

    # 2) Immutable exchange rate snapshots.
    op.create_table(
        "fx_rates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("base_currency", sa.String(length=3), nullable=False),
        sa.Column("target_currency", sa.String(length=3), nullable=False),
        sa.Column("rate", sa.Float(), nullable=False),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_fx_rates"),
    )
    op.create_index(
        "ix_fx_rates_pair_fetched_at",
        "fx_rates",
        ["base_currency", "target_currency", "fetched_at"],
    )

    # 3) Learned merchant mappings, unique per (scope_key, merchant_key).
    op.create_table(
        "merchant_category_maps",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scope_key", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("merchant_key", sa.String(length=255), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=False),
        sa.Column("confidence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("override_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            name="fk_merchant_category_maps_category_id_categories",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_merchant_category_maps"),
        sa.UniqueConstraint("scope_key", "merchant_key", name="uq_merchant_map_scope_key"),
    )


def downgrade() -> None:
    op.drop_table("merchant_category_maps")

    op.drop_index("ix_fx_rates_pair_fetched_at", table_name="fx_rates")
    op.drop_table("fx_rates")

    op.drop_index("ix_categories_name", table_name="categories")
    op.drop_index("ix_categories_user_id_is_active", table_name="categories")
    op.drop_table("categories")
