"""Create categories and products tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates `categories` and `products` with the foreign key between them.
How:   products.category_id → categories.id ON DELETE RESTRICT, so a category
       that still owns products cannot be deleted by the database either.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

from catalog.types import PRICE_PRECISION, PRICE_SCALE, ExactDecimal

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create categories, then products (which references categories)."""
    op.create_table(
        "categories",
        sa.Column(
            "id",
            sa.Uuid(),
            nullable=False,
            comment="Unique identifier, immutable after creation",
        ),
        sa.Column(
            "name",
            sa.String(100),
            nullable=False,
            comment="Display name, unique across categories",
        ),
        sa.Column(
            "description",
            sa.Text(),
            nullable=True,
            comment="Optional free-text description",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this category was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When this category was last modified (UTC); NULL until first update",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )

    op.create_table(
        "products",
        sa.Column(
            "id",
            sa.Uuid(),
            nullable=False,
            comment="Unique identifier, immutable after creation",
        ),
        sa.Column("name", sa.String(100), nullable=False, comment="Product name"),
        sa.Column(
            "description",
            sa.Text(),
            nullable=True,
            comment="Optional free-text description",
        ),
        # NUMERIC(12, 4); scaled BIGINT on SQLite
        sa.Column(
            "price",
            ExactDecimal(PRICE_PRECISION, PRICE_SCALE),
            nullable=False,
            comment="Unit price, exact decimal, strictly positive",
        ),
        sa.Column(
            "stock_quantity",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Units in stock, never negative",
        ),
        sa.Column("category_id", sa.Uuid(), nullable=False, comment="Owning category"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this product was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When this product was last modified (UTC); NULL until first update",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            name="fk_products_category_id",
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint("price > 0", name="ck_products_price_positive"),
        sa.CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    op.create_index("idx_products_category_id", "products", ["category_id"])


def downgrade() -> None:
    """Drop products first; it holds the foreign key."""
    op.drop_index("idx_products_category_id", table_name="products")
    op.drop_table("products")
    op.drop_table("categories")
