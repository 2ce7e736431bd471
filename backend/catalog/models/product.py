"""
Catalog Backend: Product SQLAlchemy Model
==========================================

What:  ORM model representing the `products` table.
Who:   Used by ProductRepository for CRUD operations and by Alembic for schema management.

Table Design:
    - price: NUMERIC(12, 4) via ExactDecimal, mapped to decimal.Decimal
      (scaled BIGINT on SQLite, so no value passes through a float)
    - stock_quantity: non-negative (CHECK constraint)
    - category_id: FK to categories.id with ON DELETE RESTRICT, so a category
      that still owns products cannot be removed by the database either
    - created_at: set once; updated_at: NULL until the first mutation

    Index on category_id serves the "products of a category" lookup, which is
    also what the delete-category guard counts.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from catalog.database import Base, utcnow
from catalog.types import PRICE_PRECISION, PRICE_SCALE, ExactDecimal


class Product(Base, kw_only=True):
    """
    A sellable product belonging to exactly one category.

    Construction:
        Product(name=..., price=Decimal("9.99"), category_id=...) is the
        minimum; id and created_at are assigned, stock_quantity defaults to 0.

    Query Patterns:
        - Get single product: WHERE id = :uuid (primary key)
        - Products of a category: WHERE category_id = :uuid (idx_products_category_id)
        - Listing: ORDER BY created_at DESC
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Product name",
    )

    price: Mapped[Decimal] = mapped_column(
        ExactDecimal(PRICE_PRECISION, PRICE_SCALE),
        nullable=False,
        comment="Unit price, exact decimal, strictly positive",
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Owning category",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Optional free-text description",
    )

    stock_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Units in stock, never negative",
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default_factory=uuid.uuid4,
        comment="Unique identifier, immutable after creation",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default_factory=utcnow,
        comment="When this product was created (UTC)",
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="When this product was last modified (UTC); NULL until first update",
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        Index("idx_products_category_id", "category_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Product(id={self.id}, name='{self.name}', price={self.price}, "
            f"category_id={self.category_id})>"
        )
