"""
Catalog Backend: Category SQLAlchemy Model
===========================================

What:  ORM model representing the `categories` table.
Who:   Used by CategoryRepository for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, assigned in Python at construction
    - name: unique, bounded length
    - updated_at: NULL until the first mutation

    Products are not held as a collection on Category. The one-to-many link
    lives only on products.category_id and is followed with a query
    (ProductRepository.list with a category filter).
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catalog.database import Base, utcnow


class Category(Base, kw_only=True):
    """
    A product category.

    Construction:
        Category(name="Tools") assigns id and created_at; name is required.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Display name, unique across categories",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Optional free-text description",
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
        comment="When this category was created (UTC)",
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="When this category was last modified (UTC); NULL until first update",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
