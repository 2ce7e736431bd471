"""
Catalog Backend: Product Request/Response Schemas
==================================================

What:  Pydantic models for the product API contract.
How:   - ProductCreate / ProductUpdate: inbound payloads with declarative
         per-field rules (checked by catalog.validation)
       - ProductDto: immutable outbound projection of a Product entity
       - ProductFilter: criteria accepted by ProductRepository.list

Field rules:
    name            required, trimmed, 1..100 characters
    description     optional
    price           exact decimal, strictly greater than zero, at most 12 digits
                    with 4 after the point (the NUMERIC(12, 4) column)
    stock_quantity  integer 0..2147483647 (defaults to 0 on create)
    category_id     required UUID; existence is checked by the repository

ProductDto exposes category_id only. The category itself is never embedded.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from catalog.config import settings
from catalog.schemas.common import PageInfo
from catalog.types import INT4_MAX, PRICE_PRECISION, PRICE_SCALE, canonical_decimal


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """Payload for POST /api/products."""
    name: str = Field(
        min_length=1,
        max_length=settings.product_name_max_length,
        description="Product name",
    )
    description: Optional[str] = Field(default=None, description="Optional description")
    price: Decimal = Field(
        gt=0,
        max_digits=PRICE_PRECISION,
        decimal_places=PRICE_SCALE,
        description="Unit price; must be greater than zero",
    )
    stock_quantity: int = Field(default=0, ge=0, le=INT4_MAX, description="Units in stock")
    category_id: uuid.UUID = Field(description="ID of an existing category")

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    @field_validator("price")
    @classmethod
    def canonical_price(cls, v: Decimal) -> Decimal:
        return canonical_decimal(v)


class ProductUpdate(BaseModel):
    """
    Payload for PUT /api/products/{id} (partial update).

    Same rules as ProductCreate, but every field may be omitted.
    Explicit null is only accepted for description (clears it).
    """
    name: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=settings.product_name_max_length,
    )
    description: Optional[str] = Field(default=None)
    price: Optional[Decimal] = Field(
        default=None, gt=0, max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE
    )
    stock_quantity: Optional[int] = Field(default=None, ge=0, le=INT4_MAX)
    category_id: Optional[uuid.UUID] = Field(default=None)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    @field_validator("name", "price", "stock_quantity", "category_id")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("price")
    @classmethod
    def canonical_price(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return canonical_decimal(v) if v is not None else v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductDto(BaseModel):
    """
    Outbound representation of a product.
    Returned by GET/POST/PUT /api/products endpoints.

    price is serialized as a decimal string in JSON ("9.99") so no precision
    is lost on the wire.
    """
    id: uuid.UUID = Field(description="Unique product identifier")
    name: str = Field(description="Product name")
    description: Optional[str] = Field(default=None, description="Optional description")
    price: Decimal = Field(description="Unit price (exact decimal)")
    stock_quantity: int = Field(description="Units in stock")
    category_id: uuid.UUID = Field(description="Owning category identifier")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Last modification timestamp (UTC); null if never modified",
    )

    model_config = {"from_attributes": True, "frozen": True}


class ProductListResponse(PageInfo):
    """Paginated response for GET /api/products and GET /api/categories/{id}/products."""
    items: List[ProductDto] = Field(description="Products on this page")


# ══════════════════════════════════════════════════════════════════════════
# Query Models
# ══════════════════════════════════════════════════════════════════════════


class ProductFilter(BaseModel):
    """
    Listing criteria for products. Every criterion is optional and they combine with AND.

    category_id: only products of this category
    name:        case-insensitive substring match
    min_price / max_price: inclusive price bounds
    in_stock:    True → stock_quantity > 0, False → stock_quantity == 0
    """
    category_id: Optional[uuid.UUID] = Field(default=None)
    name: Optional[str] = Field(default=None)
    min_price: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE
    )
    max_price: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE
    )
    in_stock: Optional[bool] = Field(default=None)
    limit: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size)
    offset: int = Field(default=0, ge=0, le=INT4_MAX)
