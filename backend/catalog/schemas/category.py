"""
Catalog Backend: Category Request/Response Schemas
===================================================

What:  Pydantic models for the category API contract.
How:   - CategoryCreate / CategoryUpdate: inbound payloads; field rules are
         declared on the fields themselves and checked by catalog.validation
       - CategoryDto: immutable outbound projection of a Category entity
       - CategoryFilter: criteria accepted by CategoryRepository.list

Inbound models forbid unknown keys, so server-assigned fields (id,
created_at, updated_at) can never be supplied by a client.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from catalog.config import settings
from catalog.schemas.common import PageInfo
from catalog.types import INT4_MAX


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CategoryCreate(BaseModel):
    """Payload for POST /api/categories."""
    name: str = Field(
        min_length=1,
        max_length=settings.category_name_max_length,
        description="Category name (required, unique)",
    )
    description: Optional[str] = Field(default=None, description="Optional description")

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class CategoryUpdate(BaseModel):
    """
    Payload for PUT /api/categories/{id} (partial update).

    Omitted fields are left untouched. `name` may not be null;
    `description: null` clears the description.
    """
    name: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=settings.category_name_max_length,
    )
    description: Optional[str] = Field(default=None)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    @field_validator("name")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("may not be null")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CategoryDto(BaseModel):
    """
    Outbound representation of a category.
    Returned by GET/POST/PUT /api/categories endpoints.
    """
    id: uuid.UUID = Field(description="Unique category identifier")
    name: str = Field(description="Category name")
    description: Optional[str] = Field(default=None, description="Optional description")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Last modification timestamp (UTC); null if never modified",
    )

    model_config = {"from_attributes": True, "frozen": True}


class CategoryListResponse(PageInfo):
    """Paginated response for GET /api/categories."""
    items: List[CategoryDto] = Field(description="Categories on this page")


# ══════════════════════════════════════════════════════════════════════════
# Query Models
# ══════════════════════════════════════════════════════════════════════════


class CategoryFilter(BaseModel):
    """
    Listing criteria for categories.

    name: case-insensitive substring match
    limit / offset: offset pagination window
    """
    name: Optional[str] = Field(default=None)
    limit: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size)
    offset: int = Field(default=0, ge=0, le=INT4_MAX)
