"""
Catalog Backend: Entity ⇄ Transfer Object Mapping
==================================================

What:  Pure functions converting between ORM entities and transfer objects,
       plus the partial-update rule.
Who:   Services (entity → DTO on the way out, validated input → entity on
       the way in) and repositories (apply_changes on update).

Rules:
    - Entity → DTO is total and lossless. ProductDto carries category_id,
      never the category's own fields.
    - DTO → entity copies the server-assigned fields (id, created_at,
      updated_at) as they are, so to_*_dto(*_from_dto(t)) == t.
    - Validated create input → entity never takes id or timestamps from the
      client; the entity constructor assigns them.
    - apply_changes overwrites only the keys it is given and stamps
      updated_at when at least one key is given.
"""

from datetime import datetime
from typing import Any, Dict, Optional, TypeVar, Union

from catalog.database import utcnow
from catalog.models.category import Category
from catalog.models.product import Product
from catalog.schemas.category import CategoryCreate, CategoryDto, CategoryUpdate
from catalog.schemas.product import ProductCreate, ProductDto, ProductUpdate

EntityT = TypeVar("EntityT", Category, Product)

# Never writable through apply_changes
SERVER_ASSIGNED_FIELDS = frozenset({"id", "created_at", "updated_at"})


# ── Entity → DTO ──────────────────────────────────────────────────────────

def to_category_dto(category: Category) -> CategoryDto:
    return CategoryDto.model_validate(category)


def to_product_dto(product: Product) -> ProductDto:
    return ProductDto.model_validate(product)


# ── DTO → Entity ──────────────────────────────────────────────────────────

def category_from_dto(dto: CategoryDto) -> Category:
    return Category(
        id=dto.id,
        name=dto.name,
        description=dto.description,
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )


def product_from_dto(dto: ProductDto) -> Product:
    return Product(
        id=dto.id,
        name=dto.name,
        description=dto.description,
        price=dto.price,
        stock_quantity=dto.stock_quantity,
        category_id=dto.category_id,
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )


# ── Validated input → Entity ──────────────────────────────────────────────

def new_category(data: CategoryCreate) -> Category:
    return Category(name=data.name, description=data.description)


def new_product(data: ProductCreate) -> Product:
    return Product(
        name=data.name,
        description=data.description,
        price=data.price,
        stock_quantity=data.stock_quantity,
        category_id=data.category_id,
    )


def changes_from_update(data: Union[CategoryUpdate, ProductUpdate]) -> Dict[str, Any]:
    """Only the fields the client actually sent, including explicit nulls."""
    return data.model_dump(exclude_unset=True)


# ── Partial Update ────────────────────────────────────────────────────────

def apply_changes(
    entity: EntityT,
    changes: Dict[str, Any],
    now: Optional[datetime] = None,
) -> EntityT:
    """
    Overwrite the given fields on `entity` in place and return it.

    Fields missing from `changes` keep their current value. updated_at is
    set to `now` (default: current UTC time) when `changes` is non-empty;
    an empty change set leaves the entity untouched.

    Raises:
        ValueError: `changes` names a server-assigned or unknown field
    """
    illegal = set(changes) & SERVER_ASSIGNED_FIELDS
    if illegal:
        raise ValueError(f"Server-assigned fields cannot be changed: {sorted(illegal)}")
    unknown = [key for key in changes if not hasattr(type(entity), key)]
    if unknown:
        raise ValueError(f"Unknown fields for {type(entity).__name__}: {unknown}")

    if not changes:
        return entity

    for key, value in changes.items():
        setattr(entity, key, value)
    entity.updated_at = now or utcnow()
    return entity
