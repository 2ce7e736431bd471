"""
Catalog Backend: Category Repository
=====================================

What:  Storage access for categories.

Constraint checks performed here before the database sees the write:
    - name must not belong to another category (unique)
    - a category that still owns products cannot be deleted

The database enforces both again (UNIQUE on name, ON DELETE RESTRICT on
products.category_id); a race past the pre-checks still surfaces as
ConstraintViolationError through _flush.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import Select, func, select

from catalog.exceptions import ConstraintViolationError, NotFoundError
from catalog.mapping import apply_changes
from catalog.models.category import Category
from catalog.models.product import Product
from catalog.repositories.base import BaseRepository
from catalog.schemas.category import CategoryFilter


class CategoryRepository(BaseRepository):
    resource = "category"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _filtered(self, stmt: Select, criteria: CategoryFilter) -> Select:
        if criteria.name:
            stmt = stmt.where(Category.name.icontains(criteria.name, autoescape=True))
        return stmt

    async def _ensure_name_free(self, name: str, exclude_id: Optional[UUID] = None) -> None:
        stmt = select(Category.id).where(Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        existing = await self._run("name check", self.session.scalar(stmt))
        if existing is not None:
            raise ConstraintViolationError(
                message=f"A category named '{name}' already exists",
                field="name",
                context={"existing_id": str(existing)},
            )

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def find_by_id(self, category_id: UUID) -> Optional[Category]:
        """Fetch a single category by primary key, or None if it does not exist."""
        return await self._run("find", self.session.get(Category, category_id))

    async def exists(self, category_id: UUID) -> bool:
        stmt = select(Category.id).where(Category.id == category_id)
        return await self._run("exists", self.session.scalar(stmt)) is not None

    async def list(self, criteria: CategoryFilter) -> List[Category]:
        """Return one page of categories, newest first."""
        stmt = self._filtered(select(Category), criteria)
        stmt = (
            stmt.order_by(Category.created_at.desc(), Category.id.desc())
            .offset(criteria.offset)
            .limit(criteria.limit)
        )
        result = await self._run("list", self.session.execute(stmt))
        return list(result.scalars().all())

    async def count(self, criteria: CategoryFilter) -> int:
        stmt = self._filtered(select(func.count(Category.id)), criteria)
        return await self._run("count", self.session.scalar(stmt)) or 0

    async def count_products(self, category_id: UUID) -> int:
        """Number of products referencing this category."""
        stmt = select(func.count(Product.id)).where(Product.category_id == category_id)
        return await self._run("count products", self.session.scalar(stmt)) or 0

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def create(self, category: Category) -> Category:
        """
        Insert a new category.

        Raises:
            ConstraintViolationError: name already taken
        """
        await self._ensure_name_free(category.name)
        self.session.add(category)
        await self._flush("create", {"name": category.name})
        return category

    async def update(self, category_id: UUID, changes: Dict[str, Any]) -> Category:
        """
        Apply a partial update.

        Raises:
            NotFoundError: no category with this id
            ConstraintViolationError: new name already taken
        """
        category = await self.find_by_id(category_id)
        if category is None:
            raise NotFoundError(resource=self.resource, resource_id=str(category_id))

        if "name" in changes and changes["name"] != category.name:
            await self._ensure_name_free(changes["name"], exclude_id=category_id)

        apply_changes(category, changes)
        await self._flush("update", {"category_id": str(category_id)})
        return category

    async def delete(self, category_id: UUID) -> None:
        """
        Delete a category that owns no products.

        Raises:
            NotFoundError: no category with this id
            ConstraintViolationError: products still reference the category
        """
        category = await self.find_by_id(category_id)
        if category is None:
            raise NotFoundError(resource=self.resource, resource_id=str(category_id))

        product_count = await self.count_products(category_id)
        if product_count:
            raise ConstraintViolationError(
                message=(
                    f"Category '{category.name}' still has {product_count} product(s); "
                    "move or delete them first"
                ),
                context={"category_id": str(category_id), "product_count": product_count},
            )

        await self.session.delete(category)
        await self._flush("delete", {"category_id": str(category_id)})
