"""
Catalog Backend: Product Repository
====================================

What:  Storage access for products.

Referential integrity:
    create() and update() check that category_id resolves to an existing
    category before writing, and the products.category_id foreign key
    rejects the write again if the category vanished in between.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import Select, func, select

from catalog.exceptions import ConstraintViolationError, NotFoundError
from catalog.mapping import apply_changes
from catalog.models.category import Category
from catalog.models.product import Product
from catalog.repositories.base import BaseRepository
from catalog.schemas.product import ProductFilter


class ProductRepository(BaseRepository):
    resource = "product"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _filtered(self, stmt: Select, criteria: ProductFilter) -> Select:
        if criteria.category_id is not None:
            stmt = stmt.where(Product.category_id == criteria.category_id)
        if criteria.name:
            stmt = stmt.where(Product.name.icontains(criteria.name, autoescape=True))
        if criteria.min_price is not None:
            stmt = stmt.where(Product.price >= criteria.min_price)
        if criteria.max_price is not None:
            stmt = stmt.where(Product.price <= criteria.max_price)
        if criteria.in_stock is True:
            stmt = stmt.where(Product.stock_quantity > 0)
        elif criteria.in_stock is False:
            stmt = stmt.where(Product.stock_quantity == 0)
        return stmt

    async def _ensure_category_exists(self, category_id: UUID) -> None:
        stmt = select(Category.id).where(Category.id == category_id)
        if await self._run("category check", self.session.scalar(stmt)) is None:
            raise ConstraintViolationError(
                message=f"Category with ID '{category_id}' does not exist",
                field="category_id",
                context={"category_id": str(category_id)},
            )

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def find_by_id(self, product_id: UUID) -> Optional[Product]:
        """Fetch a single product by primary key, or None if it does not exist."""
        return await self._run("find", self.session.get(Product, product_id))

    async def list(self, criteria: ProductFilter) -> List[Product]:
        """Return one page of products matching the filter, newest first."""
        stmt = self._filtered(select(Product), criteria)
        stmt = (
            stmt.order_by(Product.created_at.desc(), Product.id.desc())
            .offset(criteria.offset)
            .limit(criteria.limit)
        )
        result = await self._run("list", self.session.execute(stmt))
        return list(result.scalars().all())

    async def count(self, criteria: ProductFilter) -> int:
        stmt = self._filtered(select(func.count(Product.id)), criteria)
        return await self._run("count", self.session.scalar(stmt)) or 0

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def create(self, product: Product) -> Product:
        """
        Insert a new product.

        Raises:
            ConstraintViolationError: category_id does not reference a category
        """
        await self._ensure_category_exists(product.category_id)
        self.session.add(product)
        await self._flush("create", {"category_id": str(product.category_id)})
        return product

    async def update(self, product_id: UUID, changes: Dict[str, Any]) -> Product:
        """
        Apply a partial update.

        Raises:
            NotFoundError: no product with this id
            ConstraintViolationError: new category_id does not reference a category
        """
        product = await self.find_by_id(product_id)
        if product is None:
            raise NotFoundError(resource=self.resource, resource_id=str(product_id))

        if "category_id" in changes and changes["category_id"] != product.category_id:
            await self._ensure_category_exists(changes["category_id"])

        apply_changes(product, changes)
        await self._flush("update", {"product_id": str(product_id)})
        return product

    async def delete(self, product_id: UUID) -> None:
        """
        Raises:
            NotFoundError: no product with this id
        """
        product = await self.find_by_id(product_id)
        if product is None:
            raise NotFoundError(resource=self.resource, resource_id=str(product_id))
        await self.session.delete(product)
        await self._flush("delete", {"product_id": str(product_id)})
