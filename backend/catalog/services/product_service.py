"""
Catalog Backend: Product Service
=================================

What:  Business operations for products.
How:   Each mutation runs the same pipeline:

    ┌──────────┐    ┌────────────┐    ┌──────────────┐    ┌──────────┐
    │ Payload  │───▶│  Validate  │───▶│  Repository  │───▶│   Map    │
    │ (Route)  │    │ (rules)    │    │ (persist)    │    │ (DTO)    │
    └──────────┘    └────────────┘    └──────────────┘    └──────────┘

    A payload that fails validation never reaches the repository.
Who:   Called by the product route handlers.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.exceptions import NotFoundError
from catalog.mapping import changes_from_update, new_product, to_product_dto
from catalog.repositories import ProductRepository
from catalog.schemas.product import ProductDto, ProductFilter, ProductListResponse
from catalog.validation import validate_product_create, validate_product_update

logger = logging.getLogger(__name__)


class ProductService:
    """
    Business logic layer for product operations.

    Responsibilities:
        - create_product(): validate, persist, return DTO with server-assigned id/created_at
        - get_product() / list_products(): read paths
        - update_product(): partial update, stamps updated_at
        - delete_product()
    """

    async def create_product(self, db: AsyncSession, payload: Any) -> ProductDto:
        """
        Create a product from a raw request payload.

        Returns:
            ProductDto with a new id, created_at set and updated_at null

        Raises:
            ValidationError: payload failed the field rules
            ConstraintViolationError: category_id does not reference a category
            PersistenceError: storage failed
        """
        data = validate_product_create(payload)
        product = await ProductRepository(db).create(new_product(data))
        logger.info("Product created: %s in category %s", product.id, product.category_id)
        return to_product_dto(product)

    async def get_product(self, db: AsyncSession, product_id: UUID) -> ProductDto:
        """
        Raises:
            NotFoundError: product with given ID does not exist (→ 404)
        """
        product = await ProductRepository(db).find_by_id(product_id)
        if product is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return to_product_dto(product)

    async def list_products(self, db: AsyncSession, criteria: ProductFilter) -> ProductListResponse:
        repo = ProductRepository(db)
        products = await repo.list(criteria)
        total_count = await repo.count(criteria)
        return ProductListResponse(
            items=[to_product_dto(product) for product in products],
            total_count=total_count,
            limit=criteria.limit,
            offset=criteria.offset,
            has_more=criteria.offset + len(products) < total_count,
        )

    async def update_product(self, db: AsyncSession, product_id: UUID, payload: Any) -> ProductDto:
        """
        Partial update: fields omitted from `payload` keep their values.

        Raises:
            ValidationError, NotFoundError, ConstraintViolationError, PersistenceError
        """
        changes = changes_from_update(validate_product_update(payload))
        product = await ProductRepository(db).update(product_id, changes)
        logger.info("Product updated: %s fields=%s", product_id, sorted(changes))
        return to_product_dto(product)

    async def delete_product(self, db: AsyncSession, product_id: UUID) -> None:
        await ProductRepository(db).delete(product_id)
        logger.info("Product deleted: %s", product_id)


# ── Singleton Instance ────────────────────────────────────────────────────
product_service = ProductService()
