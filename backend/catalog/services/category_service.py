"""
Catalog Backend: Category Service
==================================

What:  Business operations for categories.
How:   validate payload → build/patch entity → persist via CategoryRepository
       → map to CategoryDto.
Who:   Called by the category route handlers.

Error Handling Strategy:
    ValidationError is raised before the repository is touched.
    NotFoundError / ConstraintViolationError / PersistenceError come from the
    repository and are re-raised unchanged.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.exceptions import NotFoundError
from catalog.mapping import changes_from_update, new_category, to_category_dto, to_product_dto
from catalog.repositories import CategoryRepository, ProductRepository
from catalog.schemas.category import CategoryDto, CategoryFilter, CategoryListResponse
from catalog.schemas.product import ProductFilter, ProductListResponse
from catalog.validation import validate_category_create, validate_category_update

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Stateless: every call receives the session it should work in.

    Responsibilities:
        - create_category / update_category / delete_category
        - get_category / list_categories
        - list_category_products: the Category → Products back-reference
    """

    async def create_category(self, db: AsyncSession, payload: Any) -> CategoryDto:
        """
        Raises:
            ValidationError: payload failed the field rules
            ConstraintViolationError: name already taken
        """
        data = validate_category_create(payload)
        category = await CategoryRepository(db).create(new_category(data))
        logger.info("Category created: %s (%s)", category.id, category.name)
        return to_category_dto(category)

    async def get_category(self, db: AsyncSession, category_id: UUID) -> CategoryDto:
        category = await CategoryRepository(db).find_by_id(category_id)
        if category is None:
            raise NotFoundError(resource="category", resource_id=str(category_id))
        return to_category_dto(category)

    async def list_categories(self, db: AsyncSession, criteria: CategoryFilter) -> CategoryListResponse:
        repo = CategoryRepository(db)
        categories = await repo.list(criteria)
        total_count = await repo.count(criteria)
        return CategoryListResponse(
            items=[to_category_dto(category) for category in categories],
            total_count=total_count,
            limit=criteria.limit,
            offset=criteria.offset,
            has_more=criteria.offset + len(categories) < total_count,
        )

    async def list_category_products(
        self,
        db: AsyncSession,
        category_id: UUID,
        criteria: ProductFilter,
    ) -> ProductListResponse:
        """
        Products owned by one category.

        The category filter on `criteria` is overridden with `category_id`.

        Raises:
            NotFoundError: the category does not exist
        """
        if not await CategoryRepository(db).exists(category_id):
            raise NotFoundError(resource="category", resource_id=str(category_id))

        scoped = criteria.model_copy(update={"category_id": category_id})
        repo = ProductRepository(db)
        products = await repo.list(scoped)
        total_count = await repo.count(scoped)
        return ProductListResponse(
            items=[to_product_dto(product) for product in products],
            total_count=total_count,
            limit=scoped.limit,
            offset=scoped.offset,
            has_more=scoped.offset + len(products) < total_count,
        )

    async def update_category(self, db: AsyncSession, category_id: UUID, payload: Any) -> CategoryDto:
        """
        Partial update: only fields present in `payload` change.

        Raises:
            ValidationError, NotFoundError, ConstraintViolationError
        """
        changes = changes_from_update(validate_category_update(payload))
        category = await CategoryRepository(db).update(category_id, changes)
        logger.info("Category updated: %s fields=%s", category_id, sorted(changes))
        return to_category_dto(category)

    async def delete_category(self, db: AsyncSession, category_id: UUID) -> None:
        """
        Raises:
            NotFoundError: no such category
            ConstraintViolationError: the category still owns products
        """
        await CategoryRepository(db).delete(category_id)
        logger.info("Category deleted: %s", category_id)


category_service = CategoryService()
