"""
Catalog Backend: Category Route Handlers
=========================================

What:  /api/categories CRUD endpoints plus the category's product listing.

Endpoints:
    GET    /api/categories                 list (name filter, offset pagination)
    GET    /api/categories/{id}            detail
    GET    /api/categories/{id}/products   products owned by the category
    POST   /api/categories                 create → 201
    PUT    /api/categories/{id}            partial update
    DELETE /api/categories/{id}            delete → 204, 409 while products remain
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import settings
from catalog.database import get_db_session
from catalog.schemas.category import CategoryDto, CategoryFilter, CategoryListResponse
from catalog.schemas.common import ErrorResponse
from catalog.schemas.product import ProductFilter, ProductListResponse
from catalog.services.category_service import category_service
from catalog.types import INT4_MAX

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=CategoryListResponse, summary="List categories")
async def list_categories(
    response: Response,
    name: str | None = Query(default=None, description="Case-insensitive substring of the name"),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(default=0, ge=0, le=INT4_MAX),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryListResponse:
    criteria = CategoryFilter(name=name, limit=limit, offset=offset)
    result = await category_service.list_categories(db, criteria)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/{category_id}",
    response_model=CategoryDto,
    summary="Get a single category by ID",
    responses={404: {"model": ErrorResponse}},
)
async def get_category(
    category_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryDto:
    return await category_service.get_category(db, category_id)


@router.get(
    "/{category_id}/products",
    response_model=ProductListResponse,
    summary="List the products of a category",
    responses={404: {"model": ErrorResponse}},
)
async def list_category_products(
    category_id: UUID,
    response: Response,
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(default=0, ge=0, le=INT4_MAX),
    db: AsyncSession = Depends(get_db_session),
) -> ProductListResponse:
    result = await category_service.list_category_products(
        db, category_id, ProductFilter(limit=limit, offset=offset)
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.post(
    "",
    response_model=CategoryDto,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_category(
    response: Response,
    payload: Any = Body(..., examples=[{"name": "Tools", "description": "Hand and power tools"}]),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryDto:
    category = await category_service.create_category(db, payload)
    response.headers["Location"] = f"{router.prefix}/{category.id}"
    return category


@router.put(
    "/{category_id}",
    response_model=CategoryDto,
    summary="Update a category (partial)",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_category(
    category_id: UUID,
    payload: Any = Body(..., examples=[{"name": "Garden tools"}]),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryDto:
    return await category_service.update_category(db, category_id, payload)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an empty category",
    description="Rejected with 409 while any product still references the category.",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_category(
    category_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await category_service.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
