"""
Catalog Backend: Product Route Handlers
========================================

What:  /api/products CRUD endpoints.
How:   Extracts path/query parameters and the raw JSON body, delegates to
       ProductService, returns DTOs. The body is taken as-is so that field
       validation happens in one place (catalog.validation) and reports every
       violation at once.

Endpoints:
    GET    /api/products          list (filters + offset pagination, X-Total-Count)
    GET    /api/products/{id}     detail
    POST   /api/products          create → 201
    PUT    /api/products/{id}     partial update
    DELETE /api/products/{id}     delete → 204
"""

from decimal import Decimal
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import settings
from catalog.database import get_db_session
from catalog.schemas.common import ErrorResponse
from catalog.schemas.product import ProductDto, ProductFilter, ProductListResponse
from catalog.services.product_service import product_service
from catalog.types import INT4_MAX, PRICE_PRECISION, PRICE_SCALE

router = APIRouter(prefix="/api/products", tags=["Products"])

PRODUCT_EXAMPLE = {
    "name": "Widget",
    "description": "A very useful widget",
    "price": "9.99",
    "stock_quantity": 5,
    "category_id": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
}


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    responses={400: {"model": ErrorResponse}},
)
async def list_products(
    response: Response,
    category_id: UUID | None = Query(default=None, description="Only products of this category"),
    name: str | None = Query(default=None, description="Case-insensitive substring of the name"),
    min_price: Decimal | None = Query(
        default=None, ge=0, max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE,
        description="Inclusive lower price bound",
    ),
    max_price: Decimal | None = Query(
        default=None, ge=0, max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE,
        description="Inclusive upper price bound",
    ),
    in_stock: bool | None = Query(default=None, description="true: stock > 0, false: stock == 0"),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(default=0, ge=0, le=INT4_MAX),
    db: AsyncSession = Depends(get_db_session),
) -> ProductListResponse:
    criteria = ProductFilter(
        category_id=category_id,
        name=name,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        limit=limit,
        offset=offset,
    )
    result = await product_service.list_products(db, criteria)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/{product_id}",
    response_model=ProductDto,
    summary="Get a single product by ID",
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ProductDto:
    return await product_service.get_product(db, product_id)


@router.post(
    "",
    response_model=ProductDto,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_product(
    response: Response,
    payload: Any = Body(..., examples=[PRODUCT_EXAMPLE]),
    db: AsyncSession = Depends(get_db_session),
) -> ProductDto:
    """
    Create a product. The referenced category must exist (409 otherwise).
    id, created_at and updated_at are assigned by the server.
    """
    product = await product_service.create_product(db, payload)
    response.headers["Location"] = f"{router.prefix}/{product.id}"
    return product


@router.put(
    "/{product_id}",
    response_model=ProductDto,
    summary="Update a product (partial)",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_product(
    product_id: UUID,
    payload: Any = Body(..., examples=[{"price": "19.99"}]),
    db: AsyncSession = Depends(get_db_session),
) -> ProductDto:
    """Only the fields present in the body are changed; updated_at is stamped."""
    return await product_service.update_product(db, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await product_service.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
