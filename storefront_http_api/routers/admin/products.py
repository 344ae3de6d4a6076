# storefront_http_api/routers/admin/products.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from storefront_http_api.db.models import ProductStatus
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.schemas.catalog import (
    ProductAdminListResponse,
    ProductCreate,
    ProductRead,
    ProductUpdate,
    QuickStockRequest,
)
from storefront_http_api.services.admin_catalog_service import AdminProductsService
from storefront_http_api.services.image_upload_service import (
    ImageUploadService,
    get_image_upload_service,
)

router = APIRouter(
    prefix="/admin/products",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_admin_products_service(
    session: Session = Depends(get_session),
    images: ImageUploadService = Depends(get_image_upload_service),
) -> AdminProductsService:
    return AdminProductsService(session, images)


@router.get(
    "",
    response_model=ProductAdminListResponse,
    summary="List products",
    description=(
        "Search covers name, SKU and description. stock_filter is one of "
        "in_stock, low_stock, out_of_stock."
    ),
)
def list_products(
    *,
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None, description="Category slug."),
    status_filter: Optional[ProductStatus] = Query(None, alias="status"),
    stock_filter: Optional[str] = Query(None, pattern="^(in_stock|low_stock|out_of_stock)$"),
    sort: str = Query("created_at", pattern="^(name|price|stock_quantity|created_at|status)$"),
    direction: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    service: AdminProductsService = Depends(get_admin_products_service),
) -> ProductAdminListResponse:
    return service.index(
        search=search,
        category=category,
        status=status_filter,
        stock_filter=stock_filter,
        sort=sort,
        direction=direction,
        page=page,
    )


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
def create_product(
    *,
    payload: ProductCreate,
    service: AdminProductsService = Depends(get_admin_products_service),
) -> ProductRead:
    return service.create(payload)


@router.get("/{product_id}", response_model=ProductRead, summary="Get a product")
def get_product(
    *,
    product_id: int,
    service: AdminProductsService = Depends(get_admin_products_service),
) -> ProductRead:
    return service.show(product_id)


@router.put("/{product_id}", response_model=ProductRead, summary="Update a product")
def update_product(
    *,
    product_id: int,
    payload: ProductUpdate,
    service: AdminProductsService = Depends(get_admin_products_service),
) -> ProductRead:
    return service.update(product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product and its images",
)
def delete_product(
    *,
    product_id: int,
    service: AdminProductsService = Depends(get_admin_products_service),
) -> None:
    service.delete(product_id)


@router.post(
    "/{product_id}/quick-stock",
    response_model=ProductRead,
    summary="Adjust stock by one",
    description="decrement never takes stock below zero.",
)
def quick_stock(
    *,
    product_id: int,
    payload: QuickStockRequest,
    service: AdminProductsService = Depends(get_admin_products_service),
) -> ProductRead:
    return service.quick_stock(product_id, payload.action)


@router.post(
    "/{product_id}/images",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a product image",
    description="jpeg, png, gif or webp; at most 10 images per product.",
)
async def upload_image(
    *,
    product_id: int,
    file: UploadFile = File(...),
    service: AdminProductsService = Depends(get_admin_products_service),
) -> ProductRead:
    data = await file.read()
    return await service.upload_image(
        product_id,
        filename=file.filename,
        content_type=file.content_type,
        data=data,
    )


@router.delete(
    "/{product_id}/images/{image}",
    response_model=ProductRead,
    summary="Remove a product image",
)
def remove_image(
    *,
    product_id: int,
    image: str,
    service: AdminProductsService = Depends(get_admin_products_service),
) -> ProductRead:
    return service.remove_image(product_id, image)
