# storefront_http_api/routers/catalog.py

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.schemas.catalog import (
    CategoryDetailResponse,
    CategoryWithCount,
    HomeResponse,
    ProductDetailResponse,
    ProductListResponse,
)
from storefront_http_api.services.catalog_service import CATEGORY_PER_PAGE, CatalogService

router = APIRouter(tags=["catalog"])


def get_catalog_service(session: Session = Depends(get_session)) -> CatalogService:
    return CatalogService(session)


@router.get("/", response_model=HomeResponse, summary="Home page")
def home(service: CatalogService = Depends(get_catalog_service)) -> HomeResponse:
    return service.home()


@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List products",
    description=(
        "Active, in-stock products with search, category and price filters. "
        "Sort is one of price, price_desc, name, newest, rating, popular, most_bought."
    ),
)
def list_products(
    *,
    service: CatalogService = Depends(get_catalog_service),
    search: Optional[str] = Query(None, description="Matches name and description."),
    category: Optional[str] = Query(None, description="Category slug."),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    sort: str = Query("newest"),
    page: int = Query(1, ge=1),
) -> ProductListResponse:
    return service.list_products(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
    )


@router.get("/products/{slug}", response_model=ProductDetailResponse, summary="Product detail")
def get_product(
    *,
    slug: str,
    service: CatalogService = Depends(get_catalog_service),
) -> ProductDetailResponse:
    return service.get_product(slug)


@router.get("/categories", response_model=List[CategoryWithCount], summary="List categories")
def list_categories(
    service: CatalogService = Depends(get_catalog_service),
) -> List[CategoryWithCount]:
    return service.categories_with_counts()


@router.get(
    "/categories/{slug}",
    response_model=CategoryDetailResponse,
    summary="Category page",
    description="Active, in-stock products of one category, 12 per page by default, sorted by name.",
)
def get_category(
    *,
    slug: str,
    service: CatalogService = Depends(get_catalog_service),
    search: Optional[str] = Query(None, description="Matches name and description."),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    sort: str = Query("name"),
    page: int = Query(1, ge=1),
    per_page: int = Query(CATEGORY_PER_PAGE, ge=1, le=48),
) -> CategoryDetailResponse:
    return service.get_category(
        slug,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
        per_page=per_page,
    )
