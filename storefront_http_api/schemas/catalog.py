"""
storefront_http_api/schemas/catalog.py

Pydantic models for products, categories and sizes: the public catalog
view-models as well as the back-office create/update payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from storefront_http_api.db.models import ProductStatus

from .common import APIModel, PageMeta


# ---------------------------------------------------------------------------
# Sizes
# ---------------------------------------------------------------------------


class SizeBase(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    length: float = Field(0, ge=0)
    width: float = Field(0, ge=0)
    height: float = Field(0, ge=0)
    box_type: Optional[str] = Field(default=None, max_length=100)
    shipping_cost: float = Field(0, ge=0, description="Charged once per cart line using this size.")


class SizeCreate(SizeBase):
    pass


class SizeUpdate(APIModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    length: Optional[float] = Field(default=None, ge=0)
    width: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)
    box_type: Optional[str] = Field(default=None, max_length=100)
    shipping_cost: Optional[float] = Field(default=None, ge=0)


class SizeRead(SizeBase):
    id: int
    volume: float


class SizeStats(APIModel):
    total: int
    avg_shipping_cost: float
    with_products: int


class SizeListResponse(APIModel):
    items: List[SizeRead]
    stats: SizeStats


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class CategoryBrief(APIModel):
    id: int
    name: str
    slug: str


class CategoryBase(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    seo_title: Optional[str] = Field(default=None, max_length=255)
    seo_description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True


class CategoryCreate(CategoryBase):
    slug: Optional[str] = Field(default=None, max_length=255)
    sort_order: Optional[int] = Field(
        default=None, ge=0, description="Defaults to one past the current maximum."
    )


class CategoryUpdate(APIModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    seo_title: Optional[str] = Field(default=None, max_length=255)
    seo_description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(default=None, ge=0)


class CategoryRead(CategoryBase):
    id: int
    slug: str
    sort_order: int
    created_at: datetime


class CategoryWithCount(CategoryRead):
    products_count: int = 0


class CategoryReorderItem(APIModel):
    id: int
    sort_order: int = Field(..., ge=0)


class CategoryStats(APIModel):
    total: int
    active: int
    with_products: int
    total_stock: int


class CategoryListResponse(APIModel):
    items: List[CategoryWithCount]
    stats: Optional[CategoryStats] = None


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class ProductSummary(APIModel):
    id: int
    name: str
    slug: str
    price: float
    compare_price: Optional[float] = None
    discount_percentage: Optional[float] = None
    main_image_url: str
    image_urls: List[str]
    average_rating: float
    review_count: int
    stock_quantity: int
    is_in_stock: bool
    featured: bool
    status: ProductStatus
    category: Optional[CategoryBrief] = None
    size: Optional[SizeRead] = None
    badge: Optional[str] = Field(default=None, description='"Sale", "New", "Best Seller" or null.')


class ProductRead(ProductSummary):
    description: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    social_image_url: Optional[str] = None
    sku: str
    images: List[str]
    category_id: Optional[int] = None
    size_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProductCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    seo_title: Optional[str] = Field(default=None, max_length=255)
    seo_description: Optional[str] = None
    social_image_url: Optional[str] = Field(default=None, max_length=500)
    price: float = Field(..., ge=0)
    compare_price: Optional[float] = Field(default=None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    sku: str = Field(..., min_length=1, max_length=100)
    images: List[str] = Field(default_factory=list, max_length=10)
    status: ProductStatus = ProductStatus.ACTIVE
    featured: bool = False
    category_id: Optional[int] = None
    size_id: Optional[int] = None


class ProductUpdate(APIModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    seo_title: Optional[str] = Field(default=None, max_length=255)
    seo_description: Optional[str] = None
    social_image_url: Optional[str] = Field(default=None, max_length=500)
    price: Optional[float] = Field(default=None, ge=0)
    compare_price: Optional[float] = Field(default=None, ge=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    sku: Optional[str] = Field(default=None, min_length=1, max_length=100)
    images: Optional[List[str]] = Field(default=None, max_length=10)
    status: Optional[ProductStatus] = None
    featured: Optional[bool] = None
    category_id: Optional[int] = None
    size_id: Optional[int] = None


class PriceRange(APIModel):
    min: float
    max: float


class ProductFilters(APIModel):
    search: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort: str = "newest"


class ProductListResponse(APIModel):
    items: List[ProductSummary]
    meta: PageMeta
    filters: ProductFilters
    categories: List[CategoryWithCount]
    price_range: PriceRange


class BreadcrumbItem(APIModel):
    name: str
    url: Optional[str] = None


class ReviewPublic(APIModel):
    id: int
    rating: int
    stars: str
    comment: Optional[str] = None
    author: str
    created_at: datetime


class ProductDetailResponse(APIModel):
    product: ProductRead
    reviews: List[ReviewPublic]
    related_products: List[ProductSummary]
    breadcrumb: List[BreadcrumbItem]


class CategoryDetailResponse(APIModel):
    category: CategoryRead
    items: List[ProductSummary]
    meta: PageMeta
    filters: ProductFilters
    price_range: PriceRange = Field(description="Cheapest and dearest purchasable product in the category.")


class HomeResponse(APIModel):
    featured_products: List[ProductSummary]
    categories: List[CategoryWithCount]


# ---------------------------------------------------------------------------
# Back-office
# ---------------------------------------------------------------------------


class ProductAdminStats(APIModel):
    total: int
    active: int
    low_stock_count: int
    total_value: float


class ProductAdminListResponse(APIModel):
    items: List[ProductRead]
    meta: PageMeta
    stats: ProductAdminStats
    filters: Dict[str, Optional[str]]


class QuickStockRequest(APIModel):
    action: str = Field(..., pattern="^(increment|decrement)$")


__all__ = [
    "SizeCreate",
    "SizeUpdate",
    "SizeRead",
    "SizeStats",
    "SizeListResponse",
    "CategoryBrief",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryRead",
    "CategoryWithCount",
    "CategoryReorderItem",
    "CategoryStats",
    "CategoryListResponse",
    "ProductSummary",
    "ProductRead",
    "ProductCreate",
    "ProductUpdate",
    "PriceRange",
    "ProductFilters",
    "ProductListResponse",
    "BreadcrumbItem",
    "ReviewPublic",
    "ProductDetailResponse",
    "CategoryDetailResponse",
    "HomeResponse",
    "ProductAdminStats",
    "ProductAdminListResponse",
    "QuickStockRequest",
]
