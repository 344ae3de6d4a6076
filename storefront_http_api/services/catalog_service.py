# storefront_http_api/services/catalog_service.py

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from storefront_http_api.exceptions import NotFoundError
from storefront_http_api.repositories.catalog import (
    STOREFRONT_SORTS,
    CategoriesRepository,
    ProductsRepository,
)
from storefront_http_api.repositories.reviews import ReviewsRepository
from storefront_http_api.schemas.catalog import (
    BreadcrumbItem,
    CategoryDetailResponse,
    CategoryRead,
    CategoryWithCount,
    HomeResponse,
    PriceRange,
    ProductDetailResponse,
    ProductFilters,
    ProductListResponse,
)
from storefront_http_api.schemas.common import PageMeta

from .presenters import category_with_count, product_read, product_summary, review_public

STOREFRONT_PER_PAGE = 9
CATEGORY_PER_PAGE = 12


class CatalogService:
    """
    Read-only storefront catalog: product listing with filters, product
    detail pages and category pages. Only active products are ever shown,
    and listings additionally hide products that are out of stock.
    """

    def __init__(self, session: Session) -> None:
        self._products = ProductsRepository(session)
        self._categories = CategoriesRepository(session)
        self._reviews = ReviewsRepository(session)

    def categories_with_counts(self) -> List[CategoryWithCount]:
        return [
            category_with_count(category, count)
            for category, count in self._categories.with_product_counts(active_only=True)
        ]

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def list_products(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: str = "newest",
        page: int = 1,
        per_page: int = STOREFRONT_PER_PAGE,
    ) -> ProductListResponse:
        if sort not in STOREFRONT_SORTS:
            sort = "newest"

        stmt = self._products.storefront_query(
            search=search,
            category_slug=category,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
        )
        rows, total = self._products.paginate(stmt, page=page, per_page=per_page)
        low, high = self._products.price_range()

        return ProductListResponse(
            items=[product_summary(p) for p in rows],
            meta=PageMeta.build(page=page, per_page=per_page, total=total),
            filters=ProductFilters(
                search=search,
                category=category,
                min_price=min_price,
                max_price=max_price,
                sort=sort,
            ),
            categories=self.categories_with_counts(),
            price_range=PriceRange(min=low, max=high),
        )

    def get_product(self, slug: str) -> ProductDetailResponse:
        product = self._products.get_active_by_slug(slug)
        if product is None:
            raise NotFoundError(f"Product '{slug}' not found.")

        breadcrumb = [
            BreadcrumbItem(name="Home", url="/"),
            BreadcrumbItem(name="Products", url="/products"),
        ]
        if product.category is not None:
            breadcrumb.append(
                BreadcrumbItem(
                    name=product.category.name,
                    url=f"/products?category={product.category.slug}",
                )
            )
        breadcrumb.append(BreadcrumbItem(name=product.name))

        return ProductDetailResponse(
            product=product_read(product),
            reviews=[review_public(r) for r in self._reviews.approved_for_product(product.id)],
            related_products=[product_summary(p) for p in self._products.related(product)],
            breadcrumb=breadcrumb,
        )

    # -------------------------------------------------------------------------
    # Categories / home
    # -------------------------------------------------------------------------

    def get_category(
        self,
        slug: str,
        *,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: str = "name",
        page: int = 1,
        per_page: int = CATEGORY_PER_PAGE,
    ) -> CategoryDetailResponse:
        category = self._categories.get_by_slug(slug)
        if category is None or not category.is_active:
            raise NotFoundError(f"Category '{slug}' not found.")
        if sort not in STOREFRONT_SORTS:
            sort = "name"

        stmt = self._products.storefront_query(
            search=search,
            category_slug=category.slug,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
        )
        rows, total = self._products.paginate(stmt, page=page, per_page=per_page)
        low, high = self._products.price_range(category_id=category.id)

        return CategoryDetailResponse(
            category=CategoryRead.model_validate(category),
            items=[product_summary(p) for p in rows],
            meta=PageMeta.build(page=page, per_page=per_page, total=total),
            filters=ProductFilters(
                search=search,
                category=category.slug,
                min_price=min_price,
                max_price=max_price,
                sort=sort,
            ),
            price_range=PriceRange(min=low, max=high),
        )

    def home(self) -> HomeResponse:
        return HomeResponse(
            featured_products=[product_summary(p) for p in self._products.featured()],
            categories=self.categories_with_counts(),
        )


__all__ = ["CatalogService", "STOREFRONT_PER_PAGE", "CATEGORY_PER_PAGE"]
