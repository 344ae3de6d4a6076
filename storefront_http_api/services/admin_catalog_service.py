# storefront_http_api/services/admin_catalog_service.py

"""
Back-office management of products, categories and sizes.

Each service follows the same shape: validate references and uniqueness,
persist through the repository, commit, and return the read schema.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.models import ProductStatus
from storefront_http_api.exceptions import BusinessRuleError, ConflictError, NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.catalog import (
    CategoriesRepository,
    ProductsRepository,
    SizesRepository,
)
from storefront_http_api.schemas.catalog import (
    CategoryCreate,
    CategoryListResponse,
    CategoryReorderItem,
    CategoryStats,
    CategoryUpdate,
    CategoryWithCount,
    ProductAdminListResponse,
    ProductAdminStats,
    ProductCreate,
    ProductRead,
    ProductUpdate,
    SizeCreate,
    SizeListResponse,
    SizeRead,
    SizeStats,
    SizeUpdate,
)
from storefront_http_api.schemas.common import PageMeta
from storefront_http_api.services.image_upload_service import (
    MAX_PRODUCT_IMAGES,
    ImageUploadService,
)
from storefront_http_api.services.presenters import category_with_count, product_read

logger = get_logger(__name__)

ADMIN_PRODUCTS_PER_PAGE = 20


def slugify(value: str) -> str:
    """ASCII, lower-case, dash-separated slug ("Café Crème 2" -> "cafe-creme-2")."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug or "item"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class AdminProductsService:
    def __init__(self, session: Session, images: Optional[ImageUploadService] = None) -> None:
        self._session = session
        self._repo = ProductsRepository(session)
        self._categories = CategoriesRepository(session)
        self._sizes = SizesRepository(session)
        self._images = images or ImageUploadService()

    def _require(self, product_id: int) -> models.Product:
        product = self._repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with id={product_id} not found.")
        return product

    def _check_references(self, fields: Dict[str, Any]) -> None:
        category_id = fields.get("category_id")
        if category_id is not None and self._categories.get_by_id(category_id) is None:
            raise NotFoundError(f"Category with id={category_id} not found.")
        size_id = fields.get("size_id")
        if size_id is not None and self._sizes.get_by_id(size_id) is None:
            raise NotFoundError(f"Size with id={size_id} not found.")

    def _check_unique(self, *, slug: Optional[str], sku: Optional[str], exclude_id: Optional[int] = None) -> None:
        if slug is not None and self._repo.slug_exists(slug, exclude_id=exclude_id):
            raise ConflictError(f"A product with slug '{slug}' already exists.")
        if sku is not None and self._repo.sku_exists(sku, exclude_id=exclude_id):
            raise ConflictError(f"A product with SKU '{sku}' already exists.")

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def index(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[ProductStatus] = None,
        stock_filter: Optional[str] = None,
        sort: str = "created_at",
        direction: str = "desc",
        page: int = 1,
    ) -> ProductAdminListResponse:
        stmt = self._repo.admin_query(
            search=search,
            category_slug=category,
            status=status,
            stock_filter=stock_filter,
            sort=sort,
            direction=direction,
        )
        rows, total = self._repo.paginate(stmt, page=page, per_page=ADMIN_PRODUCTS_PER_PAGE)
        return ProductAdminListResponse(
            items=[product_read(p) for p in rows],
            meta=PageMeta.build(page=page, per_page=ADMIN_PRODUCTS_PER_PAGE, total=total),
            stats=ProductAdminStats(**self._repo.admin_stats()),
            filters={
                "search": search,
                "category": category,
                "status": status.value if status is not None else None,
                "stock_filter": stock_filter,
                "sort": sort,
                "direction": direction,
            },
        )

    def show(self, product_id: int) -> ProductRead:
        return product_read(self._require(product_id))

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def create(self, payload: ProductCreate) -> ProductRead:
        fields = payload.model_dump()
        fields["slug"] = payload.slug or slugify(payload.name)
        self._check_references(fields)
        self._check_unique(slug=fields["slug"], sku=payload.sku)

        product = self._repo.add(models.Product(**fields))
        self._session.commit()
        logger.info("product_created", product_id=product.id, sku=product.sku)
        return product_read(product)

    def update(self, product_id: int, payload: ProductUpdate) -> ProductRead:
        product = self._require(product_id)
        fields = payload.model_dump(exclude_unset=True)
        if "slug" not in fields and fields.get("name"):
            fields["slug"] = slugify(fields["name"])

        self._check_references(fields)
        self._check_unique(slug=fields.get("slug"), sku=fields.get("sku"), exclude_id=product.id)

        self._repo.update_fields(product, fields)
        self._session.commit()
        logger.info("product_updated", product_id=product.id, fields=sorted(fields))
        return product_read(product)

    def delete(self, product_id: int) -> None:
        product = self._require(product_id)
        images = list(product.images or [])
        self._repo.delete(product)
        self._session.commit()
        self._images.delete_all(product_id, images)
        logger.info("product_deleted", product_id=product_id)

    def quick_stock(self, product_id: int, action: str) -> ProductRead:
        product = self._require(product_id)
        if action == "increment":
            product.increment_stock(1)
        elif product.stock_quantity > 0:
            product.decrement_stock(1)
        self._session.commit()
        logger.info("product_stock_adjusted", product_id=product.id, action=action)
        return product_read(product)

    async def upload_image(
        self,
        product_id: int,
        *,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
    ) -> ProductRead:
        product = self._require(product_id)
        if len(product.images or []) >= MAX_PRODUCT_IMAGES:
            raise BusinessRuleError(f"A product can have at most {MAX_PRODUCT_IMAGES} images.")

        stored = await self._images.save(
            product_id, filename=filename, content_type=content_type, data=data
        )
        # Reassign so the JSON column is flagged dirty.
        product.images = [*(product.images or []), stored]
        self._session.commit()
        return product_read(product)

    def remove_image(self, product_id: int, image: str) -> ProductRead:
        product = self._require(product_id)
        images = list(product.images or [])
        if image not in images:
            raise NotFoundError("Image not found on this product.")

        images.remove(image)
        product.images = images
        self._session.commit()
        if not image.startswith(("http://", "https://")):
            self._images.delete(product_id, image)
        return product_read(product)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class AdminCategoriesService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._repo = CategoriesRepository(session)

    def _require(self, category_id: int) -> models.Category:
        category = self._repo.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category with id={category_id} not found.")
        return category

    def _present(self, category: models.Category) -> CategoryWithCount:
        return category_with_count(category, self._repo.product_count(category.id))

    def _check_unique(self, *, name: Optional[str], slug: Optional[str], exclude_id: Optional[int] = None) -> None:
        if name is not None and self._repo.name_exists(name, exclude_id=exclude_id):
            raise ConflictError(f"A category named '{name}' already exists.")
        if slug is not None and self._repo.slug_exists(slug, exclude_id=exclude_id):
            raise ConflictError(f"A category with slug '{slug}' already exists.")

    def stats(self) -> CategoryStats:
        return CategoryStats(**self._repo.stats())

    def index(self) -> CategoryListResponse:
        return CategoryListResponse(
            items=[self._present(c) for c in self._repo.ordered()],
            stats=self.stats(),
        )

    def show(self, category_id: int) -> CategoryWithCount:
        return self._present(self._require(category_id))

    def create(self, payload: CategoryCreate) -> CategoryWithCount:
        fields = payload.model_dump()
        fields["slug"] = payload.slug or slugify(payload.name)
        if payload.sort_order is None:
            fields["sort_order"] = self._repo.max_sort_order() + 1
        self._check_unique(name=payload.name, slug=fields["slug"])

        category = self._repo.add(models.Category(**fields))
        self._session.commit()
        logger.info("category_created", category_id=category.id, slug=category.slug)
        return self._present(category)

    def update(self, category_id: int, payload: CategoryUpdate) -> CategoryWithCount:
        category = self._require(category_id)
        fields = payload.model_dump(exclude_unset=True)
        if "slug" not in fields and fields.get("name"):
            fields["slug"] = slugify(fields["name"])
        self._check_unique(name=fields.get("name"), slug=fields.get("slug"), exclude_id=category.id)

        self._repo.update_fields(category, fields)
        self._session.commit()
        return self._present(category)

    def delete(self, category_id: int) -> None:
        category = self._require(category_id)
        if self._repo.product_count(category.id) > 0:
            raise ConflictError(
                "Cannot delete category with associated products. "
                "Please reassign or delete the products first."
            )
        self._repo.delete(category)
        self._session.commit()
        logger.info("category_deleted", category_id=category_id)

    def reorder(self, items: List[CategoryReorderItem]) -> CategoryListResponse:
        by_id = {c.id: c for c in self._repo.list_by_ids([i.id for i in items])}
        missing = [i.id for i in items if i.id not in by_id]
        if missing:
            raise NotFoundError(f"Categories not found: {missing}")
        for item in items:
            by_id[item.id].sort_order = item.sort_order
        self._session.commit()
        logger.info("categories_reordered", count=len(items))
        return self.index()


# ---------------------------------------------------------------------------
# Sizes
# ---------------------------------------------------------------------------


class AdminSizesService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._repo = SizesRepository(session)

    def _require(self, size_id: int) -> models.Size:
        size = self._repo.get_by_id(size_id)
        if size is None:
            raise NotFoundError(f"Size with id={size_id} not found.")
        return size

    def stats(self) -> SizeStats:
        return SizeStats(**self._repo.stats())

    def index(self) -> SizeListResponse:
        return SizeListResponse(
            items=[SizeRead.model_validate(s) for s in self._repo.ordered()],
            stats=self.stats(),
        )

    def show(self, size_id: int) -> SizeRead:
        return SizeRead.model_validate(self._require(size_id))

    def create(self, payload: SizeCreate) -> SizeRead:
        if self._repo.name_exists(payload.name):
            raise ConflictError(f"A size named '{payload.name}' already exists.")
        size = self._repo.add(models.Size(**payload.model_dump()))
        self._session.commit()
        logger.info("size_created", size_id=size.id)
        return SizeRead.model_validate(size)

    def update(self, size_id: int, payload: SizeUpdate) -> SizeRead:
        size = self._require(size_id)
        fields = payload.model_dump(exclude_unset=True)
        if fields.get("name") and self._repo.name_exists(fields["name"], exclude_id=size.id):
            raise ConflictError(f"A size named '{fields['name']}' already exists.")
        self._repo.update_fields(size, fields)
        self._session.commit()
        return SizeRead.model_validate(size)

    def delete(self, size_id: int) -> None:
        size = self._require(size_id)
        if self._repo.product_count(size.id) > 0:
            raise ConflictError(
                "Cannot delete size with associated products. "
                "Please reassign or delete the products first."
            )
        detached = self._repo.detach_cart_lines(size.id)
        self._repo.delete(size)
        self._session.commit()
        logger.info("size_deleted", size_id=size_id, detached_cart_lines=detached)


__all__ = [
    "slugify",
    "AdminProductsService",
    "AdminCategoriesService",
    "AdminSizesService",
    "ADMIN_PRODUCTS_PER_PAGE",
]
