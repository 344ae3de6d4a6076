# storefront_http_api/repositories/catalog.py

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Select, and_, func, or_, select

from ..db import models
from .base import BaseRepository

LOW_STOCK_THRESHOLD = 10

STOREFRONT_SORTS = ("price", "price_desc", "name", "newest", "rating", "popular", "most_bought")
ADMIN_SORTS = ("name", "price", "stock_quantity", "created_at", "status")


def _like(value: str) -> str:
    return f"%{value.strip().lower()}%"


class ProductsRepository(BaseRepository[models.Product]):
    """Data access for products, for both the storefront and the back-office."""

    model = models.Product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _purchasable(self) -> Select[Any]:
        return self._base_select().where(
            models.Product.status == models.ProductStatus.ACTIVE,
            models.Product.stock_quantity > 0,
        )

    @staticmethod
    def _review_stats_subquery():
        return (
            select(
                models.Review.product_id.label("product_id"),
                func.avg(models.Review.rating).label("avg_rating"),
                func.count(models.Review.id).label("review_count"),
            )
            .where(models.Review.is_approved.is_(True))
            .group_by(models.Review.product_id)
            .subquery()
        )

    @staticmethod
    def _sales_subquery():
        return (
            select(
                models.OrderItem.product_id.label("product_id"),
                func.sum(models.OrderItem.quantity).label("units_sold"),
            )
            .group_by(models.OrderItem.product_id)
            .subquery()
        )

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get_by_slug(self, slug: str) -> Optional[models.Product]:
        stmt = self._base_select().where(models.Product.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_active_by_slug(self, slug: str) -> Optional[models.Product]:
        stmt = self._base_select().where(
            models.Product.slug == slug,
            models.Product.status == models.ProductStatus.ACTIVE,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def slug_exists(self, slug: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Product.id).where(models.Product.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(models.Product.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def sku_exists(self, sku: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Product.id).where(models.Product.sku == sku)
        if exclude_id is not None:
            stmt = stmt.where(models.Product.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def storefront_query(
        self,
        *,
        search: Optional[str] = None,
        category_slug: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: str = "newest",
    ) -> Select[Any]:
        """Active, in-stock products matching the shop filters, in the requested order."""
        stmt = self._purchasable()

        if search:
            pattern = _like(search)
            stmt = stmt.where(
                or_(
                    func.lower(models.Product.name).like(pattern),
                    func.lower(func.coalesce(models.Product.description, "")).like(pattern),
                )
            )
        if category_slug:
            stmt = stmt.join(models.Product.category).where(models.Category.slug == category_slug)
        if min_price is not None:
            stmt = stmt.where(models.Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(models.Product.price <= max_price)

        if sort == "price":
            stmt = stmt.order_by(models.Product.price.asc(), models.Product.id.asc())
        elif sort == "price_desc":
            stmt = stmt.order_by(models.Product.price.desc(), models.Product.id.asc())
        elif sort == "name":
            stmt = stmt.order_by(models.Product.name.asc())
        elif sort in ("rating", "popular"):
            stats = self._review_stats_subquery()
            column = stats.c.avg_rating if sort == "rating" else stats.c.review_count
            stmt = stmt.outerjoin(stats, stats.c.product_id == models.Product.id).order_by(
                func.coalesce(column, 0).desc(), models.Product.id.desc()
            )
        elif sort == "most_bought":
            sales = self._sales_subquery()
            stmt = stmt.outerjoin(sales, sales.c.product_id == models.Product.id).order_by(
                func.coalesce(sales.c.units_sold, 0).desc(), models.Product.id.desc()
            )
        else:
            stmt = stmt.order_by(models.Product.created_at.desc(), models.Product.id.desc())

        return stmt

    def featured(self, *, limit: int = 8) -> List[models.Product]:
        stmt = (
            self._purchasable()
            .where(models.Product.featured.is_(True))
            .order_by(models.Product.created_at.desc(), models.Product.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())

    def related(self, product: models.Product, *, limit: int = 4) -> List[models.Product]:
        if product.category_id is None:
            return []
        stmt = (
            self._purchasable()
            .where(
                models.Product.category_id == product.category_id,
                models.Product.id != product.id,
            )
            .order_by(models.Product.created_at.desc(), models.Product.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())

    def price_range(self, *, category_id: Optional[int] = None) -> Tuple[float, float]:
        stmt = select(func.min(models.Product.price), func.max(models.Product.price)).where(
            models.Product.status == models.ProductStatus.ACTIVE,
            models.Product.stock_quantity > 0,
        )
        if category_id is not None:
            stmt = stmt.where(models.Product.category_id == category_id)
        low, high = self.session.execute(stmt).one()
        return float(low or 0), float(high or 0)

    # ------------------------------------------------------------------
    # Back-office
    # ------------------------------------------------------------------

    def admin_query(
        self,
        *,
        search: Optional[str] = None,
        category_slug: Optional[str] = None,
        status: Optional[models.ProductStatus] = None,
        stock_filter: Optional[str] = None,
        sort: str = "created_at",
        direction: str = "desc",
    ) -> Select[Any]:
        stmt = self._base_select()

        if search:
            pattern = _like(search)
            stmt = stmt.where(
                or_(
                    func.lower(models.Product.name).like(pattern),
                    func.lower(models.Product.sku).like(pattern),
                    func.lower(func.coalesce(models.Product.description, "")).like(pattern),
                )
            )
        if category_slug:
            stmt = stmt.join(models.Product.category).where(models.Category.slug == category_slug)
        if status is not None:
            stmt = stmt.where(models.Product.status == status)

        if stock_filter == "in_stock":
            stmt = stmt.where(models.Product.stock_quantity > LOW_STOCK_THRESHOLD)
        elif stock_filter == "low_stock":
            stmt = stmt.where(
                models.Product.stock_quantity.between(1, LOW_STOCK_THRESHOLD)
            )
        elif stock_filter == "out_of_stock":
            stmt = stmt.where(models.Product.stock_quantity <= 0)

        column = getattr(models.Product, sort if sort in ADMIN_SORTS else "created_at")
        ordering = column.asc() if direction == "asc" else column.desc()
        return stmt.order_by(ordering, models.Product.id.desc())

    def admin_stats(self) -> Dict[str, Any]:
        active = models.Product.status == models.ProductStatus.ACTIVE
        total = self.session.execute(select(func.count(models.Product.id))).scalar_one()
        active_count = self.session.execute(
            select(func.count(models.Product.id)).where(active)
        ).scalar_one()
        low_stock = self.session.execute(
            select(func.count(models.Product.id)).where(
                models.Product.stock_quantity.between(1, LOW_STOCK_THRESHOLD)
            )
        ).scalar_one()
        total_value = self.session.execute(
            select(
                func.coalesce(
                    func.sum(models.Product.price * models.Product.stock_quantity), 0
                )
            ).where(active)
        ).scalar_one()
        return {
            "total": int(total),
            "active": int(active_count),
            "low_stock_count": int(low_stock),
            "total_value": round(float(total_value or 0), 2),
        }

    def low_stock(self, *, limit: int = 5) -> List[models.Product]:
        stmt = (
            self._base_select()
            .where(models.Product.stock_quantity <= LOW_STOCK_THRESHOLD)
            .order_by(models.Product.stock_quantity.asc(), models.Product.id.asc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())


class CategoriesRepository(BaseRepository[models.Category]):
    model = models.Category

    def get_by_slug(self, slug: str) -> Optional[models.Category]:
        stmt = self._base_select().where(models.Category.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def name_exists(self, name: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Category.id).where(models.Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(models.Category.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def slug_exists(self, slug: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Category.id).where(models.Category.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(models.Category.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def ordered(self, *, active_only: bool = False) -> List[models.Category]:
        stmt = self._base_select()
        if active_only:
            stmt = stmt.where(models.Category.is_active.is_(True))
        stmt = stmt.order_by(models.Category.sort_order.asc(), models.Category.name.asc())
        return list(self.session.execute(stmt).scalars().all())

    def with_product_counts(self, *, active_only: bool = True) -> List[Tuple[models.Category, int]]:
        """Categories paired with the number of purchasable products in each."""
        join_on = and_(
            models.Product.category_id == models.Category.id,
            models.Product.status == models.ProductStatus.ACTIVE,
            models.Product.stock_quantity > 0,
        )
        stmt = (
            select(models.Category, func.count(models.Product.id))
            .outerjoin(models.Product, join_on)
            .group_by(models.Category.id)
            .order_by(models.Category.sort_order.asc(), models.Category.name.asc())
        )
        if active_only:
            stmt = stmt.where(models.Category.is_active.is_(True))
        return [(row[0], int(row[1])) for row in self.session.execute(stmt).all()]

    def product_count(self, category_id: int) -> int:
        stmt = select(func.count(models.Product.id)).where(models.Product.category_id == category_id)
        return int(self.session.execute(stmt).scalar_one())

    def max_sort_order(self) -> int:
        value = self.session.execute(select(func.max(models.Category.sort_order))).scalar_one()
        return int(value or 0)

    def stats(self) -> Dict[str, int]:
        total = self.session.execute(select(func.count(models.Category.id))).scalar_one()
        active = self.session.execute(
            select(func.count(models.Category.id)).where(models.Category.is_active.is_(True))
        ).scalar_one()
        with_products = self.session.execute(
            select(func.count(func.distinct(models.Product.category_id))).where(
                models.Product.category_id.is_not(None)
            )
        ).scalar_one()
        total_stock = self.session.execute(
            select(func.coalesce(func.sum(models.Product.stock_quantity), 0)).where(
                models.Product.category_id.is_not(None)
            )
        ).scalar_one()
        return {
            "total": int(total),
            "active": int(active),
            "with_products": int(with_products),
            "total_stock": int(total_stock or 0),
        }


class SizesRepository(BaseRepository[models.Size]):
    model = models.Size

    def ordered(self) -> List[models.Size]:
        stmt = self._base_select().order_by(models.Size.name.asc())
        return list(self.session.execute(stmt).scalars().all())

    def name_exists(self, name: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Size.id).where(models.Size.name == name)
        if exclude_id is not None:
            stmt = stmt.where(models.Size.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def product_count(self, size_id: int) -> int:
        stmt = select(func.count(models.Product.id)).where(models.Product.size_id == size_id)
        return int(self.session.execute(stmt).scalar_one())

    def detach_cart_lines(self, size_id: int) -> int:
        """Clear the size on cart lines that reference it; returns the number of lines touched."""
        stmt = select(models.CartItem).where(models.CartItem.size_id == size_id)
        lines = list(self.session.execute(stmt).scalars().all())
        for line in lines:
            line.size = None
        self.session.flush()
        return len(lines)

    def stats(self) -> Dict[str, Any]:
        total = self.session.execute(select(func.count(models.Size.id))).scalar_one()
        avg_cost = self.session.execute(select(func.avg(models.Size.shipping_cost))).scalar_one()
        with_products = self.session.execute(
            select(func.count(func.distinct(models.Product.size_id))).where(
                models.Product.size_id.is_not(None)
            )
        ).scalar_one()
        return {
            "total": int(total),
            "avg_shipping_cost": round(float(avg_cost or 0), 2),
            "with_products": int(with_products),
        }


__all__ = [
    "LOW_STOCK_THRESHOLD",
    "STOREFRONT_SORTS",
    "ADMIN_SORTS",
    "ProductsRepository",
    "CategoriesRepository",
    "SizesRepository",
]
