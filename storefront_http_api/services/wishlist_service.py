# storefront_http_api/services/wishlist_service.py

from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.exceptions import NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.catalog import ProductsRepository
from storefront_http_api.repositories.reviews import WishlistsRepository
from storefront_http_api.schemas.reviews import (
    WishlistAddResponse,
    WishlistCheckResponse,
    WishlistItemRead,
)
from storefront_http_api.services.presenters import wishlist_item_read

logger = get_logger(__name__)


class WishlistService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._repo = WishlistsRepository(session)
        self._products = ProductsRepository(session)

    def list(self, user_id: int) -> List[WishlistItemRead]:
        return [wishlist_item_read(item) for item in self._repo.for_user(user_id)]

    def add(self, user_id: int, product_id: int) -> WishlistAddResponse:
        """Idempotent: ``created`` is False when the product was already saved."""
        if self._products.get_by_id(product_id) is None:
            raise NotFoundError("Product not found.")

        existing = self._repo.get_for_user_product(user_id, product_id)
        if existing is not None:
            return WishlistAddResponse(
                message="Product is already in your wishlist.",
                item=wishlist_item_read(existing),
                created=False,
            )

        item = self._repo.add(models.Wishlist(user_id=user_id, product_id=product_id))
        self._session.commit()
        logger.info("wishlist_item_added", user_id=user_id, product_id=product_id)
        return WishlistAddResponse(
            message="Product added to wishlist.",
            item=wishlist_item_read(item),
            created=True,
        )

    def remove(self, user_id: int, wishlist_id: int) -> None:
        item = self._repo.get_by_id(wishlist_id)
        if item is None or item.user_id != user_id:
            raise NotFoundError("Wishlist item not found.")
        self._repo.delete(item)
        self._session.commit()

    def remove_product(self, user_id: int, product_id: int) -> None:
        item = self._repo.get_for_user_product(user_id, product_id)
        if item is None:
            raise NotFoundError("Product is not in your wishlist.")
        self._repo.delete(item)
        self._session.commit()

    def check(self, user_id: int, product_id: int) -> WishlistCheckResponse:
        return WishlistCheckResponse(
            product_id=product_id,
            in_wishlist=self._repo.get_for_user_product(user_id, product_id) is not None,
        )


__all__ = ["WishlistService"]
