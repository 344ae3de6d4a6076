# storefront_http_api/repositories/carts.py

from __future__ import annotations

from typing import Optional

from ..db import models
from .base import BaseRepository


class CartsRepository(BaseRepository[models.Cart]):
    model = models.Cart

    def get_for_user(self, user_id: int) -> Optional[models.Cart]:
        stmt = self._base_select().where(models.Cart.user_id == user_id)
        return self.session.execute(stmt).scalars().first()

    def get_for_session(self, session_id: str) -> Optional[models.Cart]:
        stmt = self._base_select().where(
            models.Cart.session_id == session_id,
            models.Cart.user_id.is_(None),
        )
        return self.session.execute(stmt).scalars().first()

    def get_or_create_for_user(self, user_id: int) -> models.Cart:
        cart = self.get_for_user(user_id)
        if cart is None:
            cart = self.add(models.Cart(user_id=user_id))
        return cart

    def get_or_create_for_session(self, session_id: str) -> models.Cart:
        cart = self.get_for_session(session_id)
        if cart is None:
            cart = self.add(models.Cart(session_id=session_id))
        return cart

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    @staticmethod
    def find_line(
        cart: models.Cart, product_id: int, size_id: Optional[int]
    ) -> Optional[models.CartItem]:
        for item in cart.items:
            if item.product_id == product_id and item.size_id == size_id:
                return item
        return None

    @staticmethod
    def get_line(cart: models.Cart, item_id: int) -> Optional[models.CartItem]:
        for item in cart.items:
            if item.id == item_id:
                return item
        return None

    def add_line(
        self,
        cart: models.Cart,
        *,
        product: models.Product,
        size_id: Optional[int],
        quantity: int,
    ) -> models.CartItem:
        item = models.CartItem(
            product=product,
            product_id=product.id,
            size_id=size_id,
            quantity=quantity,
            price=product.price,
        )
        cart.items.append(item)
        self.session.flush()
        return item

    def remove_line(self, cart: models.Cart, item: models.CartItem) -> None:
        cart.items.remove(item)
        self.session.flush()

    def clear(self, cart: models.Cart) -> None:
        cart.items.clear()
        self.session.flush()


__all__ = ["CartsRepository"]
