# storefront_http_api/services/cart_service.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.exceptions import BusinessRuleError, NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.carts import CartsRepository
from storefront_http_api.repositories.catalog import ProductsRepository, SizesRepository
from storefront_http_api.schemas.cart import CartAddRequest, CartItemRead, CartRead, CouponPreview
from storefront_http_api.services.pricing import calculate_totals
from storefront_http_api.services.promotion_service import PromotionService
from storefront_http_api.services.settings_service import SettingsService

logger = get_logger(__name__)

GUEST_SESSION_KEY = "guest_session_id"


@dataclass(frozen=True)
class CartOwner:
    """Either a signed-in user or an anonymous session; exactly one is set."""

    user_id: Optional[int] = None
    session_id: Optional[str] = None

    @property
    def is_guest(self) -> bool:
        return self.user_id is None


class CartService:
    """
    Cart operations shared by signed-in and guest shoppers.

    Both kinds of cart are rows in ``carts``; a guest cart is keyed by the
    session id kept in the signed session cookie.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._carts = CartsRepository(session)
        self._products = ProductsRepository(session)
        self._sizes = SizesRepository(session)
        self._settings = SettingsService(session)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def get_cart(self, owner: CartOwner) -> Optional[models.Cart]:
        if owner.user_id is not None:
            return self._carts.get_for_user(owner.user_id)
        if owner.session_id:
            return self._carts.get_for_session(owner.session_id)
        return None

    def _get_or_create_cart(self, owner: CartOwner) -> models.Cart:
        if owner.user_id is not None:
            return self._carts.get_or_create_for_user(owner.user_id)
        if not owner.session_id:
            raise BusinessRuleError("A session is required for a guest cart.")
        return self._carts.get_or_create_for_session(owner.session_id)

    def _require_line(self, owner: CartOwner, item_id: int) -> tuple[models.Cart, models.CartItem]:
        cart = self.get_cart(owner)
        item = self._carts.get_line(cart, item_id) if cart is not None else None
        if cart is None or item is None:
            raise NotFoundError("Cart item not found.")
        return cart, item

    def present(self, owner: CartOwner, cart: Optional[models.Cart]) -> CartRead:
        return CartRead(
            id=cart.id if cart is not None else None,
            is_guest=owner.is_guest,
            items=[CartItemRead.model_validate(item) for item in (cart.items if cart else [])],
            totals=calculate_totals(cart, self._settings),
        )

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def show(self, owner: CartOwner) -> CartRead:
        """Current cart with line prices refreshed to the live product price."""
        cart = self.get_cart(owner)
        if cart is not None:
            changed = False
            for item in cart.items:
                if item.has_price_changed():
                    item.update_price()
                    changed = True
            if changed:
                self._session.commit()
        return self.present(owner, cart)

    def count(self, owner: CartOwner) -> int:
        cart = self.get_cart(owner)
        return cart.total_items if cart is not None else 0

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def add(self, owner: CartOwner, payload: CartAddRequest) -> CartRead:
        product = self._products.get_by_id(payload.product_id)
        if product is None:
            raise NotFoundError("Product not found.")
        if payload.size_id is not None and self._sizes.get_by_id(payload.size_id) is None:
            raise NotFoundError("Size not found.")

        if not product.can_add_to_cart(payload.quantity):
            raise BusinessRuleError("Product is out of stock or insufficient quantity available.")

        cart = self._get_or_create_cart(owner)
        line = self._carts.find_line(cart, product.id, payload.size_id)

        if line is not None:
            new_quantity = line.quantity + payload.quantity
            if new_quantity > product.stock_quantity:
                raise BusinessRuleError("Cannot add more items. Stock limit exceeded.")
            line.quantity = new_quantity
            line.price = product.price
        else:
            self._carts.add_line(
                cart, product=product, size_id=payload.size_id, quantity=payload.quantity
            )

        self._session.commit()
        logger.info(
            "cart_item_added",
            cart_id=cart.id,
            product_id=product.id,
            quantity=payload.quantity,
            guest=owner.is_guest,
        )
        return self.present(owner, cart)

    def update(self, owner: CartOwner, item_id: int, quantity: int) -> CartRead:
        cart, item = self._require_line(owner, item_id)

        if quantity <= 0:
            self._carts.remove_line(cart, item)
        else:
            if quantity > item.product.stock_quantity:
                raise BusinessRuleError(
                    "Insufficient stock available.",
                    extra={"max_quantity": item.product.stock_quantity},
                )
            item.quantity = quantity

        self._session.commit()
        return self.present(owner, cart)

    def remove(self, owner: CartOwner, item_id: int) -> CartRead:
        cart, item = self._require_line(owner, item_id)
        self._carts.remove_line(cart, item)
        self._session.commit()
        return self.present(owner, cart)

    def clear(self, owner: CartOwner) -> CartRead:
        cart = self.get_cart(owner)
        if cart is not None:
            self._carts.clear(cart)
            self._session.commit()
        return self.present(owner, cart)

    def apply_coupon(self, owner: CartOwner, code: str, promotions: PromotionService) -> CouponPreview:
        """Preview a promotion code against the cart total; the cart itself is unchanged."""
        totals = calculate_totals(self.get_cart(owner), self._settings)
        if totals.total_quantity == 0:
            raise BusinessRuleError("Your cart is empty.")

        result = promotions.preview(code, totals.subtotal)
        if not result.valid:
            return CouponPreview(code=code, valid=False, message=result.message)

        discount = result.discount or 0.0
        return CouponPreview(
            code=code,
            valid=True,
            discount=discount,
            total_after_discount=round(max(totals.total - discount, 0), 2),
            message="Promotion code applied.",
        )


class GuestCartService:
    """Guest session id handling and the guest-to-account cart merge on login."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._carts = CartsRepository(session)

    @staticmethod
    def session_id(store: MutableMapping[str, Any], *, create: bool = True) -> Optional[str]:
        """Return the guest session id from ``store``, minting one if asked to."""
        value = store.get(GUEST_SESSION_KEY)
        if not value and create:
            value = str(uuid.uuid4())
            store[GUEST_SESSION_KEY] = value
        return value

    def transfer_to_user(self, store: MutableMapping[str, Any], user_id: int) -> int:
        """
        Merge the guest cart into the user's cart, summing quantities of
        matching (product, size) lines, capped at current stock. The guest
        cart is deleted afterwards. Returns the number of guest lines merged.
        """
        guest_id = self.session_id(store, create=False)
        if not guest_id:
            return 0

        guest_cart = self._carts.get_for_session(guest_id)
        store.pop(GUEST_SESSION_KEY, None)
        if guest_cart is None:
            return 0

        user_cart = self._carts.get_or_create_for_user(user_id)
        merged = 0
        for guest_line in list(guest_cart.items):
            product = guest_line.product
            if not product.is_active or product.stock_quantity <= 0:
                continue
            existing = self._carts.find_line(user_cart, product.id, guest_line.size_id)
            if existing is not None:
                existing.quantity = min(
                    existing.quantity + guest_line.quantity, product.stock_quantity
                )
                existing.price = product.price
            else:
                self._carts.add_line(
                    user_cart,
                    product=product,
                    size_id=guest_line.size_id,
                    quantity=min(guest_line.quantity, product.stock_quantity),
                )
            merged += 1

        self._carts.delete(guest_cart)
        self._session.commit()
        logger.info("guest_cart_merged", user_id=user_id, lines=merged)
        return merged


__all__ = ["CartOwner", "CartService", "GuestCartService", "GUEST_SESSION_KEY"]
