# storefront_http_api/schemas/cart.py

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .catalog import SizeRead
from .common import APIModel


class CartProduct(APIModel):
    id: int
    name: str
    slug: str
    sku: str
    price: float
    main_image_url: str
    stock_quantity: int


class CartItemRead(APIModel):
    id: int
    product_id: int
    size_id: Optional[int] = None
    quantity: int
    price: float
    line_total: float
    product: CartProduct
    size: Optional[SizeRead] = None


class CartTotals(APIModel):
    subtotal: float
    subtotal_excluding_tax: float
    tax_amount: float
    tax_rate: float
    shipping_cost: float
    total: float
    total_quantity: int


class CartRead(APIModel):
    id: Optional[int] = None
    is_guest: bool
    items: List[CartItemRead]
    totals: CartTotals


class CartAddRequest(APIModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    size_id: Optional[int] = None


class CartUpdateRequest(APIModel):
    quantity: int = Field(..., description="A quantity of 0 or less removes the line.")


class CartCountResponse(APIModel):
    count: int


class CouponRequest(APIModel):
    code: str = Field(..., min_length=1, max_length=50)


class CouponPreview(APIModel):
    code: str
    valid: bool
    discount: float = 0
    total_after_discount: float = 0
    message: Optional[str] = None


__all__ = [
    "CartProduct",
    "CartItemRead",
    "CartTotals",
    "CartRead",
    "CartAddRequest",
    "CartUpdateRequest",
    "CartCountResponse",
    "CouponRequest",
    "CouponPreview",
]
