# storefront_http_api/schemas/orders.py

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, model_validator

from storefront_http_api.db.models import OrderStatus, PaymentStatus

from .common import APIModel, PageMeta


# ---------------------------------------------------------------------------
# Addresses / checkout input
# ---------------------------------------------------------------------------


class Address(APIModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    company: Optional[str] = Field(default=None, max_length=255)
    address_line_1: str = Field(..., min_length=1, max_length=255)
    address_line_2: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    state: str = Field(..., min_length=1, max_length=255)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=2, max_length=2, description="ISO 3166-1 alpha-2")


class CheckoutRequest(APIModel):
    billing_address: Optional[Address] = None
    shipping_same_as_billing: bool = True
    shipping_address: Optional[Address] = None

    guest_email: Optional[EmailStr] = None
    guest_phone: Optional[str] = Field(default=None, max_length=20)

    promotion_code: Optional[str] = Field(default=None, max_length=50)
    collect_tax_id: bool = False
    notes: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _shipping_address_required(self) -> "CheckoutRequest":
        if not self.shipping_same_as_billing and self.shipping_address is None:
            raise ValueError("shipping_address is required when shipping_same_as_billing is false")
        return self


class CheckoutSessionResponse(APIModel):
    session_id: str
    checkout_url: Optional[str] = None
    order_number: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderItemRead(APIModel):
    id: int
    product_id: Optional[int] = None
    size_id: Optional[int] = None
    product_name: str
    product_sku: Optional[str] = None
    quantity: int
    price: float
    total: float


class OrderRead(APIModel):
    id: int
    order_number: str
    user_id: Optional[int] = None
    status: OrderStatus
    payment_status: PaymentStatus
    subtotal: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float
    total_amount: float
    currency: str
    notes: Optional[str] = None
    tracking_number: Optional[str] = None
    payment_method: Optional[str] = None
    billing_address: Optional[Dict[str, Any]] = None
    shipping_address: Optional[Dict[str, Any]] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    is_guest_order: bool
    customer_email: Optional[str] = None
    customer_name: str
    total_items: int
    confirmation_email_sent: bool
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemRead]


class OrderListResponse(APIModel):
    items: List[OrderRead]
    meta: PageMeta


class CheckoutResultResponse(APIModel):
    order: OrderRead
    payment_status: Optional[str] = None
    message: str


class CheckoutSessionDetail(APIModel):
    session: Dict[str, Any]
    order: Optional[OrderRead] = None


# ---------------------------------------------------------------------------
# Back-office
# ---------------------------------------------------------------------------


class PeriodKpi(APIModel):
    orders: int
    revenue: float


class OrderKpis(APIModel):
    today: PeriodKpi
    month: PeriodKpi
    year: PeriodKpi


class AdminOrderListResponse(APIModel):
    items: List[OrderRead]
    meta: PageMeta
    kpis: OrderKpis


class OrderItemUpdate(APIModel):
    id: int
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class OrderUpdate(APIModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    tracking_number: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    items: Optional[List[OrderItemUpdate]] = None


class OrderStatusUpdate(APIModel):
    status: OrderStatus


class BulkOrderStatusUpdate(APIModel):
    order_ids: List[int] = Field(..., min_length=1)
    status: OrderStatus


class BulkUpdateResult(APIModel):
    updated: int
    message: str


class RefundRequest(APIModel):
    amount: float = Field(..., gt=0)
    reason: str = Field(..., min_length=1, max_length=500)


class ShipRequest(APIModel):
    tracking_number: str = Field(..., min_length=1, max_length=100)
    carrier: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)


__all__ = [
    "Address",
    "CheckoutRequest",
    "CheckoutSessionResponse",
    "OrderItemRead",
    "OrderRead",
    "OrderListResponse",
    "CheckoutResultResponse",
    "CheckoutSessionDetail",
    "PeriodKpi",
    "OrderKpis",
    "AdminOrderListResponse",
    "OrderItemUpdate",
    "OrderUpdate",
    "OrderStatusUpdate",
    "BulkOrderStatusUpdate",
    "BulkUpdateResult",
    "RefundRequest",
    "ShipRequest",
]
