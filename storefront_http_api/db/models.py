# storefront_http_api/db/models.py

from __future__ import annotations

import enum
import random
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront_http_api.config import settings

from .session import Base

DEFAULT_PRODUCT_IMAGE = "/images/product.png"
VERIFICATION_TTL_HOURS = 24

Money = Numeric(10, 2, asdecimal=False)


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo on read)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class ProductStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class SettingType(str, enum.Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    JSON = "json"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role_enum"),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email_verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    orders: Mapped[List["Order"]] = relationship("Order", back_populates="user")
    reviews: Mapped[List["Review"]] = relationship(
        "Review", back_populates="user", cascade="all, delete-orphan"
    )
    wishlist_items: Mapped[List["Wishlist"]] = relationship(
        "Wishlist", back_populates="user", cascade="all, delete-orphan"
    )
    email_verification: Mapped[Optional["EmailVerification"]] = relationship(
        "EmailVerification", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def has_verified_email(self) -> bool:
        return self.email_verified_at is not None

    def mark_email_as_verified(self) -> None:
        self.email_verified_at = utcnow()

    def __repr__(self) -> str:
        return f"<User id={self.id!r} email={self.email!r} role={self.role.value!r}>"


class EmailVerification(Base):
    """An outstanding email-verification link for a freshly registered account."""

    __tablename__ = "email_verifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    token: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    user: Mapped[User] = relationship("User", back_populates="email_verification")

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(48)

    def is_expired(self) -> bool:
        return self.expires_at <= utcnow()

    def regenerate(self, hours: int = VERIFICATION_TTL_HOURS) -> None:
        self.token = self.generate_token()
        self.expires_at = utcnow() + timedelta(hours=hours)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    seo_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    seo_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    products: Mapped[List["Product"]] = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category id={self.id!r} slug={self.slug!r}>"


class Size(Base):
    """A shipping box size; its shipping_cost is charged once per cart line."""

    __tablename__ = "sizes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    length: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    width: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    height: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    box_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    shipping_cost: Mapped[float] = mapped_column(Money, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    products: Mapped[List["Product"]] = relationship("Product", back_populates="size")

    @property
    def volume(self) -> float:
        return round(float(self.length or 0) * float(self.width or 0) * float(self.height or 0), 2)

    def __repr__(self) -> str:
        return f"<Size id={self.id!r} name={self.name!r}>"


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    seo_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    seo_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    social_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    price: Mapped[float] = mapped_column(Money, nullable=False)
    compare_price: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sku: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)

    # File names relative to products/{id}/, or absolute URLs.
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[ProductStatus] = mapped_column(
        SQLEnum(ProductStatus, name="product_status_enum"),
        nullable=False,
        default=ProductStatus.ACTIVE,
        index=True,
    )
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("categories.id"), nullable=True, index=True
    )
    size_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("sizes.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    category: Mapped[Optional[Category]] = relationship("Category", back_populates="products")
    size: Mapped[Optional[Size]] = relationship("Size", back_populates="products")
    reviews: Mapped[List["Review"]] = relationship(
        "Review", back_populates="product", cascade="all, delete-orphan"
    )
    cart_items: Mapped[List["CartItem"]] = relationship(
        "CartItem", back_populates="product", cascade="all, delete-orphan"
    )
    wishlist_entries: Mapped[List["Wishlist"]] = relationship(
        "Wishlist", back_populates="product", cascade="all, delete-orphan"
    )
    # No delete cascade: order history keeps the line, product_id becomes NULL.
    order_items: Mapped[List["OrderItem"]] = relationship("OrderItem", back_populates="product")

    # ------------------------------------------------------------------
    # Computed attributes
    # ------------------------------------------------------------------

    def _image_url(self, image: str) -> str:
        if image.startswith(("http://", "https://", "/")):
            return image
        return f"{settings.MEDIA_URL.rstrip('/')}/products/{self.id}/{image}"

    @property
    def image_urls(self) -> List[str]:
        if not self.images:
            return [DEFAULT_PRODUCT_IMAGE]
        return [self._image_url(img) for img in self.images]

    @property
    def main_image_url(self) -> str:
        return self.image_urls[0]

    @property
    def approved_reviews(self) -> List["Review"]:
        return [r for r in self.reviews if r.is_approved]

    @property
    def average_rating(self) -> float:
        approved = self.approved_reviews
        if not approved:
            return 0.0
        return round(sum(r.rating for r in approved) / len(approved), 1)

    @property
    def review_count(self) -> int:
        return len(self.approved_reviews)

    @property
    def discount_percentage(self) -> Optional[float]:
        if not self.compare_price or self.compare_price <= self.price:
            return None
        return round((self.compare_price - self.price) / self.compare_price * 100, 2)

    @property
    def is_in_stock(self) -> bool:
        return (self.stock_quantity or 0) > 0

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    def can_add_to_cart(self, quantity: int = 1) -> bool:
        return self.is_active and (self.stock_quantity or 0) >= quantity

    def decrement_stock(self, quantity: int) -> bool:
        """Take ``quantity`` off stock. Returns False (and changes nothing) if short."""
        if quantity < 0 or (self.stock_quantity or 0) < quantity:
            return False
        self.stock_quantity = (self.stock_quantity or 0) - quantity
        return True

    def take_stock(self, quantity: int) -> int:
        """Take up to ``quantity`` off stock, never going below zero. Returns the amount taken."""
        taken = max(0, min(quantity, self.stock_quantity or 0))
        self.stock_quantity = (self.stock_quantity or 0) - taken
        return taken

    def increment_stock(self, quantity: int) -> None:
        if quantity > 0:
            self.stock_quantity = (self.stock_quantity or 0) + quantity

    def __repr__(self) -> str:
        return f"<Product id={self.id!r} sku={self.sku!r} status={self.status.value!r}>"


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


class Cart(Base):
    """Shopping cart owned either by a user or by a guest session id."""

    __tablename__ = "carts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    items: Mapped[List["CartItem"]] = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )
    user: Mapped[Optional[User]] = relationship("User")

    @property
    def subtotal(self) -> float:
        return round(sum(item.line_total for item in self.items), 2)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def shipping_cost(self) -> float:
        return round(sum(float(item.size.shipping_cost) for item in self.items if item.size), 2)

    @property
    def total(self) -> float:
        return round(self.subtotal + self.shipping_cost, 2)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def __repr__(self) -> str:
        owner = f"user={self.user_id!r}" if self.user_id else f"session={self.session_id!r}"
        return f"<Cart id={self.id!r} {owner} items={len(self.items)}>"


class CartItem(Base):
    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    cart_id: Mapped[int] = mapped_column(
        ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    size_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("sizes.id", ondelete="SET NULL"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # Unit price captured when the line was added.
    price: Mapped[float] = mapped_column(Money, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    cart: Mapped[Cart] = relationship("Cart", back_populates="items")
    product: Mapped[Product] = relationship("Product", back_populates="cart_items")
    size: Mapped[Optional[Size]] = relationship("Size")

    @property
    def line_total(self) -> float:
        return round(float(self.price) * self.quantity, 2)

    def has_price_changed(self) -> bool:
        return round(float(self.price), 2) != round(float(self.product.price), 2)

    def update_price(self) -> None:
        self.price = self.product.price


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    order_number: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus, name="order_status_enum"),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, name="payment_status_enum"),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )

    subtotal: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    tax_amount: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    shipping_amount: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    discount_amount: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    total_amount: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    stripe_checkout_session_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, unique=True, index=True
    )
    stripe_payment_intent_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    billing_address: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    shipping_address: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    guest_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    guest_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    guest_session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    confirmation_email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    confirmation_email_sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    shipped_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    delivered_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped[Optional[User]] = relationship("User", back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @staticmethod
    def generate_order_number(now: Optional[datetime] = None) -> str:
        """Candidate number in the form ORD-2025-004217; uniqueness is checked by the caller."""
        now = now or utcnow()
        return f"ORD-{now.year}-{random.randint(0, 999999):06d}"

    # ------------------------------------------------------------------
    # Status helpers
    # ------------------------------------------------------------------

    def can_be_cancelled(self) -> bool:
        return self.status in (OrderStatus.PENDING, OrderStatus.PROCESSING)

    def mark_as_paid(self, payment_intent_id: Optional[str] = None) -> None:
        self.payment_status = PaymentStatus.SUCCEEDED
        if self.status == OrderStatus.PENDING:
            self.status = OrderStatus.PROCESSING
        if payment_intent_id:
            self.stripe_payment_intent_id = payment_intent_id

    def mark_as_shipped(self, tracking_number: Optional[str] = None) -> None:
        self.status = OrderStatus.SHIPPED
        self.shipped_at = utcnow()
        if tracking_number:
            self.tracking_number = tracking_number

    def mark_as_delivered(self) -> None:
        self.status = OrderStatus.DELIVERED
        self.delivered_at = utcnow()

    def mark_as_cancelled(self) -> None:
        self.status = OrderStatus.CANCELLED

    def mark_confirmation_email_sent(self) -> None:
        self.confirmation_email_sent = True
        self.confirmation_email_sent_at = utcnow()

    def append_note(self, text: str) -> None:
        self.notes = f"{self.notes}\n\n{text}" if self.notes else text

    # ------------------------------------------------------------------
    # Customer helpers
    # ------------------------------------------------------------------

    @property
    def is_guest_order(self) -> bool:
        return self.user_id is None and bool(self.guest_email)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.SUCCEEDED

    @property
    def customer_email(self) -> Optional[str]:
        if self.user is not None:
            return self.user.email
        return self.guest_email

    @property
    def customer_name(self) -> str:
        if self.user is not None:
            return self.user.name
        billing = self.billing_address or {}
        name = " ".join(
            part for part in (billing.get("first_name"), billing.get("last_name")) if part
        )
        return name or "Guest"

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def __repr__(self) -> str:
        return f"<Order id={self.id!r} number={self.order_number!r} status={self.status.value!r}>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True
    )
    size_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("sizes.id", ondelete="SET NULL"), nullable=True
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_sku: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Money, nullable=False)
    total: Mapped[float] = mapped_column(Money, nullable=False)
    # Units actually taken off stock when the order was paid.
    reserved_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    order: Mapped[Order] = relationship("Order", back_populates="items")
    product: Mapped[Optional[Product]] = relationship("Product", back_populates="order_items")
    size: Mapped[Optional[Size]] = relationship("Size")

    def is_total_correct(self) -> bool:
        return round(float(self.price) * self.quantity, 2) == round(float(self.total), 2)


# ---------------------------------------------------------------------------
# Reviews / wishlist
# ---------------------------------------------------------------------------


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_review_user_product"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("orders.id", ondelete="SET NULL"), nullable=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped[User] = relationship("User", back_populates="reviews")
    product: Mapped[Product] = relationship("Product", back_populates="reviews")

    @property
    def stars(self) -> str:
        return "★" * self.rating + "☆" * (5 - self.rating)


class Wishlist(Base):
    __tablename__ = "wishlists"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    user: Mapped[User] = relationship("User", back_populates="wishlist_items")
    product: Mapped[Product] = relationship("Product", back_populates="wishlist_entries")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class Setting(Base):
    """Runtime key/value configuration edited from the admin back-office."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[SettingType] = mapped_column(
        SQLEnum(SettingType, name="setting_type_enum"),
        nullable=False,
        default=SettingType.STRING,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<Setting key={self.key!r} type={self.type.value!r}>"


# ---------------------------------------------------------------------------
# Content pages
# ---------------------------------------------------------------------------


class Page(Base):
    """An editable content page (about, privacy, terms...) addressed by slug."""

    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<Page id={self.id!r} slug={self.slug!r}>"


__all__ = [
    "Base",
    "DEFAULT_PRODUCT_IMAGE",
    "utcnow",
    "UserRole",
    "ProductStatus",
    "OrderStatus",
    "PaymentStatus",
    "SettingType",
    "User",
    "Category",
    "Size",
    "Product",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "Review",
    "Wishlist",
    "Setting",
    "EmailVerification",
    "Page",
    "VERIFICATION_TTL_HOURS",
]
