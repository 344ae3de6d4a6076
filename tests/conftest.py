# tests/conftest.py
import json
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront_http_api.db import models
from storefront_http_api.db.session import Base, get_session
from storefront_http_api.exceptions import PaymentGatewayError, WebhookSignatureError
from storefront_http_api.mail import get_mailer
from storefront_http_api.main import create_app
from storefront_http_api.payments import get_payment_gateway
from storefront_http_api.security import create_access_token, hash_password
from storefront_http_api.services.image_upload_service import (
    ImageUploadService,
    get_image_upload_service,
)
from storefront_http_api.services.settings_service import SettingsService, clear_cache

VALID_SIGNATURE = "t=1,v1=valid"


class FakePaymentGateway:
    """In-memory stand-in for StripeGateway; mirrors its dict-returning methods."""

    def __init__(self):
        self.sessions = {}
        self.session_params = []
        self.promotion_codes = {}
        self.coupons = []
        self.created_promotion_codes = []
        self.prices = []
        self.customers = {}
        self.subscriptions = {}
        self.modifications = []
        self.fail_checkout = False

    # --- hosted checkout ---

    def create_checkout_session(self, params):
        if self.fail_checkout:
            raise PaymentGatewayError("Your card network is unreachable (acct_123)")
        session_id = f"cs_test_{len(self.sessions) + 1}"
        amount_total = sum(
            line["price_data"]["unit_amount"] * line["quantity"]
            for line in params.get("line_items", [])
            if "price_data" in line
        )
        session = {
            "id": session_id,
            "url": f"https://checkout.example.test/pay/{session_id}",
            "status": "open",
            "payment_status": "unpaid",
            "amount_total": amount_total,
            "amount_subtotal": amount_total,
            "currency": "eur",
            "metadata": dict(params.get("metadata", {})),
            "customer_email": params.get("customer_email"),
        }
        self.session_params.append(params)
        self.sessions[session_id] = session
        return dict(session)

    def retrieve_checkout_session(self, session_id):
        if session_id not in self.sessions:
            raise PaymentGatewayError(f"No such checkout.session: {session_id}")
        return dict(self.sessions[session_id])

    def mark_paid(self, session_id, payment_intent="pi_test_1"):
        self.sessions[session_id].update(
            status="complete", payment_status="paid", payment_intent=payment_intent
        )
        return dict(self.sessions[session_id])

    def construct_event(self, payload, signature):
        if signature != VALID_SIGNATURE:
            raise WebhookSignatureError("Invalid signature")
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise WebhookSignatureError("Invalid payload") from exc

    # --- promotions ---

    def find_promotion_code(self, code):
        return self.promotion_codes.get(code)

    def create_coupon(self, params):
        coupon = {"id": f"coupon_{len(self.coupons) + 1}", "object": "coupon", **params}
        self.coupons.append(coupon)
        return coupon

    def create_promotion_code(self, params):
        promo = {"id": f"promo_{len(self.created_promotion_codes) + 1}", "active": True, **params}
        self.created_promotion_codes.append(promo)
        return promo

    # --- subscriptions ---

    def list_recurring_prices(self):
        return list(self.prices)

    def find_customer_id(self, email):
        return self.customers.get(email)

    def list_subscriptions(self, customer_id):
        return [s for s in self.subscriptions.values() if s["customer"] == customer_id]

    def retrieve_subscription(self, subscription_id):
        if subscription_id not in self.subscriptions:
            raise PaymentGatewayError(f"No such subscription: {subscription_id}")
        return dict(self.subscriptions[subscription_id])

    def modify_subscription(self, subscription_id, params):
        self.modifications.append((subscription_id, params))
        subscription = self.subscriptions[subscription_id]
        if "cancel_at_period_end" in params:
            subscription["cancel_at_period_end"] = params["cancel_at_period_end"]
        if "items" in params:
            subscription["items"]["data"][0]["price"] = {"id": params["items"][0]["price"]}
        return dict(subscription)

    def cancel_subscription(self, subscription_id):
        subscription = self.subscriptions[subscription_id]
        subscription["status"] = "canceled"
        return dict(subscription)


class RecordingMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, *, to, subject, body, sender=None, reply_to=None):
        if self.fail:
            raise ConnectionError("SMTP server unavailable")
        self.sent.append(
            {"to": to, "subject": subject, "body": body, "sender": sender, "reply_to": reply_to}
        )


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    clear_cache()
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    yield session
    session.close()
    clear_cache()


@pytest.fixture
def store_settings(db_session):
    return SettingsService(db_session)


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def image_service(tmp_path):
    return ImageUploadService(media_root=tmp_path, max_upload_mb=1)


@pytest.fixture
def app(db_session, gateway, mailer, image_service):
    app = create_app()

    def _session_override():
        yield db_session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_image_upload_service] = lambda: image_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(*, role=models.UserRole.CUSTOMER, email=None, password="secret-pass", is_active=True):
        counter["n"] += 1
        user = models.User(
            name=f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def customer(make_user):
    return make_user(email="customer@example.com")


@pytest.fixture
def admin(make_user):
    return make_user(role=models.UserRole.ADMIN, email="admin@example.com")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, role=user.role.value)}"}


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def make_category(db_session):
    counter = {"n": 0}

    def _make(name=None, **fields):
        counter["n"] += 1
        name = name or f"Category {counter['n']}"
        category = models.Category(
            name=name,
            slug=fields.pop("slug", name.lower().replace(" ", "-")),
            sort_order=fields.pop("sort_order", counter["n"]),
            **fields,
        )
        db_session.add(category)
        db_session.commit()
        return category

    return _make


@pytest.fixture
def make_size(db_session):
    def _make(name="Medium box", shipping_cost=4.5, **fields):
        size = models.Size(
            name=name,
            length=fields.pop("length", 30),
            width=fields.pop("width", 20),
            height=fields.pop("height", 10),
            shipping_cost=shipping_cost,
            **fields,
        )
        db_session.add(size)
        db_session.commit()
        return size

    return _make


@pytest.fixture
def make_product(db_session):
    counter = {"n": 0}

    def _make(name=None, *, price=10.0, stock_quantity=10, **fields):
        counter["n"] += 1
        name = name or f"Product {counter['n']}"
        product = models.Product(
            name=name,
            slug=fields.pop("slug", name.lower().replace(" ", "-")),
            sku=fields.pop("sku", f"SKU-{counter['n']:04d}"),
            price=price,
            stock_quantity=stock_quantity,
            images=fields.pop("images", []),
            **fields,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def make_order(db_session):
    counter = {"n": 0}

    def _make(user=None, *, items=(), status=models.OrderStatus.PENDING, **fields):
        counter["n"] += 1
        order = models.Order(
            order_number=fields.pop("order_number", f"ORD-2025-{counter['n']:06d}"),
            user_id=user.id if user is not None else None,
            status=status,
            **fields,
        )
        # Paid orders hold the stock they took at fulfilment.
        paid = fields.get("payment_status") == models.PaymentStatus.SUCCEEDED
        subtotal = 0.0
        for product, quantity in items:
            line_total = round(float(product.price) * quantity, 2)
            subtotal += line_total
            order.items.append(
                models.OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    product_sku=product.sku,
                    quantity=quantity,
                    price=product.price,
                    total=line_total,
                    reserved_quantity=quantity if paid else 0,
                )
            )
        order.subtotal = fields.get("subtotal", round(subtotal, 2))
        if "total_amount" not in fields:
            order.total_amount = order.subtotal
        db_session.add(order)
        db_session.commit()
        return order

    return _make


@pytest.fixture
def headers_for():
    return auth_headers
