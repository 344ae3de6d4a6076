# tests/http_api/test_webhooks.py
import json

import pytest
from fastapi import status

from storefront_http_api.db import models

VALID_SIGNATURE = "t=1,v1=valid"


def send_event(client, event_type, obj, *, signature=VALID_SIGNATURE):
    body = json.dumps({"id": "evt_1", "type": event_type, "data": {"object": obj}})
    return client.post(
        "/webhooks/stripe",
        content=body,
        headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
    )


@pytest.fixture
def product(make_product):
    return make_product("Kettle", price=30.0, stock_quantity=4)


@pytest.fixture
def pending_order(client, product, customer_headers):
    client.post("/cart/items", json={"product_id": product.id, "quantity": 2}, headers=customer_headers)
    response = client.post("/checkout/session", json={}, headers=customer_headers)
    return response.json()["session_id"]


class TestSignature:
    def test_bad_signature_is_rejected(self, client):
        response = send_event(client, "checkout.session.completed", {}, signature="forged")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unhandled_event_is_acknowledged(self, client):
        response = send_event(client, "customer.created", {"id": "cus_1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "success"}


class TestCheckoutSessionEvents:
    def test_completed_fulfils_pending_order(self, client, db_session, mailer, product, pending_order):
        # Act
        response = send_event(
            client,
            "checkout.session.completed",
            {
                "id": pending_order,
                "payment_status": "paid",
                "payment_intent": "pi_9",
                "amount_total": 5500,
                "total_details": {"amount_discount": 1000},
            },
        )

        # Assert
        assert response.status_code == status.HTTP_200_OK
        order = db_session.query(models.Order).one()
        assert order.payment_status == models.PaymentStatus.SUCCEEDED
        assert order.status == models.OrderStatus.PROCESSING
        assert order.total_amount == 55.0
        assert order.discount_amount == 10.0
        assert product.stock_quantity == 2
        assert len(mailer.sent) == 1

    def test_redelivery_does_not_take_stock_twice(self, client, product, mailer, pending_order):
        event = {"id": pending_order, "payment_status": "paid", "payment_intent": "pi_9"}

        send_event(client, "checkout.session.completed", event)
        send_event(client, "checkout.session.completed", event)
        send_event(client, "payment_intent.succeeded", {"id": "pi_9"})

        assert product.stock_quantity == 2
        assert len(mailer.sent) == 1

    def test_short_stock_is_clamped_and_cancel_returns_only_what_was_taken(
        self, client, db_session, product, pending_order, customer_headers
    ):
        # Arrange: stock sold elsewhere between checkout and payment
        product.stock_quantity = 1
        db_session.commit()

        # Act
        send_event(
            client,
            "checkout.session.completed",
            {"id": pending_order, "payment_status": "paid", "payment_intent": "pi_9"},
        )
        order = db_session.query(models.Order).one()
        paid_stock = product.stock_quantity
        reserved = order.items[0].reserved_quantity
        cancelled = client.post(f"/orders/{order.id}/cancel", headers=customer_headers)

        # Assert
        assert paid_stock == 0
        assert reserved == 1
        assert cancelled.status_code == status.HTTP_200_OK
        assert product.stock_quantity == 1
        assert order.items[0].reserved_quantity == 0

    def test_unpaid_session_is_ignored(self, client, db_session, pending_order):
        send_event(client, "checkout.session.completed", {"id": pending_order, "payment_status": "unpaid"})

        order = db_session.query(models.Order).one()
        assert order.payment_status == models.PaymentStatus.PENDING

    def test_missing_order_is_rebuilt_from_guest_cart(self, client, db_session, product):
        # Arrange: a guest cart whose pending order was never written
        client.post("/cart/items", json={"product_id": product.id})
        cart = db_session.query(models.Cart).one()

        # Act
        response = send_event(
            client,
            "checkout.session.completed",
            {
                "id": "cs_orphan",
                "payment_status": "paid",
                "amount_total": 3500,
                "amount_subtotal": 3000,
                "currency": "eur",
                "customer_details": {"email": "guest@example.com"},
                "metadata": {"cart_id": str(cart.id), "guest_session_id": cart.session_id},
            },
        )

        # Assert
        assert response.status_code == status.HTTP_200_OK
        order = db_session.query(models.Order).one()
        assert order.stripe_checkout_session_id == "cs_orphan"
        assert order.guest_email == "guest@example.com"
        assert order.is_paid
        assert order.total_amount == 35.0
        assert product.stock_quantity == 3
        assert cart.items == []

    def test_unknown_session_without_cart_is_acknowledged(self, client, db_session):
        response = send_event(
            client, "checkout.session.completed", {"id": "cs_nobody", "payment_status": "paid"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert db_session.query(models.Order).count() == 0

    def test_expired_session_cancels_order(self, client, db_session, pending_order):
        send_event(client, "checkout.session.expired", {"id": pending_order})

        order = db_session.query(models.Order).one()
        assert order.status == models.OrderStatus.CANCELLED
        assert order.payment_status == models.PaymentStatus.CANCELLED


class TestPaymentIntentEvents:
    def test_failed_payment(self, client, db_session, pending_order):
        send_event(
            client,
            "payment_intent.payment_failed",
            {
                "id": "pi_fail",
                "metadata": {"checkout_session_id": pending_order},
                "last_payment_error": {"message": "Your card was declined."},
            },
        )

        order = db_session.query(models.Order).one()
        assert order.payment_status == models.PaymentStatus.FAILED
        assert order.stripe_payment_intent_id == "pi_fail"

    def test_late_failure_does_not_reopen_a_paid_order(
        self, client, db_session, mailer, product, pending_order
    ):
        # Arrange
        paid = {"id": pending_order, "payment_status": "paid", "payment_intent": "pi_ok"}
        send_event(client, "checkout.session.completed", paid)

        # Act: an earlier declined attempt arrives late, then the completion is redelivered
        failed = send_event(
            client,
            "payment_intent.payment_failed",
            {
                "id": "pi_declined",
                "metadata": {"checkout_session_id": pending_order},
                "last_payment_error": {"message": "Your card was declined."},
            },
        )
        send_event(client, "checkout.session.completed", paid)

        # Assert
        assert failed.status_code == status.HTTP_200_OK
        order = db_session.query(models.Order).one()
        assert order.payment_status == models.PaymentStatus.SUCCEEDED
        assert order.stripe_payment_intent_id == "pi_ok"
        assert product.stock_quantity == 2
        assert len(mailer.sent) == 1

    def test_succeeded_by_checkout_session_metadata(self, client, db_session, product, pending_order):
        send_event(
            client,
            "payment_intent.succeeded",
            {"id": "pi_ok", "metadata": {"checkout_session_id": pending_order}},
        )

        order = db_session.query(models.Order).one()
        assert order.is_paid
        assert product.stock_quantity == 2

    def test_unknown_intent_is_acknowledged(self, client):
        response = send_event(client, "payment_intent.succeeded", {"id": "pi_unknown"})

        assert response.status_code == status.HTTP_200_OK
