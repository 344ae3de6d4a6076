# tests/http_api/test_subscriptions.py
import pytest
from fastapi import status


def _subscription(sub_id, customer, price="price_basic", **fields):
    return {
        "id": sub_id,
        "customer": customer,
        "status": "active",
        "cancel_at_period_end": False,
        "current_period_end": 1767225600,
        "items": {"data": [{"id": f"si_{sub_id}", "price": {"id": price}}]},
        **fields,
    }


@pytest.fixture
def subscribed(gateway, customer):
    gateway.customers[customer.email] = "cus_1"
    gateway.subscriptions["sub_1"] = _subscription("sub_1", "cus_1")
    gateway.subscriptions["sub_other"] = _subscription("sub_other", "cus_2")
    return gateway


class TestPlans:
    def test_lists_recurring_prices(self, client, gateway):
        gateway.prices = [
            {
                "id": "price_basic",
                "unit_amount": 990,
                "currency": "eur",
                "product": {"name": "Monthly box"},
                "recurring": {"interval": "month", "interval_count": 1},
            }
        ]

        response = client.get("/subscriptions/plans")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {
                "price_id": "price_basic",
                "product_name": "Monthly box",
                "amount": 9.9,
                "currency": "eur",
                "interval": "month",
                "interval_count": 1,
            }
        ]


class TestSubscriptionCheckout:
    def test_new_customer_checkout(self, client, gateway, customer, customer_headers):
        response = client.post(
            "/subscriptions/checkout",
            json={"price_id": "price_basic", "trial_days": 14},
            headers=customer_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        params = gateway.session_params[-1]
        assert params["mode"] == "subscription"
        assert params["customer_email"] == customer.email
        assert params["subscription_data"] == {"trial_period_days": 14}
        assert response.json()["session_id"] == "cs_test_1"

    def test_existing_customer_is_reused(self, client, subscribed, customer_headers):
        client.post("/subscriptions/checkout", json={"price_id": "price_basic"}, headers=customer_headers)

        assert subscribed.session_params[-1]["customer"] == "cus_1"

    def test_invalid_promotion_code(self, client, customer_headers):
        response = client.post(
            "/subscriptions/checkout",
            json={"price_id": "price_basic", "promotion_code": "NOPE"},
            headers=customer_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Promotion code not found."


class TestManageSubscriptions:
    def test_lists_own_subscriptions(self, client, subscribed, customer_headers):
        response = client.get("/subscriptions", headers=customer_headers)

        assert [s["id"] for s in response.json()["items"]] == ["sub_1"]
        assert response.json()["items"][0]["price_id"] == "price_basic"

    def test_no_provider_customer_means_no_subscriptions(self, client, customer_headers):
        assert client.get("/subscriptions", headers=customer_headers).json() == {"items": []}

    def test_cancel_at_period_end_then_resume(self, client, subscribed, customer_headers):
        cancelled = client.post("/subscriptions/sub_1/cancel", json={}, headers=customer_headers)
        resumed = client.post("/subscriptions/sub_1/resume", headers=customer_headers)

        assert cancelled.json()["cancel_at_period_end"] is True
        assert cancelled.json()["status"] == "active"
        assert resumed.json()["cancel_at_period_end"] is False

    def test_cancel_immediately(self, client, subscribed, customer_headers):
        response = client.post(
            "/subscriptions/sub_1/cancel", json={"immediately": True}, headers=customer_headers
        )

        assert response.json()["status"] == "canceled"

    def test_resume_requires_scheduled_cancellation(self, client, subscribed, customer_headers):
        response = client.post("/subscriptions/sub_1/resume", headers=customer_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_change_plan(self, client, subscribed, customer_headers):
        response = client.post(
            "/subscriptions/sub_1/change-plan",
            json={"price_id": "price_pro", "prorate": False},
            headers=customer_headers,
        )

        assert response.json()["price_id"] == "price_pro"
        _, params = subscribed.modifications[-1]
        assert params["items"] == [{"id": "si_sub_1", "price": "price_pro"}]
        assert params["proration_behavior"] == "none"

    def test_other_customers_subscription_is_hidden(self, client, subscribed, customer_headers):
        response = client.post("/subscriptions/sub_other/cancel", json={}, headers=customer_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert subscribed.modifications == []
