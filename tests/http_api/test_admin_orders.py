# tests/http_api/test_admin_orders.py
from fastapi import status

from storefront_http_api.db import models


class TestAdminOrderIndex:
    def test_index_with_kpis(self, client, customer, make_order, admin_headers):
        make_order(customer, total_amount=30.0, payment_status=models.PaymentStatus.SUCCEEDED)
        make_order(customer, total_amount=12.0)

        response = client.get("/admin/orders", headers=admin_headers)

        data = response.json()
        assert data["meta"]["total"] == 2
        assert data["kpis"]["today"] == {"orders": 2, "revenue": 30.0}
        assert data["kpis"]["year"]["orders"] == 2

    def test_filter_by_status_and_search(self, client, customer, make_user, make_order, admin_headers):
        make_order(customer, status=models.OrderStatus.SHIPPED)
        wanted = make_order(make_user(email="jane@example.com"), status=models.OrderStatus.SHIPPED)
        make_order(customer)

        response = client.get(
            "/admin/orders", params={"status": "shipped", "search": "JANE"}, headers=admin_headers
        )

        assert [o["id"] for o in response.json()["items"]] == [wanted.id]


class TestAdminOrderUpdates:
    def test_item_changes_recalculate_totals(self, client, customer, make_product, make_order, admin_headers):
        # Arrange
        product = make_product(price=10.0)
        order = make_order(customer, items=[(product, 2)], shipping_amount=5.0)
        item_id = order.items[0].id

        # Act
        response = client.put(
            f"/admin/orders/{order.id}",
            json={"items": [{"id": item_id, "quantity": 3, "price": 8.0}], "notes": "Phoned customer"},
            headers=admin_headers,
        )

        # Assert
        data = response.json()
        assert data["subtotal"] == 24.0
        assert data["total_amount"] == 29.0
        assert data["notes"] == "Phoned customer"

    def test_unknown_item(self, client, customer, make_order, admin_headers):
        order = make_order(customer)

        response = client.put(
            f"/admin/orders/{order.id}",
            json={"items": [{"id": 999, "quantity": 1, "price": 1.0}]},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_status_to_delivered_stamps_time(self, client, customer, make_order, admin_headers):
        order = make_order(customer, status=models.OrderStatus.SHIPPED)

        response = client.patch(
            f"/admin/orders/{order.id}/status", json={"status": "delivered"}, headers=admin_headers
        )

        assert response.json()["status"] == "delivered"
        assert order.delivered_at is not None

    def test_bulk_status(self, client, customer, make_order, admin_headers):
        ids = [make_order(customer).id, make_order(customer).id]

        response = client.post(
            "/admin/orders/bulk-status",
            json={"order_ids": ids + [999], "status": "processing"},
            headers=admin_headers,
        )

        assert response.json() == {"updated": 2, "message": "2 orders updated to processing."}

    def test_status_to_cancelled_restores_stock(self, client, customer, make_product, make_order, admin_headers):
        product = make_product(stock_quantity=3)
        order = make_order(
            customer,
            items=[(product, 2)],
            status=models.OrderStatus.PROCESSING,
            payment_status=models.PaymentStatus.SUCCEEDED,
        )

        response = client.patch(
            f"/admin/orders/{order.id}/status", json={"status": "cancelled"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "cancelled"
        assert product.stock_quantity == 5

    def test_status_to_cancelled_rejects_shipped_order(self, client, customer, make_order, admin_headers):
        order = make_order(customer, status=models.OrderStatus.SHIPPED)

        response = client.patch(
            f"/admin/orders/{order.id}/status", json={"status": "cancelled"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "This order can no longer be cancelled."
        assert order.status == models.OrderStatus.SHIPPED

    def test_bulk_cancel_restores_stock_and_skips_shipped(
        self, client, customer, make_product, make_order, admin_headers
    ):
        # Arrange
        product = make_product(stock_quantity=1)
        paid = make_order(
            customer,
            items=[(product, 2)],
            status=models.OrderStatus.PROCESSING,
            payment_status=models.PaymentStatus.SUCCEEDED,
        )
        shipped = make_order(customer, status=models.OrderStatus.SHIPPED)

        # Act
        response = client.post(
            "/admin/orders/bulk-status",
            json={"order_ids": [paid.id, shipped.id], "status": "cancelled"},
            headers=admin_headers,
        )

        # Assert
        assert response.json() == {"updated": 1, "message": "1 orders updated to cancelled."}
        assert paid.status == models.OrderStatus.CANCELLED
        assert shipped.status == models.OrderStatus.SHIPPED
        assert product.stock_quantity == 3

    def test_admin_cancel(self, client, customer, make_order, admin_headers):
        order = make_order(customer)

        response = client.post(f"/admin/orders/{order.id}/cancel", headers=admin_headers)

        assert response.json()["status"] == "cancelled"


class TestRefund:
    def test_full_refund(self, client, customer, make_order, admin_headers):
        order = make_order(customer, total_amount=40.0, payment_status=models.PaymentStatus.SUCCEEDED)

        response = client.post(
            f"/admin/orders/{order.id}/refund",
            json={"amount": 40, "reason": "Damaged in transit"},
            headers=admin_headers,
        )

        data = response.json()
        assert data["payment_status"] == "refunded"
        assert data["notes"].startswith("REFUND: $40.00 - Damaged in transit")

    def test_partial_refund_keeps_payment_status(self, client, customer, make_order, admin_headers):
        order = make_order(customer, total_amount=40.0, payment_status=models.PaymentStatus.SUCCEEDED)

        response = client.post(
            f"/admin/orders/{order.id}/refund", json={"amount": 10, "reason": "Late"}, headers=admin_headers
        )

        assert response.json()["payment_status"] == "succeeded"

    def test_refund_over_total(self, client, customer, make_order, admin_headers):
        order = make_order(customer, total_amount=40.0)

        response = client.post(
            f"/admin/orders/{order.id}/refund", json={"amount": 41, "reason": "Oops"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Refund amount cannot exceed order total."


class TestShip:
    def test_ship_records_tracking_and_mails(self, client, customer, make_order, mailer, admin_headers):
        order = make_order(customer, status=models.OrderStatus.PROCESSING)

        response = client.post(
            f"/admin/orders/{order.id}/ship",
            json={"tracking_number": "TRK123", "carrier": "PostNL"},
            headers=admin_headers,
        )

        data = response.json()
        assert data["status"] == "shipped"
        assert data["tracking_number"] == "TRK123"
        assert "=== SHIPPING INFORMATION ===" in data["notes"]
        assert "Carrier: PostNL" in data["notes"]
        assert [m["to"] for m in mailer.sent] == [customer.email]
        assert mailer.sent[0]["subject"] == f"Your order {order.order_number} has shipped"

    def test_shipping_mail_can_be_disabled(self, client, customer, make_order, mailer, store_settings, admin_headers):
        store_settings.set("order_shipped_enabled", False)
        order = make_order(customer, status=models.OrderStatus.PROCESSING)

        client.post(f"/admin/orders/{order.id}/ship", json={"tracking_number": "T1"}, headers=admin_headers)

        assert mailer.sent == []

    def test_cannot_ship_cancelled_order(self, client, customer, make_order, admin_headers):
        order = make_order(customer, status=models.OrderStatus.CANCELLED)

        response = client.post(
            f"/admin/orders/{order.id}/ship", json={"tracking_number": "T1"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Cannot ship an order that is cancelled."
