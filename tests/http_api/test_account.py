# tests/http_api/test_account.py
from fastapi import status

from storefront_http_api.db import models


class TestMyOrders:
    def test_lists_only_own_orders(self, client, customer, make_user, make_order, customer_headers):
        mine = make_order(customer)
        make_order(make_user())

        response = client.get("/orders", headers=customer_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [o["id"] for o in response.json()["items"]] == [mine.id]

    def test_other_users_order_is_not_found(self, client, make_user, make_order, customer_headers):
        theirs = make_order(make_user())

        response = client.get(f"/orders/{theirs.id}", headers=customer_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cancel_paid_order_restores_stock(self, client, customer, make_product, make_order, customer_headers):
        product = make_product(stock_quantity=3)
        order = make_order(
            customer,
            items=[(product, 2)],
            status=models.OrderStatus.PROCESSING,
            payment_status=models.PaymentStatus.SUCCEEDED,
        )

        response = client.post(f"/orders/{order.id}/cancel", headers=customer_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "cancelled"
        assert product.stock_quantity == 5

    def test_cancel_pending_order_cancels_payment(self, client, customer, make_product, make_order, customer_headers):
        product = make_product(stock_quantity=3)
        order = make_order(customer, items=[(product, 1)])

        response = client.post(f"/orders/{order.id}/cancel", headers=customer_headers)

        assert response.json()["payment_status"] == "cancelled"
        assert product.stock_quantity == 3

    def test_shipped_order_cannot_be_cancelled(self, client, customer, make_order, customer_headers):
        order = make_order(customer, status=models.OrderStatus.SHIPPED)

        response = client.post(f"/orders/{order.id}/cancel", headers=customer_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "This order can no longer be cancelled."


class TestReviews:
    def test_review_requires_delivered_purchase(self, client, customer, make_product, make_order, customer_headers):
        product = make_product()
        make_order(customer, items=[(product, 1)], status=models.OrderStatus.SHIPPED)

        response = client.post(
            "/reviews", json={"product_id": product.id, "rating": 5}, headers=customer_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "You can only review products you have purchased."

    def test_create_edit_delete(self, client, customer, make_product, make_order, customer_headers):
        # Arrange
        product = make_product()
        order = make_order(customer, items=[(product, 1)], status=models.OrderStatus.DELIVERED)

        # Act
        created = client.post(
            "/reviews",
            json={"product_id": product.id, "rating": 4, "comment": "Solid."},
            headers=customer_headers,
        )
        review_id = created.json()["id"]
        edited = client.put(f"/reviews/{review_id}", json={"rating": 2}, headers=customer_headers)
        deleted = client.delete(f"/reviews/{review_id}", headers=customer_headers)

        # Assert
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["is_approved"] is True
        assert created.json()["order_id"] == order.id
        assert edited.json()["rating"] == 2
        assert edited.json()["comment"] == "Solid."
        assert edited.json()["stars"] == "★★☆☆☆"
        assert deleted.status_code == status.HTTP_204_NO_CONTENT

    def test_one_review_per_product(self, client, customer, make_product, make_order, customer_headers):
        product = make_product()
        make_order(customer, items=[(product, 1)], status=models.OrderStatus.DELIVERED)
        payload = {"product_id": product.id, "rating": 5}
        client.post("/reviews", json=payload, headers=customer_headers)

        response = client.post("/reviews", json=payload, headers=customer_headers)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_cannot_edit_someone_elses_review(self, client, db_session, make_user, make_product, customer_headers):
        author = make_user()
        product = make_product()
        review = models.Review(user_id=author.id, product_id=product.id, rating=3)
        db_session.add(review)
        db_session.commit()

        response = client.put(f"/reviews/{review.id}", json={"rating": 1}, headers=customer_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_rating_out_of_range(self, client, customer_headers):
        response = client.post("/reviews", json={"product_id": 1, "rating": 6}, headers=customer_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestWishlist:
    def test_add_is_idempotent(self, client, make_product, customer_headers):
        product = make_product()

        first = client.post("/wishlist", json={"product_id": product.id}, headers=customer_headers)
        second = client.post("/wishlist", json={"product_id": product.id}, headers=customer_headers)

        assert first.status_code == status.HTTP_201_CREATED
        assert first.json()["created"] is True
        assert second.status_code == status.HTTP_200_OK
        assert second.json()["created"] is False
        assert len(client.get("/wishlist", headers=customer_headers).json()) == 1

    def test_check_and_remove_by_product(self, client, make_product, customer_headers):
        product = make_product()
        client.post("/wishlist", json={"product_id": product.id}, headers=customer_headers)

        assert client.get(f"/wishlist/check/{product.id}", headers=customer_headers).json() == {
            "product_id": product.id,
            "in_wishlist": True,
        }
        removed = client.delete(f"/wishlist/product/{product.id}", headers=customer_headers)

        assert removed.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"/wishlist/check/{product.id}", headers=customer_headers).json()["in_wishlist"] is False

    def test_remove_other_users_entry(self, client, make_product, make_user, headers_for, customer_headers):
        product = make_product()
        entry = client.post(
            "/wishlist", json={"product_id": product.id}, headers=headers_for(make_user())
        ).json()["item"]

        response = client.delete(f"/wishlist/{entry['id']}", headers=customer_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_login(self, client):
        assert client.get("/wishlist").status_code == status.HTTP_401_UNAUTHORIZED


class TestCustomerDashboard:
    def test_dashboard_aggregates(self, client, customer, make_product, make_order, customer_headers):
        product = make_product()
        make_order(customer, total_amount=40.0, payment_status=models.PaymentStatus.SUCCEEDED,
                   status=models.OrderStatus.DELIVERED)
        make_order(customer, total_amount=15.0)
        client.post("/wishlist", json={"product_id": product.id}, headers=customer_headers)

        response = client.get("/dashboard", headers=customer_headers)

        data = response.json()
        assert data["order_stats"]["total_orders"] == 2
        assert data["order_stats"]["pending_orders"] == 1
        assert len(data["recent_orders"]) == 2
        assert len(data["wishlist_items"]) == 1


class TestPromotionValidation:
    def test_validate_with_amount(self, client, gateway):
        gateway.promotion_codes["TEN"] = {
            "id": "promo_ten",
            "active": True,
            "coupon": {"id": "c_ten", "valid": True, "amount_off": 1000, "currency": "eur"},
        }

        response = client.post("/promotions/validate", json={"code": "TEN", "amount": 25})

        data = response.json()
        assert data["valid"] is True
        assert data["amount_off"] == 10.0
        assert data["discount"] == 10.0
