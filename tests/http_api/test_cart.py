# tests/http_api/test_cart.py
from fastapi import status


class TestGuestCart:
    def test_empty_cart(self, client):
        response = client.get("/cart")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["items"] == []
        assert data["is_guest"] is True
        assert data["totals"]["total"] == 0

    def test_add_and_count(self, client, make_product):
        # Arrange
        product = make_product(price=10.0, stock_quantity=5)

        # Act
        response = client.post("/cart/items", json={"product_id": product.id, "quantity": 2})

        # Assert
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["items"][0]["quantity"] == 2
        assert data["items"][0]["line_total"] == 20.0
        assert data["totals"]["total"] == 25.0
        assert client.get("/cart/count").json() == {"count": 2}

    def test_adding_same_product_merges_lines(self, client, make_product):
        product = make_product(stock_quantity=5)

        client.post("/cart/items", json={"product_id": product.id, "quantity": 2})
        response = client.post("/cart/items", json={"product_id": product.id, "quantity": 1})

        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 3

    def test_same_product_in_different_sizes_is_two_lines(self, client, make_product, make_size):
        product = make_product(stock_quantity=5)
        small = make_size("Small box", shipping_cost=3.0)
        large = make_size("Large box", shipping_cost=6.0)

        client.post("/cart/items", json={"product_id": product.id, "size_id": small.id})
        response = client.post("/cart/items", json={"product_id": product.id, "size_id": large.id})

        data = response.json()
        assert len(data["items"]) == 2
        assert data["totals"]["shipping_cost"] == 9.0

    def test_add_more_than_stock(self, client, make_product):
        product = make_product(stock_quantity=1)

        response = client.post("/cart/items", json={"product_id": product.id, "quantity": 2})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Product is out of stock or insufficient quantity available."

    def test_second_add_over_stock(self, client, make_product):
        product = make_product(stock_quantity=3)
        client.post("/cart/items", json={"product_id": product.id, "quantity": 2})

        response = client.post("/cart/items", json={"product_id": product.id, "quantity": 2})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Cannot add more items. Stock limit exceeded."

    def test_unknown_product(self, client):
        response = client.post("/cart/items", json={"product_id": 999})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_over_stock_reports_maximum(self, client, make_product):
        product = make_product(stock_quantity=4)
        item_id = client.post("/cart/items", json={"product_id": product.id}).json()["items"][0]["id"]

        response = client.patch(f"/cart/items/{item_id}", json={"quantity": 10})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"detail": "Insufficient stock available.", "max_quantity": 4}

    def test_update_to_zero_removes_line(self, client, make_product):
        product = make_product()
        item_id = client.post("/cart/items", json={"product_id": product.id}).json()["items"][0]["id"]

        response = client.patch(f"/cart/items/{item_id}", json={"quantity": 0})

        assert response.json()["items"] == []

    def test_remove_and_clear(self, client, make_product):
        first = make_product()
        second = make_product()
        item_id = client.post("/cart/items", json={"product_id": first.id}).json()["items"][0]["id"]
        client.post("/cart/items", json={"product_id": second.id})

        assert len(client.delete(f"/cart/items/{item_id}").json()["items"]) == 1
        assert client.delete("/cart").json()["items"] == []
        assert client.delete(f"/cart/items/{item_id}").status_code == status.HTTP_404_NOT_FOUND

    def test_show_reprices_lines(self, client, db_session, make_product):
        product = make_product(price=10.0)
        client.post("/cart/items", json={"product_id": product.id})
        product.price = 12.5
        db_session.commit()

        response = client.get("/cart")

        assert response.json()["items"][0]["price"] == 12.5


class TestCartOwnership:
    def test_other_users_line_is_not_found(self, client, make_product, make_user, headers_for):
        product = make_product()
        owner, other = make_user(), make_user()
        item_id = client.post(
            "/cart/items", json={"product_id": product.id}, headers=headers_for(owner)
        ).json()["items"][0]["id"]

        response = client.delete(f"/cart/items/{item_id}", headers=headers_for(other))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_guest_cart_merges_on_login(self, client, customer, make_product, customer_headers):
        """Matching lines are summed and capped at stock; the guest cart is gone afterwards."""
        # Arrange
        shared = make_product(stock_quantity=3)
        guest_only = make_product()
        client.post("/cart/items", json={"product_id": shared.id, "quantity": 2}, headers=customer_headers)
        client.post("/cart/items", json={"product_id": shared.id, "quantity": 2})
        client.post("/cart/items", json={"product_id": guest_only.id})

        # Act
        login = client.post("/auth/login", json={"email": customer.email, "password": "secret-pass"})

        # Assert
        assert login.json()["merged_cart_items"] == 2
        cart = client.get("/cart", headers=customer_headers).json()
        quantities = {item["product_id"]: item["quantity"] for item in cart["items"]}
        assert quantities == {shared.id: 3, guest_only.id: 1}
        assert client.get("/cart/count").json() == {"count": 0}


class TestCouponPreview:
    def test_valid_code(self, client, gateway, make_product):
        gateway.promotion_codes["SAVE10"] = {
            "id": "promo_1",
            "active": True,
            "coupon": {"id": "c1", "valid": True, "percent_off": 10},
        }
        product = make_product(price=60.0)
        client.post("/cart/items", json={"product_id": product.id})

        response = client.post("/cart/coupon", json={"code": "SAVE10"})

        data = response.json()
        assert data["valid"] is True
        assert data["discount"] == 6.0
        assert data["total_after_discount"] == 54.0

    def test_invalid_code(self, client, make_product):
        client.post("/cart/items", json={"product_id": make_product().id})

        response = client.post("/cart/coupon", json={"code": "NOPE"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["valid"] is False

    def test_empty_cart(self, client):
        response = client.post("/cart/coupon", json={"code": "SAVE10"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
