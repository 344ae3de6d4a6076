# tests/http_api/test_catalog.py
from fastapi import status

from storefront_http_api.db import models


class TestProductListing:
    def test_only_active_in_stock_products_are_listed(self, client, make_product):
        make_product("Visible")
        make_product("Sold out", stock_quantity=0)
        make_product("Hidden", status=models.ProductStatus.DRAFT)

        response = client.get("/products")

        assert response.status_code == status.HTTP_200_OK
        names = [p["name"] for p in response.json()["items"]]
        assert names == ["Visible"]

    def test_filters_and_price_sort(self, client, make_category, make_product):
        mugs = make_category("Mugs")
        make_product("Big mug", price=18.0, category_id=mugs.id)
        make_product("Small mug", price=9.0, category_id=mugs.id)
        make_product("Poster", price=12.0)

        response = client.get("/products", params={"category": "mugs", "sort": "price"})

        data = response.json()
        assert [p["name"] for p in data["items"]] == ["Small mug", "Big mug"]
        assert data["filters"]["category"] == "mugs"
        assert data["price_range"] == {"min": 9.0, "max": 18.0}

    def test_search_and_price_bounds(self, client, make_product):
        make_product("Blue Mug", price=10.0)
        make_product("Red Mug", price=30.0)
        make_product("Blue Poster", price=10.0)

        response = client.get("/products", params={"search": "mug", "max_price": 20})

        assert [p["name"] for p in response.json()["items"]] == ["Blue Mug"]

    def test_unknown_sort_falls_back_to_newest(self, client, make_product):
        make_product()

        response = client.get("/products", params={"sort": "random"})

        assert response.json()["filters"]["sort"] == "newest"

    def test_pagination_meta(self, client, make_product):
        for _ in range(11):
            make_product()

        response = client.get("/products", params={"page": 2})

        meta = response.json()["meta"]
        assert meta == {"page": 2, "per_page": 9, "total": 11, "last_page": 2}
        assert len(response.json()["items"]) == 2


class TestProductDetail:
    def test_detail_with_breadcrumb_and_related(self, client, make_category, make_product):
        mugs = make_category("Mugs")
        product = make_product("Big mug", category_id=mugs.id, images=["a.png"])
        make_product("Small mug", category_id=mugs.id)

        response = client.get(f"/products/{product.slug}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["product"]["main_image_url"] == f"/storage/products/{product.id}/a.png"
        assert [b["name"] for b in data["breadcrumb"]] == ["Home", "Products", "Mugs", "Big mug"]
        assert [p["name"] for p in data["related_products"]] == ["Small mug"]

    def test_product_without_images_uses_placeholder(self, client, make_product):
        product = make_product()

        response = client.get(f"/products/{product.slug}")

        assert response.json()["product"]["image_urls"] == [models.DEFAULT_PRODUCT_IMAGE]

    def test_inactive_product_is_not_found(self, client, make_product):
        product = make_product(status=models.ProductStatus.INACTIVE)

        response = client.get(f"/products/{product.slug}")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestCategoriesAndHome:
    def test_category_page(self, client, make_category, make_product):
        mugs = make_category("Mugs")
        make_product("Mug", category_id=mugs.id)

        response = client.get("/categories/mugs")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [p["name"] for p in data["items"]] == ["Mug"]
        assert data["filters"]["sort"] == "name"

    def test_category_page_is_paginated_by_twelve(self, client, make_category, make_product):
        mugs = make_category("Mugs")
        for n in range(14):
            make_product(f"Mug {n:02d}", category_id=mugs.id)

        first = client.get("/categories/mugs").json()
        second = client.get("/categories/mugs", params={"page": 2}).json()

        assert len(first["items"]) == 12
        assert first["meta"] == {"page": 1, "per_page": 12, "total": 14, "last_page": 2}
        assert [p["name"] for p in second["items"]] == ["Mug 12", "Mug 13"]

    def test_category_filters_and_price_range(self, client, make_category, make_product):
        # Arrange
        mugs = make_category("Mugs")
        cups = make_category("Cups")
        make_product("Big mug", price=18.0, category_id=mugs.id)
        make_product("Small mug", price=9.0, category_id=mugs.id)
        make_product("Tiny mug", price=4.0, category_id=mugs.id, stock_quantity=0)
        make_product("Gold cup", price=250.0, category_id=cups.id)

        # Act
        response = client.get(
            "/categories/mugs", params={"search": "mug", "min_price": 5, "sort": "price_desc"}
        )

        # Assert
        data = response.json()
        assert [p["name"] for p in data["items"]] == ["Big mug", "Small mug"]
        assert data["price_range"] == {"min": 9.0, "max": 18.0}
        assert data["filters"]["category"] == "mugs"
        assert data["filters"]["min_price"] == 5

    def test_inactive_category_is_not_found(self, client, make_category):
        make_category("Archive", is_active=False)

        assert client.get("/categories/archive").status_code == status.HTTP_404_NOT_FOUND

    def test_home_lists_featured_products(self, client, make_product):
        make_product("Star", featured=True)
        make_product("Plain")

        response = client.get("/")

        assert [p["name"] for p in response.json()["featured_products"]] == ["Star"]
