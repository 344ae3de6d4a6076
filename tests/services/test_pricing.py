# tests/services/test_pricing.py
import pytest

from storefront_http_api.db import models
from storefront_http_api.services.pricing import calculate_totals


@pytest.fixture
def make_cart(db_session):
    def _make(*lines):
        cart = models.Cart(session_id="guest-1")
        for product, quantity, size in lines:
            cart.items.append(
                models.CartItem(
                    product=product,
                    size=size,
                    quantity=quantity,
                    price=product.price,
                )
            )
        db_session.add(cart)
        db_session.commit()
        return cart

    return _make


class TestCalculateTotals:
    def test_empty_cart_has_zero_totals(self, store_settings):
        totals = calculate_totals(None, store_settings)

        assert totals.subtotal == 0
        assert totals.shipping_cost == 0
        assert totals.total == 0
        assert totals.total_quantity == 0

    def test_tax_is_extracted_from_inclusive_prices(self, make_cart, make_product, store_settings):
        """Default settings: 22% tax included in prices, 5.00 flat shipping below 50.00."""
        # Arrange
        cart = make_cart((make_product(price=10.0), 2, None))

        # Act
        totals = calculate_totals(cart, store_settings)

        # Assert
        assert totals.subtotal == 20.0
        assert totals.tax_amount == 3.61
        assert totals.subtotal_excluding_tax == 16.39
        assert totals.tax_rate == 22.0
        assert totals.shipping_cost == 5.0
        assert totals.total == 25.0
        assert totals.total_quantity == 2

    def test_tax_is_added_when_prices_exclude_it(self, db_session, make_cart, make_product, store_settings):
        store_settings.set("prices_include_tax", False)
        store_settings.set("default_tax_rate", 10)
        db_session.commit()
        cart = make_cart((make_product(price=30.0), 1, None))

        totals = calculate_totals(cart, store_settings)

        assert totals.tax_amount == 3.0
        assert totals.subtotal_excluding_tax == 30.0
        assert totals.total == 38.0

    def test_disabled_tax_means_zero_rate(self, db_session, make_cart, make_product, store_settings):
        store_settings.set("tax_enabled", False)
        db_session.commit()
        cart = make_cart((make_product(price=30.0), 1, None))

        totals = calculate_totals(cart, store_settings)

        assert totals.tax_amount == 0
        assert totals.tax_rate == 0
        assert totals.total == 35.0

    def test_free_shipping_at_threshold(self, make_cart, make_product, store_settings):
        cart = make_cart((make_product(price=25.0), 2, None))

        totals = calculate_totals(cart, store_settings)

        assert totals.shipping_cost == 0
        assert totals.total == 50.0

    def test_box_shipping_is_charged_per_line(self, make_cart, make_product, make_size, store_settings):
        """Lines with a size pay the box cost once per line, regardless of the threshold."""
        box = make_size(shipping_cost=4.5)
        cart = make_cart(
            (make_product(price=40.0), 3, box),
            (make_product(price=10.0), 1, box),
        )

        totals = calculate_totals(cart, store_settings)

        assert totals.subtotal == 130.0
        assert totals.shipping_cost == 9.0
        assert totals.total == 139.0

    def test_shipping_disabled(self, db_session, make_cart, make_product, store_settings):
        store_settings.set("shipping_enabled", False)
        db_session.commit()
        cart = make_cart((make_product(price=5.0), 1, None))

        totals = calculate_totals(cart, store_settings)

        assert totals.shipping_cost == 0
        assert totals.total == 5.0
