"""Unit tests for catalog and inventory entities."""

import pytest
from pydantic import ValidationError

from shelfwise.core.entities import AuthContext, CatalogProduct


class TestCatalogProduct:
    def test_defaults(self):
        product = CatalogProduct(store_id="s", name="Cola")

        assert product.category == "Uncategorized"
        assert product.tracks_inventory is False
        assert product.is_unmatched is False

    def test_zero_initial_stock_is_tracked(self):
        assert CatalogProduct(store_id="s", name="Cola", initial_stock=0).tracks_inventory

    def test_margin_percent(self):
        product = CatalogProduct(store_id="s", name="Cola", cost_price=6, selling_price=8)

        assert product.margin_percent == pytest.approx(25.0)

    def test_margin_without_price(self):
        assert CatalogProduct(store_id="s", name="Cola", cost_price=6).margin_percent is None


class TestAuthContext:
    def test_requires_ids(self):
        with pytest.raises(ValidationError):
            AuthContext(user_id="", store_id="s")

    def test_frozen(self):
        ctx = AuthContext(user_id="u", store_id="s")
        with pytest.raises(ValidationError):
            ctx.store_id = "other"
