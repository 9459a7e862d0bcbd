"""Integration tests for catalog and inventory administration."""

import pytest

from storefront.application.add_product import AddProductHandler
from storefront.application.restock_product import RestockProductHandler
from storefront.application.show_inventory import ShowInventoryHandler
from storefront.application.update_product import UpdateProductPriceHandler
from storefront.domain.exceptions import ProductNotFoundError, ValidationError
from storefront.domain.model.inventory import StockStatus
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeProductRepository


def _with_catalog() -> FakeProductRepository:
    repo = FakeProductRepository()
    add = AddProductHandler(repo)
    add.handle("Oud Noir", {"50ml": ("4500", 3), "100ml": ("8000", 20)})
    add.handle("Amber Musk", {"50ml": ("3000", 8)}, discount_percentage="15")
    add.handle("Rose Attar", {"12ml": ("1500", 0)})
    return repo


class TestAddProduct:

    def test_assigns_sequential_ids(self):
        repo = _with_catalog()
        assert [p.id for p in repo.list_all()] == ["1", "2", "3"]

    def test_base_price_is_cheapest_variant(self):
        product = _with_catalog().get_by_id("1")
        assert product.price == Money.of("4500")
        assert product.price_for("100ml") == Money.of("8000")
        assert product.stock == {"50ml": 3, "100ml": 20}
        assert product.sold == {"50ml": 0, "100ml": 0}

    def test_duplicate_name_rejected(self):
        repo = _with_catalog()
        with pytest.raises(ValidationError, match="already exists"):
            AddProductHandler(repo).handle("oud noir", {"50ml": ("1", 1)})

    def test_no_variants_rejected(self):
        with pytest.raises(ValidationError, match="at least one variant"):
            AddProductHandler(FakeProductRepository()).handle("Vetiver", {})

    def test_bad_discount_rejected(self):
        with pytest.raises(ValidationError, match="Invalid discount"):
            AddProductHandler(FakeProductRepository()).handle(
                "Vetiver", {"50ml": ("100", 1)}, discount_percentage="lots"
            )


class TestPriceAndRestock:

    def test_update_variant_price(self):
        repo = _with_catalog()
        UpdateProductPriceHandler(repo).handle("1", "100ml", "8500")
        assert repo.get_by_id("1").price_for("100ml") == Money.of("8500")

    def test_update_price_unknown_product(self):
        with pytest.raises(ProductNotFoundError):
            UpdateProductPriceHandler(FakeProductRepository()).handle("7", "50ml", "1")

    def test_restock_adds_units_and_leaves_sold(self):
        repo = _with_catalog()
        new_level = RestockProductHandler(repo).handle("3", "12ml", 12)

        assert new_level == 12
        product = repo.get_by_id("3")
        assert product.stock_for("12ml") == 12
        assert product.sold_for("12ml") == 0

    def test_restock_unknown_variant(self):
        with pytest.raises(ValidationError, match="no variant"):
            RestockProductHandler(_with_catalog()).handle("3", "50ml", 1)


class TestShowInventory:

    def test_report_lines_and_summary(self):
        report = ShowInventoryHandler(_with_catalog()).handle()

        statuses = {(lv.product_name, lv.variant): lv.status for lv in report.lines}
        assert statuses == {
            ("Oud Noir", "50ml"): StockStatus.CRITICAL,
            ("Oud Noir", "100ml"): StockStatus.IN_STOCK,
            ("Amber Musk", "50ml"): StockStatus.LOW,
            ("Rose Attar", "12ml"): StockStatus.OUT_OF_STOCK,
        }
        assert report.summary.total_stock == 31
        assert report.summary.out_of_stock_count == 1
        assert report.summary.low_stock_count == 2

    def test_low_stock_sorted_ascending(self):
        alerts = ShowInventoryHandler(_with_catalog()).low_stock()
        assert [(a.product_name, a.stock) for a in alerts] == [
            ("Oud Noir", 3),
            ("Amber Musk", 8),
        ]

    def test_custom_thresholds(self):
        handler = ShowInventoryHandler(
            _with_catalog(), low_stock_threshold=2, critical_stock_threshold=1
        )
        assert handler.low_stock() == []
