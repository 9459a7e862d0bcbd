"""End-to-end tests of the command-line interface against JSON files."""

import json

import pytest
from click.testing import CliRunner

from storefront.infrastructure.cli.main import cli
from storefront.infrastructure.config import get_settings


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield CliRunner()
    get_settings.cache_clear()


def _invoke(runner, *args):
    return runner.invoke(cli, list(args))


@pytest.fixture
def stocked(runner):
    result = _invoke(
        runner, "product", "add", "--name", "Oud Noir",
        "--variant", "50ml:4500:5", "--variant", "100ml:8000:2",
    )
    assert result.exit_code == 0, result.output
    return runner


def _place(runner, items: str) -> None:
    result = _invoke(
        runner, "order", "place", "--name", "Ayesha Khan",
        "--email", "ayesha@example.com", "--items", items, "--city", "Lahore",
    )
    assert result.exit_code == 0, result.output


def test_product_add_and_list(stocked):
    result = _invoke(stocked, "product", "list")
    assert result.exit_code == 0
    assert "Oud Noir" in result.output
    assert "PKR 8000.00" in result.output


def test_place_confirm_and_cancel(stocked, tmp_path):
    _place(stocked, "Oud Noir:50ml:3")

    result = _invoke(stocked, "order", "status", "--id", "1", "--to", "confirmed")
    assert result.exit_code == 0, result.output
    assert "is now confirmed" in result.output

    products = json.loads((tmp_path / "products.json").read_text())
    assert products[0]["stock"]["50ml"] == 2
    assert products[0]["sold"]["50ml"] == 3

    result = _invoke(
        stocked, "order", "status", "--id", "1", "--to", "cancelled", "--notes", "returned",
    )
    assert result.exit_code == 0, result.output
    products = json.loads((tmp_path / "products.json").read_text())
    assert products[0]["stock"]["50ml"] == 5
    assert products[0]["sold"]["50ml"] == 0

    result = _invoke(stocked, "order", "show", "--id", "1")
    assert "status=cancelled" in result.output
    assert "returned" in result.output


def test_place_by_product_id(stocked):
    _place(stocked, "#1:100ml:1")
    result = _invoke(stocked, "order", "show", "--id", "1")
    assert "Oud Noir" in result.output
    assert "PKR 8000.00" in result.output


def test_insufficient_stock_lists_shortfalls(stocked):
    _place(stocked, "Oud Noir:100ml:3")

    result = _invoke(stocked, "order", "status", "--id", "1", "--to", "confirmed")

    assert result.exit_code == 1
    assert "Oud Noir (100ml): requested 3, available 2" in result.output


def test_illegal_transition_reported(stocked):
    _place(stocked, "Oud Noir:50ml:1")
    result = _invoke(stocked, "order", "status", "--id", "1", "--to", "delivered")
    assert result.exit_code == 1
    assert "from pending to delivered" in result.output


def test_track_list_and_stats(stocked, tmp_path):
    _place(stocked, "Oud Noir:50ml:1")
    number = json.loads((tmp_path / "orders.json").read_text())[0]["orderNumber"]

    result = _invoke(stocked, "order", "track", "--number", number)
    assert result.exit_code == 0
    assert number in result.output

    result = _invoke(stocked, "order", "list", "--status", "pending")
    assert number in result.output

    result = _invoke(stocked, "order", "stats")
    assert "Total orders: 1" in result.output
    assert "PKR 4500.00" in result.output


def test_bad_item_format(stocked):
    result = _invoke(
        stocked, "order", "place", "--name", "A", "--email", "a@example.com",
        "--items", "Oud Noir:3",
    )
    assert result.exit_code == 2
    assert "ProductName:Variant:Quantity" in result.output


def test_inventory_show_low_and_restock(stocked):
    result = _invoke(stocked, "inventory", "low")
    assert "Oud Noir (100ml): 2 units left" in result.output

    result = _invoke(stocked, "inventory", "restock", "--id", "1", "--variant", "100ml", "--quantity", "30")
    assert result.exit_code == 0
    assert "stock is now 32" in result.output

    result = _invoke(stocked, "inventory", "show")
    assert "In Stock" in result.output
    assert "Stock: 37" in result.output
