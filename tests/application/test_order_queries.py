"""Integration tests for the order query use cases."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.application.dto import OrderItemSpec
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.order_statistics import OrderStatisticsHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import OrderNotFoundError, ValidationError
from storefront.domain.model.order import CustomerInfo
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.service.order_numbers import OrderNumberAllocator
from tests.fakes import FakeOrderRepository, FakeProductRepository

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class _TickingClock:
    """Advances one minute per call so orders have distinct timestamps."""

    def __init__(self) -> None:
        self._now = START

    def __call__(self) -> datetime:
        self._now += timedelta(minutes=1)
        return self._now


@pytest.fixture
def shop():
    product_repo = FakeProductRepository(
        [
            Product(
                id="1",
                name="Oud Noir",
                variants=["50ml"],
                price=Money.of("4500"),
                stock={"50ml": 50},
            )
        ]
    )
    order_repo = FakeOrderRepository()
    clock = _TickingClock()
    place = PlaceOrderHandler(order_repo, product_repo, clock=clock)
    update = UpdateOrderStatusHandler(order_repo, product_repo, clock=clock)

    def place_for(email: str, qty: int = 1) -> str:
        customer = CustomerInfo(name=email.split("@")[0], email=email)
        return place.handle(customer, [OrderItemSpec("Oud Noir", "50ml", qty)]).id

    return order_repo, update, place_for


class TestShowOrder:

    def test_show_by_id_includes_history(self, shop):
        order_repo, update, place_for = shop
        order_id = place_for("sana@example.com")
        update.handle(order_id, "confirmed", notes="verified by phone")

        dto = ShowOrderHandler(order_repo).handle(order_id)

        assert dto.status == "confirmed"
        assert dto.holds_stock
        assert [h.status for h in dto.history] == ["pending", "confirmed"]
        assert dto.history[1].notes == "verified by phone"

    def test_track_by_order_number(self, shop):
        order_repo, _, place_for = shop
        order_id = place_for("sana@example.com")
        number = order_repo.get_by_id(order_id).order_number

        dto = ShowOrderHandler(order_repo).by_order_number(f" {number} ")

        assert dto.id == order_id

    def test_track_with_lowercase_prefix(self):
        product_repo = FakeProductRepository(
            [Product(id="1", name="Oud Noir", variants=["50ml"], price=Money.of("4500"))]
        )
        order_repo = FakeOrderRepository()
        place = PlaceOrderHandler(
            order_repo, product_repo, order_numbers=OrderNumberAllocator(order_repo, prefix="zs")
        )
        number = place.handle(
            CustomerInfo(name="Sana", email="sana@example.com"),
            [OrderItemSpec("Oud Noir", "50ml", 1)],
        ).order_number

        assert number.startswith("zs")
        assert ShowOrderHandler(order_repo).by_order_number(number).order_number == number

    def test_unknown_order_rejected(self, shop):
        order_repo, _, _ = shop
        with pytest.raises(OrderNotFoundError):
            ShowOrderHandler(order_repo).handle("99")
        with pytest.raises(OrderNotFoundError, match="ZE000 not found"):
            ShowOrderHandler(order_repo).by_order_number("ZE000")


class TestListOrders:

    def test_newest_first_with_limit(self, shop):
        order_repo, _, place_for = shop
        ids = [place_for("a@example.com") for _ in range(4)]

        listed = ListOrdersHandler(order_repo).handle(limit=3)

        assert [dto.id for dto in listed] == list(reversed(ids))[:3]

    def test_default_limit(self, shop):
        order_repo, _, place_for = shop
        for _ in range(3):
            place_for("a@example.com")
        assert len(ListOrdersHandler(order_repo, default_limit=2).handle()) == 2

    def test_status_filter(self, shop):
        order_repo, update, place_for = shop
        first = place_for("a@example.com")
        place_for("b@example.com")
        update.handle(first, "confirmed")

        listed = ListOrdersHandler(order_repo).handle(status="confirmed")

        assert [dto.id for dto in listed] == [first]

    def test_non_positive_limit_rejected(self, shop):
        order_repo, _, _ = shop
        with pytest.raises(ValidationError, match="Limit must be positive"):
            ListOrdersHandler(order_repo).handle(limit=0)

    def test_for_customer_ignores_case(self, shop):
        order_repo, _, place_for = shop
        mine = place_for("Hira@Example.com")
        place_for("other@example.com")

        listed = ListOrdersHandler(order_repo).for_customer("hira@example.com")

        assert [dto.id for dto in listed] == [mine]


class TestOrderStatistics:

    def test_counts_and_revenue_exclude_cancelled(self, shop):
        order_repo, update, place_for = shop
        kept = place_for("a@example.com", qty=2)
        dropped = place_for("b@example.com", qty=1)
        place_for("c@example.com", qty=1)
        update.handle(kept, "confirmed")
        update.handle(dropped, "cancelled")

        stats = OrderStatisticsHandler(order_repo).handle()

        assert stats.total == 3
        assert stats.by_status["pending"] == 1
        assert stats.by_status["confirmed"] == 1
        assert stats.by_status["cancelled"] == 1
        assert stats.by_status["delivered"] == 0
        assert stats.revenue == "PKR 13500.00"

    def test_empty_store(self):
        stats = OrderStatisticsHandler(FakeOrderRepository()).handle()
        assert stats.total == 0
        assert stats.revenue == "PKR 0.00"
