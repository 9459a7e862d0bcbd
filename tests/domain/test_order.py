"""Unit tests for the Order aggregate and its lifecycle rules."""

from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import InvalidStatusTransitionError, ValidationError
from storefront.domain.model.order import (
    ALLOWED_TRANSITIONS,
    CustomerInfo,
    Order,
    OrderLineItem,
    OrderStatus,
)
from storefront.domain.model.value_objects import Money, Quantity

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
CUSTOMER = CustomerInfo(name="Ayesha Khan", email="ayesha@example.com")


def _make_item(
    product_id: str = "1", variant: str = "50ml", qty: int = 1, price: str = "4500"
) -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        product_id=product_id,
        product_name=f"Product {product_id}",
        variant=variant,
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _make_order(*items: OrderLineItem) -> Order:
    return Order.create("ZE12345678001", CUSTOMER, list(items) or [_make_item()], now=NOW)


class TestOrderCreation:

    def test_happy_path(self):
        order = _make_order(_make_item(qty=2))
        assert order.status == OrderStatus.PENDING
        assert order.id is None  # assigned by repository
        assert order.total_amount == Money.of("9000")
        assert order.stock_updated_at is None

    def test_initial_history_entry(self):
        order = _make_order()
        assert [h.status for h in order.status_history] == [OrderStatus.PENDING]
        assert order.status_history[0].timestamp == NOW

    def test_total_is_sum_of_line_items(self):
        order = _make_order(
            _make_item("1", qty=3, price="4500"),
            _make_item("2", qty=1, price="8000"),
        )
        assert order.total_amount == Money.of("21500")

    def test_no_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("ZE1", CUSTOMER, [])

    def test_too_many_lines_rejected(self):
        with pytest.raises(ValidationError, match="Maximum 50 items"):
            Order.create("ZE1", CUSTOMER, [_make_item() for _ in range(51)])

    def test_blank_customer_name_rejected(self):
        with pytest.raises(ValidationError, match="Customer name"):
            Order.create("ZE1", CustomerInfo(name="  ", email="a@b.pk"), [_make_item()])

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError, match="email"):
            Order.create("ZE1", CustomerInfo(name="Ali", email="nope"), [_make_item()])


class TestTransitions:

    def test_forward_transition_appends_history(self):
        order = _make_order()
        order.transition_to(OrderStatus.CONFIRMED, NOW, notes="paid by bank transfer")
        assert order.status == OrderStatus.CONFIRMED
        assert len(order.status_history) == 2
        assert order.status_history[-1].notes == "paid by bank transfer"
        assert order.admin_notes == "paid by bank transfer"

    def test_empty_notes_keep_previous_admin_notes(self):
        order = _make_order()
        order.transition_to(OrderStatus.CONFIRMED, NOW, notes="first")
        order.transition_to(OrderStatus.PROCESSING, NOW)
        assert order.admin_notes == "first"

    def test_pending_cannot_skip_confirmation(self):
        order = _make_order()
        with pytest.raises(InvalidStatusTransitionError, match="from pending to shipped"):
            order.transition_to(OrderStatus.SHIPPED, NOW)
        assert order.status == OrderStatus.PENDING
        assert len(order.status_history) == 1

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_states_have_no_exits(self, terminal):
        assert terminal.is_terminal
        assert ALLOWED_TRANSITIONS[terminal] == frozenset()

    def test_cancel_reachable_from_every_non_terminal_state(self):
        for status, targets in ALLOWED_TRANSITIONS.items():
            if not status.is_terminal:
                assert OrderStatus.CANCELLED in targets

    def test_same_status_rejected(self):
        order = _make_order()
        with pytest.raises(InvalidStatusTransitionError, match="already pending"):
            order.check_transition(OrderStatus.PENDING, strict=False)

    def test_free_form_mode_allows_any_change(self):
        order = _make_order()
        order.transition_to(OrderStatus.DELIVERED, NOW, strict=False)
        order.transition_to(OrderStatus.PENDING, NOW, strict=False)
        assert order.status == OrderStatus.PENDING


class TestStockGuard:

    def test_commit_and_release(self):
        order = _make_order()
        order.mark_stock_committed(NOW)
        assert order.holds_stock
        order.mark_stock_released()
        assert not order.holds_stock

    def test_double_commit_rejected(self):
        order = _make_order()
        order.mark_stock_committed(NOW)
        with pytest.raises(ValidationError, match="already holds stock"):
            order.mark_stock_committed(NOW)

    def test_release_without_commit_rejected(self):
        with pytest.raises(ValidationError, match="no stock to release"):
            _make_order().mark_stock_released()


class TestStockDeltas:

    def test_groups_by_product_and_variant(self):
        order = _make_order(
            _make_item("1", "50ml", 2),
            _make_item("1", "100ml", 1),
            _make_item("2", "50ml", 4),
            _make_item("1", "50ml", 3),
        )
        assert order.stock_deltas() == {
            "1": {"50ml": 5, "100ml": 1},
            "2": {"50ml": 4},
        }

    def test_negative_sign(self):
        order = _make_order(_make_item("1", "50ml", 2))
        assert order.stock_deltas(sign=-1) == {"1": {"50ml": -2}}
