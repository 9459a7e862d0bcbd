"""Application service: Update Order Status use case.

The single entry point for moving an order through its lifecycle.
Two edges carry stock side effects:

- **-> confirmed**: check availability, then move each line's quantity
  from stock to sold and mark the order as holding stock.
- **confirmed -> cancelled**: move the quantities back and clear the
  mark. Orders cancelled later in fulfilment keep their stock counted.

The order is written only after the stock writes succeed, so a failure
leaves it in its previous status. The order write is checked against
the version that was read; if another update got there first, the
stock written for this one is reversed and ConcurrentUpdateError is
raised.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import InsufficientStockError, OrderNotFoundError
from storefront.domain.model.order import Order, OrderStatus, utcnow
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.stock_availability import (
    StockAvailabilityChecker,
    StockRequest,
)
from storefront.domain.service.stock_mutator import StockDeltas, StockMutator

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        strict_transitions: bool = True,
        stock_update_attempts: int = 3,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._checker = StockAvailabilityChecker(product_repo)
        self._mutator = StockMutator(product_repo, max_attempts=stock_update_attempts)
        self._strict = strict_transitions
        self._clock = clock

    def handle(
        self,
        order_id: str,
        new_status: OrderStatus | str,
        notes: str | None = None,
    ) -> OrderDTO:
        status = OrderStatus(new_status)
        notes = (notes or "").strip()

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order #{order_id} not found")

        # Reject illegal edges before any stock is read or written
        order.check_transition(status, strict=self._strict)
        previous = order.status
        now = self._clock()

        applied: StockDeltas | None = None
        if status == OrderStatus.CONFIRMED:
            applied = self._commit_stock(order, now)
        elif status == OrderStatus.CANCELLED and previous == OrderStatus.CONFIRMED:
            applied = self._release_stock(order)

        order.transition_to(status, now, notes=notes, strict=self._strict)
        try:
            self._order_repo.save(order)
        except Exception:
            if applied:
                self._reverse(order, applied)
            raise
        logger.info(
            "Order %s moved %s -> %s", order.order_number, previous.value, status.value
        )
        return order_to_dto(order)

    # --- Stock side effects ---------------------------------------------------

    def _commit_stock(self, order: Order, now: datetime) -> StockDeltas | None:
        if order.holds_stock:
            # Already counted against stock; confirming again must not re-count.
            logger.info(
                "Order %s already holds stock; skipping stock update",
                order.order_number,
            )
            return None

        report = self._checker.check(
            [
                StockRequest(item.product_id, item.variant, item.quantity.value)
                for item in order.items
            ]
        )
        if not report.all_sufficient:
            logger.info(
                "Order %s cannot be confirmed: %d line(s) short",
                order.order_number, len(report.insufficient_lines),
            )
            raise InsufficientStockError(report.shortfalls)

        deltas = order.stock_deltas()
        self._mutator.apply(deltas, require_available=True)
        order.mark_stock_committed(now)
        return deltas

    def _release_stock(self, order: Order) -> StockDeltas | None:
        if not order.holds_stock:
            return None
        deltas = order.stock_deltas(sign=-1)
        self._mutator.apply(deltas)
        order.mark_stock_released()
        return deltas

    def _reverse(self, order: Order, applied: StockDeltas) -> None:
        """Undo *applied* after the order write failed; never masks that failure."""
        logger.warning(
            "Saving order %s failed; reversing its stock update", order.order_number
        )
        try:
            self._mutator.apply(_negate(applied))
        except Exception:
            logger.exception(
                "Could not reverse stock for order %s; reconcile %s by hand",
                order.order_number, applied,
            )


def _negate(deltas: StockDeltas) -> StockDeltas:
    return {
        product_id: {variant: -qty for variant, qty in per_variant.items()}
        for product_id, per_variant in deltas.items()
    }
