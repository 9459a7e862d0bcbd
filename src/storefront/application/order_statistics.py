"""Application service: Order Statistics use case (query).

Counts orders per status and sums revenue over every order that was not
cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.order_repository import OrderRepository

STATISTICS_SAMPLE_SIZE = 1000


@dataclass(frozen=True)
class OrderStatisticsDTO:
    total: int
    by_status: dict[str, int]
    revenue: str


class OrderStatisticsHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self) -> OrderStatisticsDTO:
        orders = self._order_repo.list(limit=STATISTICS_SAMPLE_SIZE)

        by_status = {status.value: 0 for status in OrderStatus}
        revenue = Money.zero()
        for order in orders:
            by_status[order.status.value] += 1
            if order.status != OrderStatus.CANCELLED:
                revenue = revenue + order.total_amount

        return OrderStatisticsDTO(
            total=len(orders),
            by_status=by_status,
            revenue=str(revenue),
        )
