"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)

    def by_order_number(self, order_number: str) -> OrderDTO:
        """Look an order up the way a customer tracks it."""
        order = self._order_repo.get_by_order_number(order_number.strip())
        if order is None:
            raise OrderNotFoundError(f"Order {order_number} not found")
        return order_to_dto(order)
