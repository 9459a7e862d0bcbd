"""Application service: List Orders use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository, default_limit: int = 50) -> None:
        self._order_repo = order_repo
        self._default_limit = default_limit

    def handle(
        self,
        status: OrderStatus | str | None = None,
        limit: int | None = None,
    ) -> list[OrderDTO]:
        limit = self._default_limit if limit is None else limit
        if limit <= 0:
            raise ValidationError("Limit must be positive")
        status_filter = OrderStatus(status) if status is not None else None
        return [order_to_dto(o) for o in self._order_repo.list(status_filter, limit)]

    def for_customer(self, email: str) -> list[OrderDTO]:
        return [
            order_to_dto(o)
            for o in self._order_repo.list_by_customer_email(email.strip())
        ]
