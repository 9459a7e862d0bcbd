"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> str:
        """Persist a new order, assign its ID and return it."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its customer-facing number, or None."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist changes to an existing order.

        Raises ConcurrentUpdateError if the stored order changed since
        *order* was read. On success ``order.version`` is advanced.
        """

    @abstractmethod
    def list(self, status: OrderStatus | None = None, limit: int = 50) -> list[Order]:
        """Return up to *limit* orders, newest first, optionally by status."""

    @abstractmethod
    def list_by_customer_email(self, email: str) -> list[Order]:
        """Return every order placed with *email*, newest first."""
