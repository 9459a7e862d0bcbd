"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from dataclasses import dataclass


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidStatusTransitionError(ValidationError):
    """An order was asked to move along an edge the lifecycle does not allow."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderNotFoundError(EntityNotFoundError):
    pass


class ProductNotFoundError(EntityNotFoundError):
    pass


@dataclass(frozen=True)
class StockShortfall:
    """One order line that cannot be covered by current stock."""

    product_name: str
    variant: str
    requested: int
    available: int

    def __str__(self) -> str:
        return (
            f"{self.product_name} ({self.variant}): "
            f"requested {self.requested}, available {self.available}"
        )


class InsufficientStockError(DomainException):
    """Confirmation blocked because one or more lines lack stock.

    Carries every shortfall so the operator can decide what to do with
    each line.
    """

    def __init__(self, shortfalls: list[StockShortfall]) -> None:
        self.shortfalls = list(shortfalls)
        details = "; ".join(str(s) for s in self.shortfalls)
        super().__init__(f"Insufficient stock: {details}")


class RepositoryError(DomainException):
    """The storage layer failed to read or write a document."""


class ConcurrentUpdateError(RepositoryError):
    """A compare-and-swap write lost against a concurrent writer."""


class OrderNumberCollisionError(RepositoryError):
    """No unused order number could be generated."""
