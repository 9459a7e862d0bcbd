"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Persist a new product."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Write *product* back if nobody else has written it since it was read.

        Compares ``product.version`` with the stored version and raises
        ConcurrentUpdateError on mismatch. On success the stored and the
        in-memory version are both incremented.
        """

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product from the catalog."""
