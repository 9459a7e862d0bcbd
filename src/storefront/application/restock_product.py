"""Application service: Restock Product use case.

Adds received units to a variant's stock. The sold counter is left
alone; only order confirmation and cancellation move it.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class RestockProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, variant: str, quantity: int) -> int:
        """Add *quantity* units and return the new stock level."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product with ID '{product_id}' not found")

        product.restock(variant, quantity)
        self._product_repo.save(product)
        logger.info(
            "Restocked %s %s by %d (now %d)",
            product.name, variant, quantity, product.stock_for(variant),
        )
        return product.stock_for(variant)
