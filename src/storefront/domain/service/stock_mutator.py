"""Domain service: Stock Mutator.

Applies signed per-variant deltas to the stock ledger of one or many
products. A positive delta moves units from ``stock`` to ``sold`` (order
confirmed); a negative delta moves them back (order cancelled).

Each product is written with a compare-and-swap save, so two writers
touching the same product cannot silently overwrite each other. The
batch as a whole is kept consistent with a compensation log: if a later
product fails, products already written are reversed before the error
propagates.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    InsufficientStockError,
    ProductNotFoundError,
    StockShortfall,
)
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)

StockDeltas = dict[str, dict[str, int]]


class StockMutator:

    def __init__(self, product_repo: ProductRepository, max_attempts: int = 3) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._product_repo = product_repo
        self._max_attempts = max_attempts

    def apply(self, deltas: StockDeltas, require_available: bool = False) -> list[Product]:
        """Apply *deltas* to every referenced product.

        Phase 1 loads every product so a missing one fails the call before
        anything is written. Phase 2 writes product by product; a failure
        there reverses the products already written.

        With ``require_available`` a positive delta larger than the stock
        read at write time raises InsufficientStockError instead of being
        clamped to zero.
        """
        # Phase 1: load everything up front
        loaded: dict[str, Product] = {}
        for product_id in deltas:
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(f"Product '{product_id}' not found")
            loaded[product_id] = product

        # Phase 2: write, remembering what to undo
        applied: list[tuple[str, dict[str, int]]] = []
        updated: list[Product] = []
        try:
            for product_id, variant_deltas in deltas.items():
                product = self._write(loaded[product_id], variant_deltas, require_available)
                applied.append((product_id, variant_deltas))
                updated.append(product)
        except Exception:
            self._compensate(applied)
            raise
        return updated

    # --- Internal helpers -----------------------------------------------------

    def _write(
        self,
        product: Product,
        variant_deltas: dict[str, int],
        require_available: bool,
    ) -> Product:
        for attempt in range(1, self._max_attempts + 1):
            if require_available:
                self._assert_available(product, variant_deltas)
            for variant, delta in variant_deltas.items():
                product.apply_stock_delta(variant, delta)
            try:
                self._product_repo.save(product)
            except ConcurrentUpdateError:
                logger.warning(
                    "Stock write conflict on product %s (attempt %d/%d)",
                    product.id, attempt, self._max_attempts,
                )
                fresh = self._product_repo.get_by_id(product.id)
                if fresh is None:
                    raise ProductNotFoundError(f"Product '{product.id}' not found")
                product = fresh
                continue
            logger.info(
                "Stock updated for %s: %s",
                product.id,
                ", ".join(
                    f"{v} stock={product.stock_for(v)} sold={product.sold_for(v)}"
                    for v in variant_deltas
                ),
            )
            return product

        raise ConcurrentUpdateError(
            f"Gave up updating stock for product '{product.id}' after "
            f"{self._max_attempts} conflicting writes"
        )

    @staticmethod
    def _assert_available(product: Product, variant_deltas: dict[str, int]) -> None:
        shortfalls = [
            StockShortfall(
                product_name=product.name,
                variant=variant,
                requested=delta,
                available=product.stock_for(variant),
            )
            for variant, delta in variant_deltas.items()
            if delta > product.stock_for(variant)
        ]
        if shortfalls:
            raise InsufficientStockError(shortfalls)

    def _compensate(self, applied: list[tuple[str, dict[str, int]]]) -> None:
        for product_id, variant_deltas in reversed(applied):
            reverse = {variant: -delta for variant, delta in variant_deltas.items()}
            try:
                product = self._product_repo.get_by_id(product_id)
                if product is None:
                    raise ProductNotFoundError(f"Product '{product_id}' not found")
                self._write(product, reverse, require_available=False)
            except Exception:
                logger.exception(
                    "Could not reverse stock update for product %s; "
                    "manual reconciliation needed: %s",
                    product_id, variant_deltas,
                )
            else:
                logger.warning("Reversed stock update for product %s", product_id)
