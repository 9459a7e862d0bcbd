"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.inventory import (
    InventorySummary,
    StockStatus,
    VariantStockLevel,
    stock_levels,
    summarize,
)
from storefront.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class InventoryReportDTO:
    lines: list[VariantStockLevel]
    summary: InventorySummary


class ShowInventoryHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        low_stock_threshold: int = 10,
        critical_stock_threshold: int = 5,
    ) -> None:
        self._product_repo = product_repo
        self._low = low_stock_threshold
        self._critical = critical_stock_threshold

    def handle(self) -> InventoryReportDTO:
        levels = self._levels()
        return InventoryReportDTO(lines=levels, summary=summarize(levels))

    def low_stock(self) -> list[VariantStockLevel]:
        """Variants still in stock but at or below the low-stock threshold."""
        alerts = [
            lv
            for lv in self._levels()
            if lv.status in (StockStatus.CRITICAL, StockStatus.LOW)
        ]
        return sorted(alerts, key=lambda lv: lv.stock)

    def _levels(self) -> list[VariantStockLevel]:
        return stock_levels(self._product_repo.list_all(), self._low, self._critical)
