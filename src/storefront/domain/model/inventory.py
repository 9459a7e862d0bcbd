"""Read model over the product stock ledger.

Classifies every product variant by how close it is to running out and
aggregates catalogue-wide totals for the inventory dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from storefront.domain.model.product import Product


class StockStatus(Enum):
    OUT_OF_STOCK = "Out of Stock"
    CRITICAL = "Critical"
    LOW = "Low Stock"
    IN_STOCK = "In Stock"


def classify_stock(stock: int, low_threshold: int, critical_threshold: int) -> StockStatus:
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock <= critical_threshold:
        return StockStatus.CRITICAL
    if stock <= low_threshold:
        return StockStatus.LOW
    return StockStatus.IN_STOCK


@dataclass(frozen=True)
class VariantStockLevel:
    product_id: str
    product_name: str
    variant: str
    stock: int
    sold: int
    price: Decimal
    status: StockStatus


@dataclass(frozen=True)
class InventorySummary:
    total_variants: int
    total_stock: int
    total_sold: int
    stock_value: Decimal
    sales_value: Decimal
    out_of_stock_count: int
    low_stock_count: int


def stock_levels(
    products: list[Product], low_threshold: int, critical_threshold: int
) -> list[VariantStockLevel]:
    levels: list[VariantStockLevel] = []
    for product in products:
        for variant in product.variants:
            stock = product.stock_for(variant)
            levels.append(
                VariantStockLevel(
                    product_id=product.id,
                    product_name=product.name,
                    variant=variant,
                    stock=stock,
                    sold=product.sold_for(variant),
                    price=product.price_for(variant).amount,
                    status=classify_stock(stock, low_threshold, critical_threshold),
                )
            )
    return levels


def summarize(levels: list[VariantStockLevel]) -> InventorySummary:
    # Critical variants count as low stock on the dashboard.
    return InventorySummary(
        total_variants=len(levels),
        total_stock=sum(lv.stock for lv in levels),
        total_sold=sum(lv.sold for lv in levels),
        stock_value=sum((lv.price * lv.stock for lv in levels), Decimal("0")),
        sales_value=sum((lv.price * lv.sold for lv in levels), Decimal("0")),
        out_of_stock_count=sum(
            1 for lv in levels if lv.status is StockStatus.OUT_OF_STOCK
        ),
        low_stock_count=sum(
            1
            for lv in levels
            if lv.status in (StockStatus.CRITICAL, StockStatus.LOW)
        ),
    )
