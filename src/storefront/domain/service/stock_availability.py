"""Domain service: Stock Availability.

Compares requested quantities against the stock currently recorded on
each product. Read-only: a positive answer only describes stock at the
moment it was read.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import (
    ProductNotFoundError,
    StockShortfall,
    ValidationError,
)
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class StockRequest:
    product_id: str
    variant: str
    quantity: int


@dataclass(frozen=True)
class LineAvailability:
    product_id: str
    product_name: str
    variant: str
    requested: int
    available: int

    @property
    def sufficient(self) -> bool:
        return self.available >= self.requested

    def to_shortfall(self) -> StockShortfall:
        return StockShortfall(
            product_name=self.product_name,
            variant=self.variant,
            requested=self.requested,
            available=self.available,
        )


@dataclass(frozen=True)
class StockAvailabilityReport:
    lines: list[LineAvailability]

    @property
    def insufficient_lines(self) -> list[LineAvailability]:
        return [line for line in self.lines if not line.sufficient]

    @property
    def all_sufficient(self) -> bool:
        return not self.insufficient_lines

    @property
    def shortfalls(self) -> list[StockShortfall]:
        return [line.to_shortfall() for line in self.insufficient_lines]


class StockAvailabilityChecker:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def check(self, requests: list[StockRequest]) -> StockAvailabilityReport:
        """Report, line by line, whether stock covers each request.

        Several lines for the same variant are measured against their
        combined demand. A variant missing from the stock map counts as
        zero available.
        """
        products: dict[str, Product] = {}
        demand: dict[tuple[str, str], int] = {}

        for req in requests:
            if req.quantity <= 0:
                raise ValidationError(
                    f"Requested quantity must be positive, got {req.quantity}"
                )
            if req.product_id not in products:
                product = self._product_repo.get_by_id(req.product_id)
                if product is None:
                    raise ProductNotFoundError(
                        f"Product '{req.product_id}' not found"
                    )
                products[req.product_id] = product
            key = (req.product_id, req.variant)
            demand[key] = demand.get(key, 0) + req.quantity

        lines: list[LineAvailability] = []
        for req in requests:
            product = products[req.product_id]
            lines.append(
                LineAvailability(
                    product_id=req.product_id,
                    product_name=product.name,
                    variant=req.variant,
                    requested=demand[(req.product_id, req.variant)],
                    available=product.stock_for(req.variant),
                )
            )
        return StockAvailabilityReport(lines=lines)
