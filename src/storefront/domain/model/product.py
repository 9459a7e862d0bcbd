"""Product aggregate and its per-variant stock ledger.

Products live independently of orders. Each product declares the variants
(sizes) it is sold in; every variant carries its own stock, sold counter
and price.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Use ``Product.create()`` for new products. The ``__init__`` stays
    simple so repositories can reconstitute stored documents without
    re-validating them.
    """

    id: str
    name: str
    variants: list[str]
    price: Money
    stock: dict[str, int] = field(default_factory=dict)
    sold: dict[str, int] = field(default_factory=dict)
    variant_pricing: dict[str, Money] = field(default_factory=dict)
    discount_percentage: Decimal = Decimal("0")
    version: int = 0

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        id: str,
        name: str,
        variants: list[str],
        price: Money,
        stock: dict[str, int] | None = None,
        variant_pricing: dict[str, Money] | None = None,
        discount_percentage: Decimal = Decimal("0"),
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not variants:
            raise ValidationError("Product must declare at least one variant")
        if len(set(variants)) != len(variants):
            raise ValidationError("Product variants must be unique")
        if price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        if not Decimal("0") <= discount_percentage <= Decimal("100"):
            raise ValidationError("Discount must be between 0 and 100 percent")

        stock = dict(stock or {})
        variant_pricing = dict(variant_pricing or {})
        for label, mapping in (("stock", stock), ("pricing", variant_pricing)):
            unknown = set(mapping) - set(variants)
            if unknown:
                raise ValidationError(
                    f"{label.capitalize()} given for undeclared variant(s): "
                    f"{', '.join(sorted(unknown))}"
                )
        if any(qty < 0 for qty in stock.values()):
            raise ValidationError("Stock cannot be negative")
        if any(p.amount <= 0 for p in variant_pricing.values()):
            raise ValidationError("Variant price must be greater than zero")

        return Product(
            id=id,
            name=name.strip(),
            variants=list(variants),
            price=price,
            stock={v: stock.get(v, 0) for v in variants},
            sold={v: 0 for v in variants},
            variant_pricing=variant_pricing,
            discount_percentage=discount_percentage,
        )

    # --- Ledger reads ---------------------------------------------------------

    def has_variant(self, variant: str) -> bool:
        return variant in self.variants

    def stock_for(self, variant: str) -> int:
        return self.stock.get(variant, 0)

    def sold_for(self, variant: str) -> int:
        return self.sold.get(variant, 0)

    def price_for(self, variant: str) -> Money:
        return self.variant_pricing.get(variant, self.price)

    def sale_price_for(self, variant: str) -> Money:
        """Price a customer pays for *variant* right now (discount applied)."""
        price = self.price_for(variant)
        if self.discount_percentage > 0:
            return price.discounted(self.discount_percentage)
        return price

    # --- Mutations ------------------------------------------------------------

    def apply_stock_delta(self, variant: str, delta: int) -> None:
        """Move *delta* units from stock to sold (negative moves them back).

        Both counters are floored at zero.
        """
        self.stock[variant] = max(0, self.stock_for(variant) - delta)
        self.sold[variant] = max(0, self.sold_for(variant) + delta)

    def restock(self, variant: str, quantity: int) -> None:
        if not self.has_variant(variant):
            raise ValidationError(f"{self.name} has no variant '{variant}'")
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.stock[variant] = self.stock_for(variant) + quantity

    def update_price(self, variant: str, new_price: Money) -> None:
        """Change one variant's price.

        Existing orders keep the unit price captured at checkout.
        """
        if not self.has_variant(variant):
            raise ValidationError(f"{self.name} has no variant '{variant}'")
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.variant_pricing[variant] = new_price
