"""Application service: Add Product use case."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        variants: dict[str, tuple[str, int]],
        discount_percentage: str = "0",
    ) -> Product:
        """Add a new product to the catalog.

        ``variants`` maps each variant label to its (price, initial stock).
        The lowest variant price becomes the product's base price.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        existing = self._product_repo.get_by_name(name.strip())
        if existing is not None:
            raise ValidationError(f"Product '{name}' already exists")

        if not variants:
            raise ValidationError("Product must declare at least one variant")

        try:
            discount = Decimal(discount_percentage)
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid discount: {discount_percentage!r}") from exc

        pricing = {label: Money.of(price) for label, (price, _) in variants.items()}

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product.create(
            id=next_id,
            name=name,
            variants=list(variants),
            price=min(pricing.values()),
            stock={label: stock for label, (_, stock) in variants.items()},
            variant_pricing=pricing,
            discount_percentage=discount,
        )
        self._product_repo.add(product)
        logger.info("Product %s '%s' added", product.id, product.name)
        return product
