"""Application service: Update Product Price use case."""

from __future__ import annotations

from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository


class UpdateProductPriceHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, variant: str, new_price: str) -> None:
        """Update one variant's price.

        This does NOT affect any existing orders; they captured a
        price snapshot at checkout.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product with ID '{product_id}' not found")

        product.update_price(variant, Money.of(new_price, product.price.currency))
        self._product_repo.save(product)
