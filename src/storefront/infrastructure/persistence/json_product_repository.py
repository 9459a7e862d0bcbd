"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    ProductNotFoundError,
    ValidationError,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_store import JsonCollection


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path, lock_timeout: float = 10.0) -> None:
        self._collection = JsonCollection(file_path, lock_timeout=lock_timeout)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._collection.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Product | None:
        for raw in self._collection.load():
            if raw["name"].lower() == name.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._collection.load()]

    def add(self, product: Product) -> None:
        with self._collection.locked():
            records = self._collection.load()
            if any(raw["id"] == product.id for raw in records):
                raise ValidationError(f"Product ID '{product.id}' already exists")
            product.version = 1
            records.append(self._to_raw(product))
            self._collection.persist(records)

    def save(self, product: Product) -> None:
        with self._collection.locked():
            records = self._collection.load()
            for i, raw in enumerate(records):
                if raw["id"] != product.id:
                    continue
                stored_version = raw.get("version", 0)
                if stored_version != product.version:
                    raise ConcurrentUpdateError(
                        f"Product '{product.id}' changed since it was read "
                        f"(version {product.version}, stored {stored_version})"
                    )
                product.version = stored_version + 1
                records[i] = self._to_raw(product)
                self._collection.persist(records)
                return
        raise ProductNotFoundError(f"Product '{product.id}' not found")

    def delete(self, product_id: str) -> None:
        with self._collection.locked():
            records = self._collection.load()
            remaining = [raw for raw in records if raw["id"] != product_id]
            if len(remaining) == len(records):
                raise ProductNotFoundError(f"Product '{product_id}' not found")
            self._collection.persist(remaining)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "variants": list(product.variants),
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "stock": dict(product.stock),
            "sold": dict(product.sold),
            "variantPricing": {
                variant: str(price.amount)
                for variant, price in product.variant_pricing.items()
            },
            "discountPercentage": str(product.discount_percentage),
            "version": product.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", DEFAULT_CURRENCY)
        return Product(
            id=raw["id"],
            name=raw["name"],
            variants=list(raw["variants"]),
            price=Money(Decimal(raw["price"]), currency),
            stock=dict(raw.get("stock", {})),
            sold=dict(raw.get("sold", {})),
            variant_pricing={
                variant: Money(Decimal(price), currency)
                for variant, price in raw.get("variantPricing", {}).items()
            },
            discount_percentage=Decimal(raw.get("discountPercentage", "0")),
            version=raw.get("version", 0),
        )
