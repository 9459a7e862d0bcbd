"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.service.order_numbers import OrderNumberAllocator
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def product_repository() -> JsonProductRepository:
    settings = get_settings()
    return JsonProductRepository(
        settings.data_dir / "products.json", lock_timeout=settings.store_lock_timeout
    )


def order_repository() -> JsonOrderRepository:
    settings = get_settings()
    return JsonOrderRepository(
        settings.data_dir / "orders.json", lock_timeout=settings.store_lock_timeout
    )


def order_number_allocator(order_repo: JsonOrderRepository) -> OrderNumberAllocator:
    settings = get_settings()
    return OrderNumberAllocator(
        order_repo,
        prefix=settings.order_number_prefix,
        max_attempts=settings.order_number_attempts,
    )


def update_order_status_handler() -> UpdateOrderStatusHandler:
    settings = get_settings()
    return UpdateOrderStatusHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        strict_transitions=settings.strict_status_transitions,
        stock_update_attempts=settings.stock_update_attempts,
    )
