"""Application service: Place Order (checkout) use case.

Resolves cart lines against the catalog, snapshots the price each line
is sold at, allocates an order number and stores a pending order. Stock
is not touched until an administrator confirms the order.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from storefront.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from storefront.domain.exceptions import ProductNotFoundError, ValidationError
from storefront.domain.model.order import (
    CustomerInfo,
    Order,
    OrderLineItem,
    ShippingAddress,
    utcnow,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.order_numbers import OrderNumberAllocator

logger = logging.getLogger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        order_numbers: OrderNumberAllocator | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._order_numbers = order_numbers or OrderNumberAllocator(order_repo)
        self._clock = clock

    def handle(
        self,
        customer_info: CustomerInfo,
        item_specs: list[OrderItemSpec],
        shipping_address: ShippingAddress | None = None,
    ) -> OrderDTO:
        """Create a new pending order.

        Steps:
        1. Resolve each line to a Product by ID or name (fail if not found).
        2. Check the variant exists and snapshot its current sale price.
        3. Let the Order aggregate validate all business rules.
        4. Allocate an unused order number, persist and return a DTO.
        """
        line_items: list[OrderLineItem] = []

        for spec in item_specs:
            product = self._resolve(spec)
            if not product.has_variant(spec.variant):
                raise ValidationError(
                    f"{product.name} is not sold in '{spec.variant}' "
                    f"(choose from {', '.join(product.variants)})"
                )

            line_items.append(
                OrderLineItem(
                    product_id=product.id,
                    product_name=product.name,
                    variant=spec.variant,
                    quantity=Quantity(spec.quantity),
                    unit_price=product.sale_price_for(spec.variant),
                )
            )

        now = self._clock()
        order = Order.create(
            order_number=self._order_numbers.allocate(now),
            customer_info=customer_info,
            items=line_items,
            shipping_address=shipping_address,
            now=now,
        )
        self._order_repo.add(order)
        logger.info(
            "Order %s placed by %s (%d items, %s)",
            order.order_number, customer_info.email, order.item_count, order.total_amount,
        )

        return order_to_dto(order)

    def _resolve(self, spec: OrderItemSpec) -> Product:
        if spec.product_id:
            product = self._product_repo.get_by_id(spec.product_id)
            label = f"#{spec.product_id}"
        else:
            product = self._product_repo.get_by_name(spec.product_name)
            label = spec.product_name
        if product is None:
            raise ProductNotFoundError(f"Product not found: '{label}'")
        return product
