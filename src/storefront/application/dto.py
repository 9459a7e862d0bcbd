"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one cart line.

    The product is looked up by ``product_id`` when one is given,
    otherwise by name.
    """

    product_name: str
    variant: str
    quantity: int
    product_id: str | None = None


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_name: str
    variant: str
    quantity: int
    unit_price: str  # formatted, e.g. "PKR 4500.00"
    line_total: str


@dataclass(frozen=True)
class StatusChangeDTO:
    status: str
    timestamp: str
    notes: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    order_number: str
    customer_name: str
    customer_email: str
    status: str
    items: list[OrderLineItemDTO]
    total: str
    created_at: str
    holds_stock: bool
    admin_notes: str
    history: list[StatusChangeDTO]


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer_name=order.customer_info.name,
        customer_email=order.customer_info.email,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                product_name=item.product_name,
                variant=item.variant,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
        holds_stock=order.holds_stock,
        admin_notes=order.admin_notes,
        history=[
            StatusChangeDTO(
                status=change.status.value,
                timestamp=change.timestamp.strftime(_TIMESTAMP_FORMAT),
                notes=change.notes,
            )
            for change in order.status_history
        ],
    )
