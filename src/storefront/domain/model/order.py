"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items and its status
history. Lifecycle rules (which status may follow which) live here; the
stock side effects of a transition are coordinated by the application
handler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import InvalidStatusTransitionError, ValidationError
from storefront.domain.model.value_objects import Money, Quantity


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset(
        {
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    email: str
    phone: str = ""


@dataclass(frozen=True)
class ShippingAddress:
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


@dataclass(frozen=True)
class OrderLineItem:
    """A purchased variant with the price captured at checkout."""

    product_id: str
    product_name: str
    variant: str
    quantity: Quantity
    unit_price: Money  # locked at checkout

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StatusChange:
    status: OrderStatus
    timestamp: datetime
    notes: str = ""


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules. The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: str | None
    order_number: str
    customer_info: CustomerInfo
    items: list[OrderLineItem]
    total_amount: Money
    shipping_address: ShippingAddress | None = None
    status: OrderStatus = OrderStatus.PENDING
    status_history: list[StatusChange] = field(default_factory=list)
    stock_updated_at: datetime | None = None
    admin_notes: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer_info: CustomerInfo,
        items: list[OrderLineItem],
        shipping_address: ShippingAddress | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if not customer_info.name or not customer_info.name.strip():
            raise ValidationError("Customer name is required")
        if not customer_info.email or "@" not in customer_info.email:
            raise ValidationError("A valid customer email is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        now = now or utcnow()
        total = Money.zero(items[0].unit_price.currency)
        for item in items:
            total = total + item.line_total

        return Order(
            id=None,
            order_number=order_number,
            customer_info=customer_info,
            items=list(items),
            total_amount=total,
            shipping_address=shipping_address,
            status_history=[StatusChange(OrderStatus.PENDING, now)],
            created_at=now,
            updated_at=now,
        )

    # --- Stock guard ----------------------------------------------------------

    @property
    def holds_stock(self) -> bool:
        """True while stock is decremented for this order and not yet restored.

        This is the only guard against counting the same order twice, so
        stock must never be touched without consulting it.
        """
        return self.stock_updated_at is not None

    def mark_stock_committed(self, now: datetime) -> None:
        if self.holds_stock:
            raise ValidationError(
                f"Order {self.order_number} already holds stock"
            )
        self.stock_updated_at = now

    def mark_stock_released(self) -> None:
        if not self.holds_stock:
            raise ValidationError(
                f"Order {self.order_number} holds no stock to release"
            )
        self.stock_updated_at = None

    # --- State transitions ----------------------------------------------------

    def check_transition(self, new_status: OrderStatus, strict: bool = True) -> None:
        """Raise if moving to *new_status* is not allowed.

        With ``strict=False`` any change of status is accepted, which is
        how the back office behaved before the lifecycle was enforced.
        """
        if new_status == self.status:
            raise InvalidStatusTransitionError(
                f"Order {self.order_number} is already {self.status.value}"
            )
        if strict and new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransitionError(
                f"Cannot move order {self.order_number} from "
                f"{self.status.value} to {new_status.value}"
            )

    def transition_to(
        self,
        new_status: OrderStatus,
        now: datetime,
        notes: str = "",
        strict: bool = True,
    ) -> None:
        self.check_transition(new_status, strict=strict)
        self.status = new_status
        self.status_history.append(StatusChange(new_status, now, notes))
        if notes:
            self.admin_notes = notes
        self.updated_at = now

    # --- Computed properties --------------------------------------------------

    def stock_deltas(self, sign: int = 1) -> dict[str, dict[str, int]]:
        """Per-product, per-variant quantities of this order, times *sign*."""
        deltas: dict[str, dict[str, int]] = {}
        for item in self.items:
            per_variant = deltas.setdefault(item.product_id, {})
            per_variant[item.variant] = (
                per_variant.get(item.variant, 0) + sign * item.quantity.value
            )
        return deltas

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
