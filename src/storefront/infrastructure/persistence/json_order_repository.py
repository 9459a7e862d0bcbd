"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import ConcurrentUpdateError, OrderNotFoundError
from storefront.domain.model.order import (
    CustomerInfo,
    Order,
    OrderLineItem,
    OrderStatus,
    ShippingAddress,
    StatusChange,
)
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_store import JsonCollection


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path, lock_timeout: float = 10.0) -> None:
        self._collection = JsonCollection(file_path, lock_timeout=lock_timeout)

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> str:
        with self._collection.locked():
            records = self._collection.load()
            order.id = str(max((int(raw["id"]) for raw in records), default=0) + 1)
            order.version = 1
            records.append(self._to_raw(order))
            self._collection.persist(records)
        return order.id

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._collection.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._collection.load():
            if raw["orderNumber"] == order_number:
                return self._to_domain(raw)
        return None

    def save(self, order: Order) -> None:
        with self._collection.locked():
            records = self._collection.load()
            for i, raw in enumerate(records):
                if raw["id"] != order.id:
                    continue
                stored_version = raw.get("version", 0)
                if stored_version != order.version:
                    raise ConcurrentUpdateError(
                        f"Order {order.order_number} changed since it was read "
                        f"(version {order.version}, stored {stored_version})"
                    )
                order.version = stored_version + 1
                records[i] = self._to_raw(order)
                self._collection.persist(records)
                return
        raise OrderNotFoundError(f"Order #{order.id} not found")

    def list(self, status: OrderStatus | None = None, limit: int = 50) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._collection.load()]
        if status is not None:
            orders = [o for o in orders if o.status == status]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]

    def list_by_customer_email(self, email: str) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._collection.load()
            if raw["customerInfo"]["email"].lower() == email.lower()
        ]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.shipping_address
        return {
            "id": order.id,
            "orderNumber": order.order_number,
            "status": order.status.value,
            "customerInfo": {
                "name": order.customer_info.name,
                "email": order.customer_info.email,
                "phone": order.customer_info.phone,
            },
            "shippingAddress": None if address is None else {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zipCode": address.zip_code,
                "country": address.country,
            },
            "items": [
                {
                    "productId": item.product_id,
                    "productName": item.product_name,
                    "variant": item.variant,
                    "quantity": item.quantity.value,
                    "unitPrice": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                }
                for item in order.items
            ],
            "totalAmount": str(order.total_amount.amount),
            "currency": order.total_amount.currency,
            "statusHistory": [
                {
                    "status": change.status.value,
                    "timestamp": change.timestamp.isoformat(),
                    "notes": change.notes,
                }
                for change in order.status_history
            ],
            "stockUpdatedAt": (
                order.stock_updated_at.isoformat() if order.stock_updated_at else None
            ),
            "adminNotes": order.admin_notes,
            "createdAt": order.created_at.isoformat(),
            "updatedAt": order.updated_at.isoformat(),
            "version": order.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=i["productId"],
                product_name=i["productName"],
                variant=i["variant"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unitPrice"]), i.get("currency", DEFAULT_CURRENCY)),
            )
            for i in raw["items"]
        ]
        address = raw.get("shippingAddress")
        stock_updated_at = raw.get("stockUpdatedAt")
        return Order(
            id=raw["id"],
            order_number=raw["orderNumber"],
            customer_info=CustomerInfo(**raw["customerInfo"]),
            items=items,
            total_amount=Money(
                Decimal(raw["totalAmount"]), raw.get("currency", DEFAULT_CURRENCY)
            ),
            shipping_address=None if address is None else ShippingAddress(
                street=address.get("street", ""),
                city=address.get("city", ""),
                state=address.get("state", ""),
                zip_code=address.get("zipCode", ""),
                country=address.get("country", ""),
            ),
            status=OrderStatus(raw["status"]),
            status_history=[
                StatusChange(
                    status=OrderStatus(h["status"]),
                    timestamp=datetime.fromisoformat(h["timestamp"]),
                    notes=h.get("notes", ""),
                )
                for h in raw.get("statusHistory", [])
            ],
            stock_updated_at=(
                datetime.fromisoformat(stock_updated_at) if stock_updated_at else None
            ),
            admin_notes=raw.get("adminNotes", ""),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
            version=raw.get("version", 0),
        )
