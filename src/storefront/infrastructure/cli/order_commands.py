"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.order_statistics import OrderStatisticsHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException, InsufficientStockError
from storefront.domain.model.order import CustomerInfo, OrderStatus, ShippingAddress
from storefront.infrastructure.bootstrap import (
    order_number_allocator,
    order_repository,
    product_repository,
    update_order_status_handler,
)
from storefront.infrastructure.config import get_settings

_STATUS_CHOICE = click.Choice([s.value for s in OrderStatus])


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'Oud Noir:50ml:2,#3:100ml:1' into OrderItemSpec list.

    A leading ``#`` names the product by ID instead of by name.
    """
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.rsplit(":", 2)
        if len(parts) != 3:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductName:Variant:Quantity'."
            )
        name, variant, qty_str = parts
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            )
        name = name.strip()
        product_id = name[1:] if name.startswith("#") else None
        specs.append(
            OrderItemSpec(
                product_name=name,
                variant=variant.strip(),
                quantity=qty,
                product_id=product_id,
            )
        )
    return specs


def _display_order(dto: OrderDTO, history: bool = False) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number} (#{dto.id})  status={dto.status}")
    click.echo(f"Customer: {dto.customer_name} <{dto.customer_email}>")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Variant':<8} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*65}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.variant:<8} {item.quantity:>5} "
            f"{item.unit_price:>14} {item.line_total:>14}"
        )
    click.echo(f"  {'-'*65}")
    click.echo(f"  {'Order Total':<35} {dto.total:>30}")

    if dto.admin_notes:
        click.echo(f"Notes: {dto.admin_notes}")
    if history:
        click.echo()
        click.echo("History:")
        for change in dto.history:
            suffix = f"  ({change.notes})" if change.notes else ""
            click.echo(f"  {change.timestamp}  {change.status}{suffix}")


@click.command("place")
@click.option("--name", required=True, help="Customer name.")
@click.option("--email", required=True, help="Customer email.")
@click.option("--phone", default="", help="Customer phone.")
@click.option(
    "--items", required=True,
    help="Items as 'Product:Variant:Qty,...'; use '#ID' to name a product by ID.",
)
@click.option("--street", default="", help="Shipping street address.")
@click.option("--city", default="", help="Shipping city.")
@click.option("--state", default="", help="Shipping state or province.")
@click.option("--zip-code", default="", help="Shipping postal code.")
@click.option("--country", default="", help="Shipping country.")
def order_place(
    name: str,
    email: str,
    phone: str,
    items: str,
    street: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
) -> None:
    """Place a new order (checkout)."""
    specs = _parse_items(items)
    address = None
    if any((street, city, state, zip_code, country)):
        address = ShippingAddress(street, city, state, zip_code, country)

    order_repo = order_repository()
    handler = PlaceOrderHandler(
        order_repo=order_repo,
        product_repo=product_repository(),
        order_numbers=order_number_allocator(order_repo),
    )

    try:
        dto = handler.handle(
            customer_info=CustomerInfo(name=name, email=email, phone=phone),
            item_specs=specs,
            shipping_address=address,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} placed (id={dto.id}, status={dto.status})")
    click.echo(f"Total: {dto.total}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto, history=True)


@click.command("track")
@click.option("--number", "order_number", required=True, help="Order number, e.g. ZE48213377042.")
def order_track(order_number: str) -> None:
    """Track an order by its customer-facing number."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.by_order_number(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto, history=True)


@click.command("list")
@click.option("--status", type=_STATUS_CHOICE, default=None, help="Only orders in this status.")
@click.option("--limit", type=int, default=None, help="Maximum number of orders.")
@click.option("--email", default=None, help="Only orders placed with this email.")
def order_list(status: str | None, limit: int | None, email: str | None) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(
        order_repo=order_repository(),
        default_limit=get_settings().default_list_limit,
    )

    try:
        orders = handler.for_customer(email) if email else handler.handle(status, limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Number':<16} {'Status':<11} {'Customer':<24} {'Total':>14}")
    click.echo("-" * 75)
    for dto in orders:
        click.echo(
            f"{dto.id:<6} {dto.order_number:<16} {dto.status:<11} "
            f"{dto.customer_name:<24} {dto.total:>14}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID to update.")
@click.option("--to", "new_status", required=True, type=_STATUS_CHOICE, help="New status.")
@click.option("--notes", default="", help="Admin notes for this change.")
def order_status(order_id: str, new_status: str, notes: str) -> None:
    """Move an order to a new status (confirm/cancel adjust stock)."""
    handler = update_order_status_handler()

    try:
        dto = handler.handle(order_id, new_status, notes)
    except InsufficientStockError as exc:
        click.echo("Cannot confirm, insufficient stock:", err=True)
        for shortfall in exc.shortfalls:
            click.echo(f"  {shortfall}", err=True)
        raise click.ClickException(str(exc))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("stats")
def order_stats() -> None:
    """Show order counts per status and revenue."""
    stats = OrderStatisticsHandler(order_repo=order_repository()).handle()

    click.echo(f"Total orders: {stats.total}")
    for status, count in stats.by_status.items():
        click.echo(f"  {status:<11} {count:>6}")
    click.echo(f"Revenue (excl. cancelled): {stats.revenue}")
