"""CLI commands for inventory management."""

from __future__ import annotations

import click

from storefront.application.restock_product import RestockProductHandler
from storefront.application.show_inventory import ShowInventoryHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import product_repository
from storefront.infrastructure.config import get_settings


def _inventory_handler() -> ShowInventoryHandler:
    settings = get_settings()
    return ShowInventoryHandler(
        product_repo=product_repository(),
        low_stock_threshold=settings.low_stock_threshold,
        critical_stock_threshold=settings.critical_stock_threshold,
    )


@click.command("show")
def inventory_show() -> None:
    """Show stock and sales per product variant."""
    report = _inventory_handler().handle()

    if not report.lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'Product':<24} {'Variant':<8} {'Stock':>7} {'Sold':>7}  {'Status'}")
    click.echo("-" * 62)
    for line in report.lines:
        click.echo(
            f"{line.product_name:<24} {line.variant:<8} {line.stock:>7} "
            f"{line.sold:>7}  {line.status.value}"
        )

    summary = report.summary
    click.echo()
    click.echo(f"Variants: {summary.total_variants}  Stock: {summary.total_stock}  "
               f"Sold: {summary.total_sold}")
    click.echo(f"Stock value: {summary.stock_value:.2f}  Sales value: {summary.sales_value:.2f}")
    click.echo(f"Out of stock: {summary.out_of_stock_count}  Low stock: {summary.low_stock_count}")


@click.command("low")
def inventory_low() -> None:
    """List variants running low on stock."""
    alerts = _inventory_handler().low_stock()

    if not alerts:
        click.echo("No low stock alerts.")
        return

    for line in alerts:
        click.echo(
            f"{line.status.value:<10} {line.product_name} ({line.variant}): "
            f"{line.stock} units left"
        )


@click.command("restock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--variant", required=True, help="Variant label, e.g. 50ml.")
@click.option("--quantity", required=True, type=int, help="Units received.")
def inventory_restock(product_id: str, variant: str, quantity: int) -> None:
    """Add received units to a variant's stock."""
    handler = RestockProductHandler(product_repo=product_repository())

    try:
        new_level = handler.handle(product_id=product_id, variant=variant, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} {variant} stock is now {new_level}")
