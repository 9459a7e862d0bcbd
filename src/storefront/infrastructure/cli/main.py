import click

from storefront.infrastructure.cli.inventory_commands import (
    inventory_low,
    inventory_restock,
    inventory_show,
)
from storefront.infrastructure.cli.order_commands import (
    order_list,
    order_place,
    order_show,
    order_stats,
    order_status,
    order_track,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_price,
)
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging_config import setup_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log stock and status changes.")
def cli(verbose: bool) -> None:
    """Storefront back office: orders, products and inventory."""
    setup_logging("INFO" if verbose else get_settings().log_level)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


# Register subcommands
order.add_command(order_list)
order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_stats)
order.add_command(order_status)
order.add_command(order_track)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_price)
inventory.add_command(inventory_low)
inventory.add_command(inventory_restock)
inventory.add_command(inventory_show)
