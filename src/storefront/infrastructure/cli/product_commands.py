"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.update_product import UpdateProductPriceHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import product_repository


def _parse_variant(raw: str) -> tuple[str, str, int]:
    """Parse '50ml:4500:12' into (variant, price, stock)."""
    parts = raw.split(":")
    if len(parts) != 3:
        raise click.BadParameter(
            f"Invalid variant '{raw}'. Expected 'Variant:Price:Stock'."
        )
    label, price, stock_str = (p.strip() for p in parts)
    try:
        stock = int(stock_str)
    except ValueError:
        raise click.BadParameter(f"Invalid stock '{stock_str}' for variant '{label}'.")
    return label, price, stock


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option(
    "--variant", "variants", required=True, multiple=True,
    help="Variant as 'Label:Price:Stock' (repeatable).",
)
@click.option("--discount", default="0", help="Discount percentage (0-100).")
def product_add(name: str, variants: tuple[str, ...], discount: str) -> None:
    """Add a new product to the catalog."""
    parsed = [_parse_variant(v) for v in variants]
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(
            name=name,
            variants={label: (price, stock) for label, price, stock in parsed},
            discount_percentage=discount,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added "
        f"({', '.join(product.variants)})"
    )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Variant':<8} {'Price':>14} {'Sale':>14}")
    click.echo("-" * 70)
    for p in products:
        for variant in p.variants:
            click.echo(
                f"{p.id:<6} {p.name:<24} {variant:<8} "
                f"{str(p.price_for(variant)):>14} {str(p.sale_price_for(variant)):>14}"
            )


@click.command("price")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--variant", required=True, help="Variant label, e.g. 50ml.")
@click.option("--price", required=True, help="New price (e.g. 4999.00).")
def product_price(product_id: str, variant: str, price: str) -> None:
    """Update one variant's price."""
    handler = UpdateProductPriceHandler(product_repo=product_repository())

    try:
        handler.handle(product_id=product_id, variant=variant, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} {variant} price updated to {price}")
