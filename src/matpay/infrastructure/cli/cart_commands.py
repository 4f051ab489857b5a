"""CLI commands for buyer carts."""

from __future__ import annotations

import click

from matpay.application.dto import CartDTO
from matpay.domain.exceptions import DomainException
from matpay.infrastructure.bootstrap import Container


def _display_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo("Cart is empty.")
        return
    click.echo(f"Cart of {dto.buyer_id} at {dto.seller_id}:")
    for item in dto.items:
        click.echo(f"  {item.material_id:<14} x{item.quantity}")


@click.command("add")
@click.option("--buyer", "buyer_id", required=True)
@click.option("--seller", "seller_id", required=True)
@click.option("--material", "material_id", required=True)
@click.option("--qty", "quantity", default=1, type=int, show_default=True)
@click.pass_obj
def cart_add(
    container: Container, buyer_id: str, seller_id: str, material_id: str, quantity: int
) -> None:
    """Add a material to a buyer's cart."""
    try:
        dto = container.add_to_cart.handle(buyer_id, seller_id, material_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("remove")
@click.option("--buyer", "buyer_id", required=True)
@click.option("--seller", "seller_id", required=True)
@click.option("--material", "material_id", required=True)
@click.pass_obj
def cart_remove(container: Container, buyer_id: str, seller_id: str, material_id: str) -> None:
    """Remove a material from a buyer's cart."""
    try:
        dto = container.remove_from_cart.handle(buyer_id, seller_id, material_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("show")
@click.option("--buyer", "buyer_id", required=True)
@click.option("--seller", "seller_id", required=True)
@click.pass_obj
def cart_show(container: Container, buyer_id: str, seller_id: str) -> None:
    """Show a buyer's cart."""
    _display_cart(container.show_cart.handle(buyer_id, seller_id))
