"""CLI commands for sellers: catalog materials and payout accounts."""

from __future__ import annotations

import click

from matpay.domain.exceptions import DomainException
from matpay.infrastructure.bootstrap import Container


@click.command("add")
@click.option("--seller", "seller_id", required=True)
@click.option("--name", required=True, help="Material name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", "stock_quantity", default=0, type=int, show_default=True)
@click.option("--image", "image_urls", multiple=True, help="Image URL (repeatable).")
@click.pass_obj
def material_add(
    container: Container,
    seller_id: str,
    name: str,
    price: str,
    stock_quantity: int,
    image_urls: tuple[str, ...],
) -> None:
    """Add a new material to a seller's catalog."""
    try:
        dto = container.add_material.handle(
            seller_id=seller_id,
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            image_urls=list(image_urls),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Material {dto.id} '{dto.name}' added at {dto.price} ({dto.stock_quantity} in stock)")


@click.command("list")
@click.option("--seller", "seller_id", required=True)
@click.pass_obj
def material_list(container: Container, seller_id: str) -> None:
    """List a seller's active materials."""
    materials = container.list_materials.handle(seller_id)
    if not materials:
        click.echo("No materials found.")
        return

    click.echo(f"{'ID':<14} {'Name':<24} {'Price':>10} {'Stock':>7}")
    click.echo("-" * 58)
    for m in materials:
        click.echo(f"{m.id:<14} {m.name[:24]:<24} {m.price:>10} {m.stock_quantity:>7}")


@click.command("configure")
@click.option("--seller", "seller_id", required=True)
@click.option("--name", "account_name", required=True, help="Account holder name.")
@click.option("--account", "account_number", required=True)
@click.option("--bank", "bank_code", required=True, help="Bank code.")
@click.option("--bank-name", default=None)
@click.pass_obj
def payout_configure(
    container: Container,
    seller_id: str,
    account_name: str,
    account_number: str,
    bank_code: str,
    bank_name: str | None,
) -> None:
    """Register and verify a seller's payout account."""
    try:
        dto = container.configure_payout_account.handle(
            seller_id=seller_id,
            account_name=account_name,
            account_number=account_number,
            bank_code=bank_code,
            bank_name=bank_name,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payout account for {dto.seller_id} verified (recipient {dto.recipient_code}).")
