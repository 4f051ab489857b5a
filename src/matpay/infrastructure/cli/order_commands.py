"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from matpay.application.dto import OrderDTO
from matpay.domain.exceptions import DomainException
from matpay.infrastructure.bootstrap import Container


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number} (#{dto.id})  status={dto.status}")
    click.echo(f"Buyer:    {dto.buyer_id}")
    click.echo(f"Seller:   {dto.seller_id}")
    click.echo(f"Delivery: {dto.delivery_method}"
               + (f" to {dto.delivery_address}" if dto.delivery_address else ""))
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Material':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.material_name[:24]:<24} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>21}")
    click.echo(f"  {'Processing fee':<30} {dto.processing_fee:>21}")
    click.echo(f"  {'Total (' + dto.currency + ')':<30} {dto.total_amount:>21}")

    if dto.payment is not None:
        p = dto.payment
        click.echo()
        click.echo(f"Payment {p.reference}  status={p.status}")
        if p.transfer_code:
            click.echo(f"Transfer {p.transfer_code}  status={p.transfer_status}")
        if p.receipt_number:
            click.echo(f"Receipt {p.receipt_number}")


@click.command("create")
@click.option("--buyer", "buyer_id", required=True, help="Buyer ID.")
@click.option("--email", "buyer_email", required=True, help="Buyer email for the checkout.")
@click.option("--seller", "seller_id", required=True, help="Seller whose cart to check out.")
@click.option(
    "--delivery",
    "delivery_method",
    type=click.Choice(["SCHOOL_PICKUP", "HOME_DELIVERY"]),
    default="SCHOOL_PICKUP",
    show_default=True,
)
@click.option("--address", "delivery_address", default=None, help="Required for home delivery.")
@click.option("--notes", "delivery_notes", default=None)
@click.pass_obj
def order_create(
    container: Container,
    buyer_id: str,
    buyer_email: str,
    seller_id: str,
    delivery_method: str,
    delivery_address: str | None,
    delivery_notes: str | None,
) -> None:
    """Create an order from the buyer's cart."""
    try:
        dto = container.create_order.handle(
            buyer_id=buyer_id,
            buyer_email=buyer_email,
            seller_id=seller_id,
            delivery_method=delivery_method,
            delivery_address=delivery_address,
            delivery_notes=delivery_notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, order_id: int) -> None:
    """Show details of an existing order."""
    try:
        dto = container.show_order.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--to", "status", required=True, help="Target status, e.g. PREPARING.")
@click.option("--notes", "admin_notes", default=None)
@click.pass_obj
def order_status(container: Container, order_id: int, status: str, admin_notes: str | None) -> None:
    """Move an order through fulfilment."""
    try:
        dto = container.update_order_status.handle(order_id, status, admin_notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--reason", default=None)
@click.pass_obj
def order_cancel(container: Container, order_id: int, reason: str | None) -> None:
    """Cancel an order (restores stock and marks the payment refunded if paid)."""
    try:
        dto = container.cancel_order.handle(order_id, reason=reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} cancelled.")
    if dto.payment is not None:
        click.echo(f"Payment {dto.payment.reference} marked {dto.payment.status}.")
