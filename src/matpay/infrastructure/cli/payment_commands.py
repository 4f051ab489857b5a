"""CLI commands for payments and seller transfers."""

from __future__ import annotations

import click

from matpay.domain.exceptions import DomainException
from matpay.infrastructure.bootstrap import Container


@click.command("init")
@click.option("--order", "order_id", required=True, type=int, help="Order ID to pay for.")
@click.pass_obj
def payment_init(container: Container, order_id: int) -> None:
    """Open a gateway checkout for a pending order."""
    try:
        dto = container.initialize_payment.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reference: {dto.reference}")
    click.echo(f"Amount:    {dto.amount_minor_units} (minor units)")
    click.echo(f"Checkout:  {dto.authorization_url}")


@click.command("verify")
@click.option("--reference", required=True, help="Payment reference to verify.")
@click.pass_obj
def payment_verify(container: Container, reference: str) -> None:
    """Confirm a payment with the gateway and apply it."""
    try:
        result = container.verify_payment.handle(reference)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.applied:
        click.echo(f"Payment {reference} applied; order {result.order.order_number} "
                   f"is {result.order.status}.")
    else:
        click.echo(f"Payment {reference} was already processed.")


@click.command("retry")
@click.option("--payment", "payment_id", required=True, type=int, help="Payment ID.")
@click.pass_obj
def transfer_retry(container: Container, payment_id: int) -> None:
    """Send (or re-send) the seller payout for a completed payment."""
    try:
        dto = container.transfers.retry(payment_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transfer {dto.transfer_code} initiated (reference {dto.transfer_reference}).")


@click.command("history")
@click.option("--seller", "seller_id", required=True)
@click.pass_obj
def transfer_history(container: Container, seller_id: str) -> None:
    """List the payouts sent to a seller."""
    payments = container.transfer_history.handle(seller_id)
    if not payments:
        click.echo("No transfers found.")
        return

    click.echo(f"{'Transfer':<22} {'Status':<10} {'Amount':>10}  Payment")
    click.echo("-" * 66)
    for p in payments:
        click.echo(
            f"{p.transfer_code:<22} {p.transfer_status:<10} {p.seller_amount:>10}  {p.reference}"
        )
