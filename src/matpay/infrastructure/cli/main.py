import click
import uvicorn

from matpay.infrastructure.api.app import create_app
from matpay.infrastructure.bootstrap import build_container
from matpay.infrastructure.cli.cart_commands import cart_add, cart_remove, cart_show
from matpay.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_show,
    order_status,
)
from matpay.infrastructure.cli.payment_commands import (
    payment_init,
    payment_verify,
    transfer_history,
    transfer_retry,
)
from matpay.infrastructure.cli.seller_commands import (
    material_add,
    material_list,
    payout_configure,
)
from matpay.infrastructure.config import Settings
from matpay.infrastructure.logging_config import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """matpay: school materials orders, payments and seller payouts"""
    if ctx.obj is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        ctx.obj = build_container(settings)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def payment() -> None:
    """Initialize and verify payments."""


@cli.group()
def transfer() -> None:
    """Seller payouts."""


@cli.group()
def payout() -> None:
    """Seller payout accounts."""


@cli.group()
def material() -> None:
    """Manage the materials catalog."""


@cli.group()
def cart() -> None:
    """Manage buyer carts."""


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.pass_obj
def serve(container, host: str, port: int) -> None:
    """Run the HTTP API (webhooks included)."""
    uvicorn.run(create_app(container), host=host, port=port)


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_show)
order.add_command(order_status)
payment.add_command(payment_init)
payment.add_command(payment_verify)
transfer.add_command(transfer_retry)
transfer.add_command(transfer_history)
payout.add_command(payout_configure)
material.add_command(material_add)
material.add_command(material_list)
cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_show)
