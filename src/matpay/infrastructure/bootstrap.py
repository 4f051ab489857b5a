"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  One ``Container`` is
built per process; the CLI and the API server both go through it so
they share the same locks.
"""

from __future__ import annotations

from matpay.application.add_material import AddMaterialHandler
from matpay.application.add_to_cart import AddToCartHandler
from matpay.application.apply_charge import ApplyChargeHandler
from matpay.application.cancel_order import CancelOrderHandler
from matpay.application.configure_payout_account import ConfigurePayoutAccountHandler
from matpay.application.create_order import CreateOrderHandler
from matpay.application.handle_webhook import WebhookHandler
from matpay.application.initialize_payment import InitializePaymentHandler
from matpay.application.list_materials import ListMaterialsHandler
from matpay.application.list_orders import ListOrdersHandler
from matpay.application.locking import KeyedLock
from matpay.application.ports import Notifier, PaymentGateway, ReceiptGenerator
from matpay.application.remove_from_cart import RemoveFromCartHandler
from matpay.application.show_cart import ShowCartHandler
from matpay.application.show_order import ShowOrderHandler
from matpay.application.transfer_history import TransferHistoryHandler
from matpay.application.transfer_orchestrator import TransferOrchestrator
from matpay.application.update_order_status import UpdateOrderStatusHandler
from matpay.application.verify_payment import VerifyPaymentHandler
from matpay.domain.repository.cart_repository import CartRepository
from matpay.domain.repository.material_repository import MaterialRepository
from matpay.domain.repository.order_repository import OrderRepository
from matpay.domain.repository.payment_repository import PaymentRepository
from matpay.domain.repository.payout_account_repository import PayoutAccountRepository
from matpay.domain.service.reference_generator import ReferenceGenerator
from matpay.domain.service.stock_adjuster import StockAdjuster
from matpay.infrastructure.config import Settings
from matpay.infrastructure.gateway.paystack_client import PaystackClient
from matpay.infrastructure.notifications import JsonInboxNotifier
from matpay.infrastructure.persistence.json_cart_repository import JsonCartRepository
from matpay.infrastructure.persistence.json_material_repository import JsonMaterialRepository
from matpay.infrastructure.persistence.json_order_repository import JsonOrderRepository
from matpay.infrastructure.persistence.json_payment_repository import JsonPaymentRepository
from matpay.infrastructure.persistence.json_payout_account_repository import (
    JsonPayoutAccountRepository,
)
from matpay.infrastructure.receipts import TextReceiptGenerator


class Container:
    """Builds every use-case handler over one set of collaborators."""

    def __init__(
        self,
        settings: Settings,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        material_repo: MaterialRepository,
        cart_repo: CartRepository,
        payout_repo: PayoutAccountRepository,
        gateway: PaymentGateway,
        notifier: Notifier,
        receipts: ReceiptGenerator,
        references: ReferenceGenerator | None = None,
    ) -> None:
        self.settings = settings
        self.order_repo = order_repo
        self.payment_repo = payment_repo
        self.material_repo = material_repo
        self.cart_repo = cart_repo
        self.payout_repo = payout_repo
        self.gateway = gateway
        self.notifier = notifier
        self.receipts = receipts
        self.references = references or ReferenceGenerator()
        self.locks = KeyedLock()

        stock = StockAdjuster(material_repo)

        self.transfers = TransferOrchestrator(
            payment_repo, order_repo, payout_repo, gateway, self.references, self.locks
        )
        self.apply_charge = ApplyChargeHandler(
            payment_repo, order_repo, stock, self.transfers,
            notifier, receipts, self.references, self.locks,
        )
        self.create_order = CreateOrderHandler(
            order_repo, cart_repo, material_repo, self.references, self.locks
        )
        self.initialize_payment = InitializePaymentHandler(
            order_repo, payment_repo, gateway, self.references, self.locks
        )
        self.verify_payment = VerifyPaymentHandler(gateway, self.apply_charge)
        self.webhook = WebhookHandler(
            settings.paystack_secret_key, self.apply_charge, self.transfers
        )
        self.cancel_order = CancelOrderHandler(
            order_repo, payment_repo, stock, notifier, self.locks
        )
        self.update_order_status = UpdateOrderStatusHandler(
            order_repo, self.cancel_order, notifier, self.locks
        )
        self.show_order = ShowOrderHandler(order_repo, payment_repo)
        self.list_orders = ListOrdersHandler(order_repo)
        self.transfer_history = TransferHistoryHandler(payment_repo)
        self.add_to_cart = AddToCartHandler(cart_repo, material_repo, self.locks)
        self.remove_from_cart = RemoveFromCartHandler(cart_repo, self.locks)
        self.show_cart = ShowCartHandler(cart_repo)
        self.add_material = AddMaterialHandler(material_repo, settings.currency)
        self.list_materials = ListMaterialsHandler(material_repo)
        self.configure_payout_account = ConfigurePayoutAccountHandler(payout_repo, gateway)


def build_container(settings: Settings | None = None) -> Container:
    """Wire the file-backed repositories and the live Paystack client."""
    settings = settings or Settings.from_env()
    data = settings.data_dir
    return Container(
        settings=settings,
        order_repo=JsonOrderRepository(data / "orders.json"),
        payment_repo=JsonPaymentRepository(data / "payments.json"),
        material_repo=JsonMaterialRepository(data / "materials.json"),
        cart_repo=JsonCartRepository(data / "carts.json"),
        payout_repo=JsonPayoutAccountRepository(data / "payout_accounts.json"),
        gateway=PaystackClient(
            secret_key=settings.paystack_secret_key,
            base_url=settings.paystack_base_url,
            currency=settings.currency,
            callback_url=settings.callback_url,
            timeout=settings.http_timeout,
        ),
        notifier=JsonInboxNotifier(data / "notifications.json"),
        receipts=TextReceiptGenerator(data / "receipts"),
    )
