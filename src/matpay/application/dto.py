"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the API/CLI and application layers without
exposing domain internals to the outside world.  Amounts are rendered
as fixed two-decimal strings and timestamps as ISO-8601.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from matpay.domain.model.cart import Cart
from matpay.domain.model.material import Material
from matpay.domain.model.order import Order
from matpay.domain.model.payment import Payment
from matpay.domain.model.payout_account import PayoutAccount
from matpay.domain.model.value_objects import Money


def _amount(money: Money) -> str:
    return f"{money.amount:.2f}"


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    material_id: str
    material_name: str
    material_image: str | None
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class PaymentDTO:
    id: int
    order_id: int
    reference: str
    status: str
    amount: str
    processing_fee: str
    seller_amount: str
    transaction_id: str | None
    paid_at: str | None
    transfer_code: str | None
    transfer_reference: str | None
    transfer_status: str | None
    transferred_at: str | None
    receipt_number: str | None
    receipt_url: str | None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    buyer_id: str
    seller_id: str
    status: str
    items: list[OrderLineItemDTO]
    currency: str
    subtotal: str
    processing_fee: str
    gateway_fee: str
    total_amount: str
    seller_amount: str
    delivery_method: str
    delivery_address: str | None
    admin_notes: str | None
    created_at: str
    confirmed_at: str | None
    prepared_at: str | None
    delivered_at: str | None
    cancelled_at: str | None
    payment: PaymentDTO | None = None


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    page: int
    limit: int
    total: int
    pages: int


@dataclass(frozen=True)
class PaymentInitDTO:
    """Output: what the buyer needs to open the gateway checkout."""

    authorization_url: str
    access_code: str
    reference: str
    amount_minor_units: int


@dataclass(frozen=True)
class ChargeResultDTO:
    """Output: the state after a charge confirmation was processed.

    ``applied`` is False when this confirmation was a duplicate of one
    that had already been applied.
    """

    applied: bool
    order: OrderDTO
    payment: PaymentDTO


@dataclass(frozen=True)
class CartItemDTO:
    material_id: str
    quantity: int


@dataclass(frozen=True)
class CartDTO:
    buyer_id: str
    seller_id: str
    items: list[CartItemDTO] = field(default_factory=list)


@dataclass(frozen=True)
class MaterialDTO:
    id: str
    seller_id: str
    name: str
    price: str
    stock_quantity: int
    is_active: bool


@dataclass(frozen=True)
class PayoutAccountDTO:
    seller_id: str
    account_name: str
    account_number: str
    bank_code: str
    bank_name: str | None
    preferred_method: str
    recipient_code: str | None
    is_verified: bool
    verified_at: str | None


# --- Mapping ------------------------------------------------------------------


def payment_to_dto(payment: Payment) -> PaymentDTO:
    transfer = payment.transfer
    return PaymentDTO(
        id=payment.id,  # type: ignore[arg-type]
        order_id=payment.order_id,
        reference=payment.reference,
        status=payment.status.value,
        amount=_amount(payment.amount),
        processing_fee=_amount(payment.processing_fee),
        seller_amount=_amount(payment.seller_amount),
        transaction_id=payment.transaction_id,
        paid_at=_ts(payment.paid_at),
        transfer_code=transfer.code if transfer else None,
        transfer_reference=transfer.reference if transfer else None,
        transfer_status=transfer.status.value if transfer else None,
        transferred_at=_ts(transfer.transferred_at) if transfer else None,
        receipt_number=payment.receipt_number,
        receipt_url=payment.receipt_url,
    )


def order_to_dto(order: Order, payment: Payment | None = None) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        buyer_id=order.buyer_id,
        seller_id=order.seller_id,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                material_id=item.material_id,
                material_name=item.material_name,
                material_image=item.material_image,
                quantity=item.quantity.value,
                unit_price=_amount(item.unit_price),
                line_total=_amount(item.line_total),
            )
            for item in order.items
        ],
        currency=order.total_amount.currency,
        subtotal=_amount(order.subtotal),
        processing_fee=_amount(order.processing_fee),
        gateway_fee=_amount(order.gateway_fee),
        total_amount=_amount(order.total_amount),
        seller_amount=_amount(order.seller_amount),
        delivery_method=order.delivery_method.value,
        delivery_address=order.delivery_address,
        admin_notes=order.admin_notes,
        created_at=order.created_at.isoformat(),
        confirmed_at=_ts(order.confirmed_at),
        prepared_at=_ts(order.prepared_at),
        delivered_at=_ts(order.delivered_at),
        cancelled_at=_ts(order.cancelled_at),
        payment=payment_to_dto(payment) if payment is not None else None,
    )


def cart_to_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        buyer_id=cart.buyer_id,
        seller_id=cart.seller_id,
        items=[CartItemDTO(i.material_id, i.quantity) for i in cart.items],
    )


def material_to_dto(material: Material) -> MaterialDTO:
    return MaterialDTO(
        id=material.id,
        seller_id=material.seller_id,
        name=material.name,
        price=_amount(material.price),
        stock_quantity=material.stock_quantity,
        is_active=material.is_active,
    )


def payout_account_to_dto(account: PayoutAccount) -> PayoutAccountDTO:
    return PayoutAccountDTO(
        seller_id=account.seller_id,
        account_name=account.account_name,
        account_number=account.account_number,
        bank_code=account.bank_code,
        bank_name=account.bank_name,
        preferred_method=account.preferred_method.value,
        recipient_code=account.recipient_code,
        is_verified=account.is_verified,
        verified_at=_ts(account.verified_at),
    )
