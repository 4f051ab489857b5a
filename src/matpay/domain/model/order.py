"""Order aggregate: the core of the domain.

The Order is an aggregate root that owns its line items.  All lifecycle
rules are enforced here:

    PENDING -> CONFIRMED -> PREPARING -> READY_FOR_PICKUP | OUT_FOR_DELIVERY -> DELIVERED
    PENDING | CONFIRMED -> CANCELLED

Side effects of a transition (stock, notifications, refunds) are
coordinated by the application handlers, never by the aggregate itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from matpay.domain.exceptions import InvalidStatus, InvalidTransition, ValidationError
from matpay.domain.model.value_objects import Money, Quantity
from matpay.domain.service.split_calculator import compute_split


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @staticmethod
    def parse(value: str) -> OrderStatus:
        try:
            return OrderStatus(value.strip().upper())
        except (ValueError, AttributeError):
            raise InvalidStatus(f"Unknown order status: {value!r}") from None


class DeliveryMethod(Enum):
    SCHOOL_PICKUP = "SCHOOL_PICKUP"
    HOME_DELIVERY = "HOME_DELIVERY"


# Administrative moves only. CONFIRMED is entered via payment, CANCELLED via cancel().
ADMIN_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.CONFIRMED: (OrderStatus.PREPARING,),
    OrderStatus.PREPARING: (OrderStatus.READY_FOR_PICKUP, OrderStatus.OUT_FOR_DELIVERY),
    OrderStatus.READY_FOR_PICKUP: (OrderStatus.DELIVERED,),
    OrderStatus.OUT_FOR_DELIVERY: (OrderStatus.DELIVERED,),
}

CANCELLABLE = (OrderStatus.PENDING, OrderStatus.CONFIRMED)


@dataclass
class OrderLineItem:
    """Captures the material snapshot at order-creation time.

    ``unit_price``, ``material_name`` and ``material_image`` never change
    after creation (price lock).  ``stock_committed`` records how many
    units were actually withdrawn from stock when the order was confirmed
    so a cancellation can restore exactly that amount.
    """

    material_id: str
    material_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    material_image: str | None = None
    stock_committed: int = 0

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for material orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules and freezes the fee split.  The ``__init__`` stays
    plain so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: int | None
    order_number: str
    buyer_id: str
    buyer_email: str
    seller_id: str
    items: list[OrderLineItem]
    subtotal: Money
    processing_fee: Money
    gateway_fee: Money
    total_amount: Money
    seller_amount: Money
    delivery_method: DeliveryMethod = DeliveryMethod.SCHOOL_PICKUP
    delivery_address: str | None = None
    delivery_notes: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    admin_notes: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    confirmed_at: datetime | None = None
    prepared_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        buyer_id: str,
        buyer_email: str,
        seller_id: str,
        items: list[OrderLineItem],
        delivery_method: DeliveryMethod = DeliveryMethod.SCHOOL_PICKUP,
        delivery_address: str | None = None,
        delivery_notes: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not buyer_id or not buyer_id.strip():
            raise ValidationError("Buyer is required")
        if not seller_id or not seller_id.strip():
            raise ValidationError("Seller is required")
        if not buyer_email or "@" not in buyer_email:
            raise ValidationError("A valid buyer email is required")
        if not items:
            raise ValidationError("Cart is empty")
        if delivery_method == DeliveryMethod.HOME_DELIVERY and not delivery_address:
            raise ValidationError("Delivery address is required for home delivery")

        subtotal = Money.zero(items[0].unit_price.currency)
        for item in items:
            subtotal = subtotal + item.line_total

        split = compute_split(subtotal)

        return Order(
            id=None,
            order_number=order_number,
            buyer_id=buyer_id.strip(),
            buyer_email=buyer_email.strip(),
            seller_id=seller_id.strip(),
            items=list(items),
            subtotal=split.subtotal,
            processing_fee=split.processing_fee,
            gateway_fee=split.gateway_fee_estimate,
            total_amount=split.total_amount,
            seller_amount=split.seller_amount,
            delivery_method=delivery_method,
            delivery_address=delivery_address,
            delivery_notes=delivery_notes,
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self, now: datetime | None = None) -> None:
        """Transition PENDING -> CONFIRMED.

        Only the payment flow calls this, after the charge was applied.
        Stock withdrawal is coordinated by the caller.
        """
        if self.status != OrderStatus.PENDING:
            raise InvalidTransition(
                f"Cannot confirm order {self.order_number}: current status is "
                f"{self.status.value}, expected PENDING"
            )
        self.status = OrderStatus.CONFIRMED
        self.confirmed_at = now or _utcnow()

    def cancel(self, reason: str | None = None, now: datetime | None = None) -> OrderStatus:
        """Transition PENDING|CONFIRMED -> CANCELLED.

        Returns the status the order was cancelled from so the caller can
        decide whether stock must be restored.
        """
        if self.status not in CANCELLABLE:
            raise InvalidTransition(
                f"Order {self.order_number} cannot be cancelled at this stage "
                f"(status {self.status.value})"
            )
        previous = self.status
        self.status = OrderStatus.CANCELLED
        self.cancelled_at = now or _utcnow()
        if reason:
            self.admin_notes = reason
        return previous

    def advance_to(
        self,
        target: OrderStatus,
        admin_notes: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Apply an administrative fulfilment transition.

        Each stage timestamp is recorded the first time the stage is entered.
        """
        allowed = ADMIN_TRANSITIONS.get(self.status, ())
        if target not in allowed:
            raise InvalidTransition(
                f"Cannot move order {self.order_number} from "
                f"{self.status.value} to {target.value}"
            )
        now = now or _utcnow()
        self.status = target

        if target in (
            OrderStatus.PREPARING,
            OrderStatus.READY_FOR_PICKUP,
            OrderStatus.OUT_FOR_DELIVERY,
        ):
            if self.prepared_at is None:
                self.prepared_at = now
        elif target == OrderStatus.DELIVERED and self.delivered_at is None:
            self.delivered_at = now

        if admin_notes:
            self.admin_notes = admin_notes

    # --- Computed properties --------------------------------------------------

    @property
    def is_payable(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def items_total(self) -> Money:
        result = Money(Decimal("0.00"), self.subtotal.currency)
        for item in self.items:
            result = result + item.line_total
        return result
