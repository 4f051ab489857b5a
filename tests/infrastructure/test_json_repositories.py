"""Round-trip and locking tests for the JSON-file repositories."""

import json
import threading
from datetime import datetime, timezone

from matpay.domain.model.cart import Cart
from matpay.domain.model.material import Material
from matpay.domain.model.order import DeliveryMethod, Order, OrderLineItem, OrderStatus
from matpay.domain.model.payment import Payment, PaymentStatus, TransferStatus
from matpay.domain.model.payout_account import PayoutAccount, PayoutMethod
from matpay.domain.model.value_objects import Money, Quantity
from matpay.infrastructure.notifications import JsonInboxNotifier
from matpay.infrastructure.persistence.json_cart_repository import JsonCartRepository
from matpay.infrastructure.persistence.json_material_repository import JsonMaterialRepository
from matpay.infrastructure.persistence.json_order_repository import JsonOrderRepository
from matpay.infrastructure.persistence.json_payment_repository import JsonPaymentRepository
from matpay.infrastructure.persistence.json_payout_account_repository import (
    JsonPayoutAccountRepository,
)
from matpay.infrastructure.receipts import TextReceiptGenerator


def _order(number: str = "ORD-1", buyer: str = "b1") -> Order:
    return Order.create(
        order_number=number,
        buyer_id=buyer,
        buyer_email="b@example.com",
        seller_id="s1",
        items=[OrderLineItem("M1", "Atlas", Quantity(2), Money.of("50.00"), "https://img/1")],
        delivery_method=DeliveryMethod.HOME_DELIVERY,
        delivery_address="Accra",
    )


class TestJsonOrderRepository:

    def test_file_created_empty(self, tmp_path):
        JsonOrderRepository(tmp_path / "data" / "orders.json")
        assert json.loads((tmp_path / "data" / "orders.json").read_text()) == []

    def test_save_assigns_ids_and_round_trips(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        order.confirm()
        order.items[0].stock_committed = 2
        repo.save(order)

        loaded = repo.get_by_id(order.id)

        assert order.id == 1
        assert loaded.status == OrderStatus.CONFIRMED
        assert loaded.total_amount == Money.of("102.90")
        assert loaded.gateway_fee == Money.of("1.54")
        assert loaded.items[0].stock_committed == 2
        assert loaded.items[0].material_image == "https://img/1"
        assert loaded.delivery_method == DeliveryMethod.HOME_DELIVERY
        assert loaded.confirmed_at == order.confirmed_at
        assert repo.get_by_order_number("ORD-1").id == 1

    def test_listing_and_delete(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        for n in range(3):
            repo.save(_order(f"ORD-{n}", buyer="b1" if n < 2 else "b2"))
        assert [o.order_number for o in repo.list_by_buyer("b1")] == ["ORD-1", "ORD-0"]
        assert len(repo.list_by_seller("s1", OrderStatus.PENDING)) == 3

        repo.delete(1)
        assert repo.get_by_id(1) is None
        assert len(repo.list_by_seller("s1")) == 2


class TestJsonPaymentRepository:

    def test_round_trip_with_transfer(self, tmp_path):
        repo = JsonPaymentRepository(tmp_path / "payments.json")
        payment = Payment(
            id=None, order_id=1, seller_id="s1", reference="PAY-1",
            amount=Money.of("102.90"), processing_fee=Money.of("2.90"),
            gateway_fee=Money.of("1.54"), seller_amount=Money.of("100.00"),
        )
        repo.save(payment)
        payment.complete("9001", "AUTH_1", {"id": 9001, "nested": {"a": [1, 2]}})
        payment.record_transfer("TRF_1", "TXF-1")
        payment.mark_transfer(TransferStatus.SUCCESS, now=datetime(2024, 1, 2, tzinfo=timezone.utc))
        repo.save(payment)

        loaded = repo.get_by_transfer_code("TRF_1")

        assert loaded.id == 1
        assert loaded.status == PaymentStatus.COMPLETED
        assert loaded.gateway_payload == {"id": 9001, "nested": {"a": [1, 2]}}
        assert loaded.transfer.status == TransferStatus.SUCCESS
        assert loaded.transfer.transferred_at == datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert repo.get_by_reference("PAY-1").seller_amount == Money.of("100.00")
        assert [p.id for p in repo.list_transfers_by_seller("s1")] == [1]
        assert repo.list_by_order(1)[0].reference == "PAY-1"


class TestJsonMaterialRepository:

    def test_stock_operations(self, tmp_path):
        repo = JsonMaterialRepository(tmp_path / "materials.json")
        repo.save(Material("M1", "s1", "Atlas", Money.of("50"), stock_quantity=3))

        assert repo.withdraw_stock("M1", 5) == 3
        assert repo.get_by_id("M1").stock_quantity == 0
        repo.restock("M1", 3)
        assert repo.get_by_id("M1").stock_quantity == 3

    def test_concurrent_withdrawals_never_lose_updates(self, tmp_path):
        repo = JsonMaterialRepository(tmp_path / "materials.json")
        repo.save(Material("M1", "s1", "Atlas", Money.of("50"), stock_quantity=40))

        threads = [threading.Thread(target=repo.withdraw_stock, args=("M1", 1)) for _ in range(30)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert repo.get_by_id("M1").stock_quantity == 10


class TestJsonCartAndPayoutRepositories:

    def test_cart_round_trip(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        cart = Cart("b1", "s1")
        cart.add("M1", 2)
        repo.save(cart)
        cart.add("M2", 1)
        repo.save(cart)

        loaded = repo.get("b1", "s1")
        assert [(i.material_id, i.quantity) for i in loaded.items] == [("M1", 2), ("M2", 1)]
        assert repo.get("b1", "s2") is None

    def test_payout_account_round_trip(self, tmp_path):
        repo = JsonPayoutAccountRepository(tmp_path / "payout_accounts.json")
        repo.save(PayoutAccount(
            seller_id="s1", account_name="Ama", account_number="0551234567", bank_code="MTN",
            preferred_method=PayoutMethod.MOBILE_MONEY, recipient_code="RCP_1",
            is_verified=True, verified_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        ))

        loaded = repo.get_by_account("MTN", "0551234567")
        assert loaded.seller_id == "s1"
        assert loaded.preferred_method == PayoutMethod.MOBILE_MONEY
        assert loaded.is_payout_destination
        assert repo.get_by_seller("s2") is None


class TestFileAdapters:

    def test_notifications_are_appended_per_user(self, tmp_path):
        notifier = JsonInboxNotifier(tmp_path / "notifications.json")
        notifier.notify("b1", "Payment Successful", "Paid", kind="PAYMENT")
        notifier.notify("s1", "New Order", "ORD-1")

        inbox = notifier.inbox("b1")
        assert [(n["id"], n["title"], n["type"], n["is_read"]) for n in inbox] == [
            (1, "Payment Successful", "PAYMENT", False)
        ]

    def test_receipt_written_to_disk(self, tmp_path):
        order = _order()
        payment = Payment(
            id=1, order_id=1, seller_id="s1", reference="PAY-1",
            amount=order.total_amount, processing_fee=order.processing_fee,
            gateway_fee=order.gateway_fee, seller_amount=order.seller_amount,
        )

        url = TextReceiptGenerator(tmp_path / "receipts").generate("RCP-1", order, payment)

        assert url.startswith("file://")
        text = (tmp_path / "receipts" / "RCP-1.txt").read_text(encoding="utf-8")
        assert "ORD-1" in text
        assert "102.90" in text
