"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from matpay.domain.model.order import DeliveryMethod, Order, OrderLineItem, OrderStatus
from matpay.domain.model.value_objects import Money, Quantity
from matpay.domain.repository.order_repository import OrderRepository
from matpay.infrastructure.persistence.json_store import JsonFile, dump_dt, load_dt


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._file.load()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._file.load():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_by_buyer(self, buyer_id: str, status: OrderStatus | None = None) -> list[Order]:
        return self._select("buyer_id", buyer_id, status)

    def list_by_seller(self, seller_id: str, status: OrderStatus | None = None) -> list[Order]:
        return self._select("seller_id", seller_id, status)

    def save(self, order: Order) -> None:
        with self._file.lock:
            if order.id is None:
                order.id = self.next_id()
            self._file.upsert(self._to_raw(order), key="id")

    def delete(self, order_id: int) -> None:
        with self._file.lock:
            orders = [o for o in self._file.load() if o["id"] != order_id]
            self._file.persist(orders)

    def _select(self, field: str, value: str, status: OrderStatus | None) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw[field] == value and (status is None or raw["status"] == status.value)
        ]
        return sorted(orders, key=lambda o: (o.created_at, o.id or 0), reverse=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "buyer_id": order.buyer_id,
            "buyer_email": order.buyer_email,
            "seller_id": order.seller_id,
            "status": order.status.value,
            "currency": order.total_amount.currency,
            "subtotal": str(order.subtotal.amount),
            "processing_fee": str(order.processing_fee.amount),
            "gateway_fee": str(order.gateway_fee.amount),
            "total_amount": str(order.total_amount.amount),
            "seller_amount": str(order.seller_amount.amount),
            "delivery_method": order.delivery_method.value,
            "delivery_address": order.delivery_address,
            "delivery_notes": order.delivery_notes,
            "admin_notes": order.admin_notes,
            "created_at": order.created_at.isoformat(),
            "confirmed_at": dump_dt(order.confirmed_at),
            "prepared_at": dump_dt(order.prepared_at),
            "delivered_at": dump_dt(order.delivered_at),
            "cancelled_at": dump_dt(order.cancelled_at),
            "items": [
                {
                    "material_id": item.material_id,
                    "material_name": item.material_name,
                    "material_image": item.material_image,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "stock_committed": item.stock_committed,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw["currency"]

        def money(key: str) -> Money:
            return Money(Decimal(raw[key]), currency)

        items = [
            OrderLineItem(
                material_id=i["material_id"],
                material_name=i["material_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), currency),
                material_image=i.get("material_image"),
                stock_committed=i.get("stock_committed", 0),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            buyer_id=raw["buyer_id"],
            buyer_email=raw["buyer_email"],
            seller_id=raw["seller_id"],
            items=items,
            subtotal=money("subtotal"),
            processing_fee=money("processing_fee"),
            gateway_fee=money("gateway_fee"),
            total_amount=money("total_amount"),
            seller_amount=money("seller_amount"),
            delivery_method=DeliveryMethod(raw["delivery_method"]),
            delivery_address=raw.get("delivery_address"),
            delivery_notes=raw.get("delivery_notes"),
            status=OrderStatus(raw["status"]),
            admin_notes=raw.get("admin_notes"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            confirmed_at=load_dt(raw.get("confirmed_at")),
            prepared_at=load_dt(raw.get("prepared_at")),
            delivered_at=load_dt(raw.get("delivered_at")),
            cancelled_at=load_dt(raw.get("cancelled_at")),
        )
