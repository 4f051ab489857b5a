"""File-backed receipt rendering.

Receipts are plain-text documents written under ``<data>/receipts``;
the returned url is a ``file://`` URI to that document.
"""

from __future__ import annotations

from pathlib import Path

from matpay.application.ports import ReceiptGenerator
from matpay.domain.model.order import Order
from matpay.domain.model.payment import Payment


class TextReceiptGenerator(ReceiptGenerator):

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def generate(self, receipt_number: str, order: Order, payment: Payment) -> str:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / f"{receipt_number}.txt"
        path.write_text(self._render(receipt_number, order, payment), encoding="utf-8")
        return path.resolve().as_uri()

    @staticmethod
    def _render(receipt_number: str, order: Order, payment: Payment) -> str:
        width = 52
        lines = [
            "RECEIPT".center(width),
            "=" * width,
            f"Receipt:   {receipt_number}",
            f"Order:     {order.order_number}",
            f"Payment:   {payment.reference}",
            f"Paid at:   {payment.paid_at.isoformat() if payment.paid_at else '-'}",
            f"Buyer:     {order.buyer_email}",
            "-" * width,
            f"{'Item':<26} {'Qty':>4} {'Price':>9} {'Total':>10}",
        ]
        for item in order.items:
            lines.append(
                f"{item.material_name[:26]:<26} {item.quantity.value:>4} "
                f"{item.unit_price.amount:>9.2f} {item.line_total.amount:>10.2f}"
            )
        lines += [
            "-" * width,
            f"{'Subtotal':<40} {order.subtotal.amount:>11.2f}",
            f"{'Processing fee':<40} {order.processing_fee.amount:>11.2f}",
            f"{'Total (' + order.total_amount.currency + ')':<40} {order.total_amount.amount:>11.2f}",
            "",
        ]
        return "\n".join(lines)
