"""Domain service: Stock Adjuster.

Applies and reverses the stock deltas of an order.  It is the only code
that changes material stock, and it is driven exclusively by order
transitions: PENDING -> CONFIRMED commits, CONFIRMED -> CANCELLED
releases.

Each line item remembers how many units were committed for it, which
makes both operations idempotent: committing skips lines that already
hold stock, releasing returns exactly what was committed and resets it.
"""

from __future__ import annotations

import logging
from typing import Callable

from matpay.domain.model.order import Order
from matpay.domain.repository.material_repository import MaterialRepository

logger = logging.getLogger(__name__)


class StockAdjuster:

    def __init__(self, material_repo: MaterialRepository) -> None:
        self._material_repo = material_repo

    def commit_for_order(
        self,
        order: Order,
        checkpoint: Callable[[Order], None] | None = None,
    ) -> dict[str, int]:
        """Withdraw stock for every line item of a freshly confirmed order.

        ``checkpoint`` is called after each withdrawal so the caller can
        persist ``stock_committed`` before the next line is touched; a
        failure part-way leaves every withdrawn line recorded.

        Returns a mapping of material id -> units that could not be
        withdrawn (oversold).  The charge has already been taken at this
        point, so a shortfall is reported for follow-up rather than raised.
        """
        shortfalls: dict[str, int] = {}
        for line in order.items:
            if line.stock_committed:
                continue
            wanted = line.quantity.value
            if self._material_repo.get_by_id(line.material_id) is None:
                logger.warning(
                    "Order %s references missing material %s; no stock withdrawn",
                    order.order_number, line.material_id,
                )
                shortfalls[line.material_id] = wanted
                continue
            taken = self._material_repo.withdraw_stock(line.material_id, wanted)
            line.stock_committed = taken
            if checkpoint is not None:
                checkpoint(order)
            if taken < wanted:
                shortfalls[line.material_id] = wanted - taken

        if shortfalls:
            logger.warning(
                "Order %s oversold, missing units per material: %s",
                order.order_number, shortfalls,
            )
        return shortfalls

    def release_for_order(self, order: Order) -> None:
        """Return every committed unit of the order to stock."""
        for line in order.items:
            qty = line.stock_committed
            if qty <= 0:
                continue
            if self._material_repo.get_by_id(line.material_id) is None:
                logger.warning(
                    "Cannot restock %d units of missing material %s for order %s",
                    qty, line.material_id, order.order_number,
                )
            else:
                self._material_repo.restock(line.material_id, qty)
            line.stock_committed = 0
