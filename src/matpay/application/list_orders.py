"""Application service: List Orders use case (query).

Paginated order listings for a buyer or a seller, newest first.
"""

from __future__ import annotations

import math

from matpay.application.dto import OrderPageDTO, order_to_dto
from matpay.domain.exceptions import ValidationError
from matpay.domain.model.order import Order, OrderStatus
from matpay.domain.repository.order_repository import OrderRepository

MAX_PAGE_SIZE = 100


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def for_buyer(
        self, buyer_id: str, status: str | None = None, page: int = 1, limit: int = 10
    ) -> OrderPageDTO:
        orders = self._order_repo.list_by_buyer(buyer_id, self._status(status))
        return self._paginate(orders, page, limit)

    def for_seller(
        self, seller_id: str, status: str | None = None, page: int = 1, limit: int = 10
    ) -> OrderPageDTO:
        orders = self._order_repo.list_by_seller(seller_id, self._status(status))
        return self._paginate(orders, page, limit)

    @staticmethod
    def _status(value: str | None) -> OrderStatus | None:
        return OrderStatus.parse(value) if value else None

    @staticmethod
    def _paginate(orders: list[Order], page: int, limit: int) -> OrderPageDTO:
        if page < 1:
            raise ValidationError("Page must be at least 1")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        start = (page - 1) * limit
        return OrderPageDTO(
            orders=[order_to_dto(o) for o in orders[start:start + limit]],
            page=page,
            limit=limit,
            total=len(orders),
            pages=math.ceil(len(orders) / limit),
        )
