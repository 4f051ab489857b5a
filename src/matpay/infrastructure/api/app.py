"""FastAPI application exposing the marketplace payment flows.

Every response uses the same envelope: ``{"success": bool, "data": ...,
"message": str}``.  Domain errors are rendered by a single exception
handler using the status each exception class declares.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

from fastapi import FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from matpay.application.handle_webhook import SIGNATURE_HEADER
from matpay.domain.exceptions import DomainException
from matpay.infrastructure.api.schemas import (
    CancelOrderRequest,
    CartItemRequest,
    CreateOrderRequest,
    MaterialRequest,
    PayoutAccountRequest,
    StatusUpdateRequest,
)
from matpay.infrastructure.bootstrap import Container, build_container
from matpay.infrastructure.config import Settings
from matpay.infrastructure.logging_config import configure_logging

logger = logging.getLogger(__name__)


def envelope(data: Any = None, message: str | None = None, success: bool = True) -> dict:
    body: dict[str, Any] = {"success": success}
    if data is not None:
        if dataclasses.is_dataclass(data):
            data = dataclasses.asdict(data)
        elif isinstance(data, list):
            data = [dataclasses.asdict(d) if dataclasses.is_dataclass(d) else d for d in data]
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body


def create_app(container: Container) -> FastAPI:
    app = FastAPI(
        title="matpay API",
        description="Order payments, webhook reconciliation and seller payouts",
        version="0.1.0",
    )
    app.state.container = container

    @app.exception_handler(DomainException)
    async def domain_error_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.http_status,
            content=envelope(message=str(exc), success=False),
        )

    @app.exception_handler(RequestValidationError)
    async def request_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
        return JSONResponse(status_code=400, content=envelope(message=message, success=False))

    @app.get("/api/health")
    def health() -> dict:
        return envelope(message="ok")

    # --- Catalog and carts ----------------------------------------------------

    @app.post("/api/sellers/{seller_id}/materials", status_code=201)
    def add_material(seller_id: str, body: MaterialRequest) -> dict:
        dto = container.add_material.handle(
            seller_id=seller_id,
            name=body.name,
            price=body.price,
            stock_quantity=body.stock_quantity,
            image_urls=body.image_urls,
        )
        return envelope(dto, "Material added")

    @app.get("/api/sellers/{seller_id}/materials")
    def list_materials(seller_id: str) -> dict:
        return envelope(container.list_materials.handle(seller_id))

    @app.get("/api/carts/{buyer_id}/{seller_id}")
    def show_cart(buyer_id: str, seller_id: str) -> dict:
        return envelope(container.show_cart.handle(buyer_id, seller_id))

    @app.post("/api/carts/{buyer_id}/{seller_id}/items")
    def add_to_cart(buyer_id: str, seller_id: str, body: CartItemRequest) -> dict:
        dto = container.add_to_cart.handle(buyer_id, seller_id, body.material_id, body.quantity)
        return envelope(dto, "Item added to cart")

    @app.delete("/api/carts/{buyer_id}/{seller_id}/items/{material_id}")
    def remove_from_cart(buyer_id: str, seller_id: str, material_id: str) -> dict:
        dto = container.remove_from_cart.handle(buyer_id, seller_id, material_id)
        return envelope(dto, "Item removed from cart")

    # --- Orders ---------------------------------------------------------------

    @app.post("/api/orders", status_code=201)
    def create_order(body: CreateOrderRequest) -> dict:
        dto = container.create_order.handle(
            buyer_id=body.buyer_id,
            buyer_email=body.buyer_email,
            seller_id=body.seller_id,
            delivery_method=body.delivery_method,
            delivery_address=body.delivery_address,
            delivery_notes=body.delivery_notes,
        )
        return envelope(dto, "Order created successfully")

    @app.get("/api/orders/{order_id}")
    def show_order(order_id: int) -> dict:
        return envelope(container.show_order.handle(order_id))

    @app.get("/api/buyers/{buyer_id}/orders")
    def buyer_orders(
        buyer_id: str,
        status: Optional[str] = Query(default=None),
        page: int = Query(default=1),
        limit: int = Query(default=10),
    ) -> dict:
        return envelope(container.list_orders.for_buyer(buyer_id, status, page, limit))

    @app.get("/api/sellers/{seller_id}/orders")
    def seller_orders(
        seller_id: str,
        status: Optional[str] = Query(default=None),
        page: int = Query(default=1),
        limit: int = Query(default=10),
    ) -> dict:
        return envelope(container.list_orders.for_seller(seller_id, status, page, limit))

    @app.patch("/api/orders/{order_id}/status")
    def update_status(order_id: int, body: StatusUpdateRequest) -> dict:
        dto = container.update_order_status.handle(order_id, body.status, body.admin_notes)
        return envelope(dto, "Order status updated successfully")

    @app.post("/api/orders/{order_id}/cancel")
    def cancel_order(order_id: int, body: Optional[CancelOrderRequest] = None) -> dict:
        dto = container.cancel_order.handle(order_id, reason=body.reason if body else None)
        return envelope(dto, "Order cancelled successfully")

    # --- Payments -------------------------------------------------------------

    @app.post("/api/orders/{order_id}/payment")
    def initialize_payment(order_id: int) -> dict:
        dto = container.initialize_payment.handle(order_id)
        return envelope(dto, "Payment initialized")

    @app.get("/api/payments/verify/{reference}")
    def verify_payment(reference: str) -> dict:
        result = container.verify_payment.handle(reference)
        message = "Payment verified successfully" if result.applied else "Payment already processed"
        return envelope(result, message)

    @app.post("/api/payments/{payment_id}/transfer/retry")
    def retry_transfer(payment_id: int) -> dict:
        dto = container.transfers.retry(payment_id)
        return envelope(dto, "Transfer initiated")

    # --- Sellers --------------------------------------------------------------

    @app.put("/api/sellers/{seller_id}/payout-account")
    def configure_payout_account(seller_id: str, body: PayoutAccountRequest) -> dict:
        dto = container.configure_payout_account.handle(
            seller_id=seller_id,
            account_name=body.account_name,
            account_number=body.account_number,
            bank_code=body.bank_code,
            bank_name=body.bank_name,
            momo_provider=body.momo_provider,
            momo_number=body.momo_number,
            preferred_method=body.preferred_method,
        )
        return envelope(dto, "Payment account configured successfully")

    @app.get("/api/sellers/{seller_id}/transfers")
    def transfer_history(seller_id: str) -> dict:
        return envelope(container.transfer_history.handle(seller_id))

    # --- Gateway webhook ------------------------------------------------------

    @app.post("/api/webhooks/paystack")
    async def paystack_webhook(request: Request) -> dict:
        # The signature covers the exact bytes received, so the body is not parsed here.
        raw_body = await request.body()
        result = await run_in_threadpool(
            container.webhook.handle, raw_body, request.headers.get(SIGNATURE_HEADER)
        )
        return envelope(result, "Webhook processed")

    return app


def app_from_env() -> FastAPI:
    """Uvicorn factory: settings from the environment, file-backed storage."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return create_app(build_container(settings))
