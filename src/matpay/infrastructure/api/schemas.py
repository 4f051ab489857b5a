"""Request bodies for the HTTP API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CartItemRequest(BaseModel):
    material_id: str
    quantity: int = Field(default=1, ge=1)


class CreateOrderRequest(BaseModel):
    buyer_id: str
    buyer_email: str
    seller_id: str
    delivery_method: str = "SCHOOL_PICKUP"
    delivery_address: Optional[str] = None
    delivery_notes: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: str
    admin_notes: Optional[str] = None


class CancelOrderRequest(BaseModel):
    reason: Optional[str] = None


class PayoutAccountRequest(BaseModel):
    account_name: str
    account_number: str
    bank_code: str
    bank_name: Optional[str] = None
    momo_provider: Optional[str] = None
    momo_number: Optional[str] = None
    preferred_method: str = "BANK_ACCOUNT"


class MaterialRequest(BaseModel):
    name: str
    price: str = Field(..., description="Unit price as a decimal string, e.g. '12.50'")
    stock_quantity: int = Field(default=0, ge=0)
    image_urls: list[str] = Field(default_factory=list)
