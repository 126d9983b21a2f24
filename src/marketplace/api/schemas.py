"""Pydantic request/response schemas for the marketplace API."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

# --- User Schemas ---


class RegisterUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Green Valley Market",
                    "email": "orders@greenvalley.example",
                    "role": "retailer",
                }
            ]
        }
    }

    name: str = Field(..., max_length=150)
    email: str = Field(..., max_length=254)
    role: str = Field(..., max_length=20)


class UserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    role: str
    registered_at: datetime | None = None


# --- Product Schemas ---


class ListProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Organic Tomatoes",
                    "crop_type": "Tomatoes",
                    "price": 2.5,
                    "quantity": 120,
                    "soil_type": "Loamy",
                    "pesticides": "None",
                    "harvest_date": "2026-09-28",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    crop_type: str = Field(..., max_length=100)
    price: float | None = None
    quantity: int = 0
    retailer_id: str | None = None
    soil_type: str | None = Field(None, max_length=100)
    pesticides: str | None = Field(None, max_length=255)
    harvest_date: date | None = None
    latitude: float | None = None
    longitude: float | None = None
    image_url: str | None = Field(None, max_length=500)


class UpdateProductDetailsRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    crop_type: str | None = Field(None, max_length=100)
    soil_type: str | None = Field(None, max_length=100)
    pesticides: str | None = Field(None, max_length=255)
    harvest_date: date | None = None
    latitude: float | None = None
    longitude: float | None = None
    image_url: str | None = Field(None, max_length=500)
    status: str | None = Field(None, max_length=20)


class ChangePriceRequest(BaseModel):
    price: float


class ReassignRetailerRequest(BaseModel):
    retailer_id: str


class ProductResponse(BaseModel):
    product_id: str
    name: str
    crop_type: str
    price: float | None = None
    quantity: int
    producer_id: str | None = None
    retailer_id: str | None = None
    status: str
    soil_type: str | None = None
    pesticides: str | None = None
    harvest_date: date | None = None
    latitude: float | None = None
    longitude: float | None = None
    image_url: str | None = None


# --- Order Schemas ---


class CartItemRequest(BaseModel):
    product_id: str
    quantity: int


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "prod-001", "quantity": 2},
                        {"product_id": "prod-003", "quantity": 1},
                    ]
                }
            ]
        }
    }

    items: list[CartItemRequest]


class PackOrderRequest(BaseModel):
    distributor_id: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class OrderItemResponse(BaseModel):
    item_id: str
    product_id: str
    producer_id: str
    retailer_id: str
    quantity: int
    price_at_purchase: float
    line_total: float


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    distributor_id: str | None = None
    status: str
    total_amount: float
    items: list[OrderItemResponse]
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
