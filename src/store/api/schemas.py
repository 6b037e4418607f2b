"""Pydantic request/response schemas for the Store API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Catalogue Schemas ---


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    weight_kg: float | None = None
    stock_quantity: int
    category: str
    image_url: str | None = None
    video_url: str | None = None
    low_stock: bool = False
    created_at: datetime | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class CommentResponse(BaseModel):
    id: str
    user_id: str
    author_name: str | None = None
    comment: str
    created_at: datetime | None = None


class ProductDetailResponse(ProductResponse):
    comments: list[CommentResponse] = []


class AddCommentRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"comment": "Fresh and well packed."}]}}

    comment: str = Field(..., max_length=2000)


class CommentIdResponse(BaseModel):
    comment_id: str


# --- Cart Schemas ---


class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"product_id": "a1b2c3d4-e5f6-7890-abcd-ef1234567890", "quantity": 2}]}
    }

    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CartLineResponse(BaseModel):
    product_id: str
    name: str
    price: float
    weight_kg: float | None = None
    quantity: int
    stock_quantity: int
    line_total: float
    image_url: str | None = None


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    total: float


# --- Checkout Schemas ---


class DeliveryAddressSchema(BaseModel):
    street_address: str = Field(..., max_length=255)
    apartment_suite: str | None = Field(None, max_length=100)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    zip_code: str = Field(..., max_length=20)
    delivery_notes: str | None = Field(None, max_length=500)


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payment_option": "half",
                    "delivery_address": {
                        "street_address": "12 Moi Avenue",
                        "apartment_suite": "Apt 4B",
                        "city": "Nairobi",
                        "state": "Nairobi County",
                        "zip_code": "00100",
                        "delivery_notes": "Leave with the concierge",
                    },
                }
            ]
        }
    }

    payment_option: str = Field(..., pattern="^(half|full)$")
    delivery_address: DeliveryAddressSchema


class CheckoutResponse(BaseModel):
    session_id: str
    url: str | None = None


class VerifyPaymentRequest(BaseModel):
    session_id: str = Field(..., max_length=255)


class VerifyPaymentResponse(BaseModel):
    success: bool = True
    order_id: str
    order_number: str


# --- Order Schemas ---


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price: float
    weight_kg: float | None = None


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    customer_name: str | None = None
    customer_email: str | None = None
    status: str
    payment_status: str
    total_amount: float
    paid_amount: float
    approved: bool
    street_address: str | None = None
    apartment_suite: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    delivery_notes: str | None = None
    items: list[OrderItemResponse] = []
    created_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class OrderSummaryResponse(BaseModel):
    order_id: str
    order_number: str
    status: str
    payment_status: str
    total_amount: float
    paid_amount: float
    item_count: int
    approved: bool
    placed_at: datetime | None = None


class UpdateOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "shipped"}]}}

    status: str = Field(..., max_length=20)


# --- Admin Product Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Kenyan AA Coffee",
                    "description": "Single-origin beans from Nyeri.",
                    "price": 14.99,
                    "weight_kg": 0.5,
                    "stock_quantity": 40,
                    "category": "beverages",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    weight_kg: float = Field(0.0, ge=0)
    stock_quantity: int = Field(0, ge=0)
    category: str = Field(..., max_length=50)
    image_url: str | None = Field(None, max_length=1000)
    video_url: str | None = Field(None, max_length=1000)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    weight_kg: float | None = Field(None, ge=0)
    stock_quantity: int | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=1000)
    video_url: str | None = Field(None, max_length=1000)


class ProductIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "a1b2c3d4-e5f6-7890-abcd-ef1234567890"}]}}

    product_id: str


class ImageUploadResponse(BaseModel):
    image_url: str


# --- Dashboard Schemas ---


class InventoryProductResponse(BaseModel):
    id: str
    name: str
    category: str
    price: float
    weight_kg: float | None = None
    stock_quantity: int
    low_stock: bool


class InventoryStatsResponse(BaseModel):
    total_products: int
    total_value: float
    total_weight: float
    total_stock: int
    low_stock_items: int
    low_stock_threshold: int
    total_orders: int
    products: list[InventoryProductResponse]


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"


class CustomerDashboardResponse(BaseModel):
    profile: dict | None = None
    recent_orders: list[OrderSummaryResponse]
    conversations: list[dict]
