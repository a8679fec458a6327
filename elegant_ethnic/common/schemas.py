"""Request payload schemas.

Each model mirrors the insert shape of one record (everything except the
server generated fields). Payloads arrive in camelCase; the models accept
both camelCase and snake_case names.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from .utils.catalog_filters import CATEGORY_NAMES

OrderStatus = Literal["pending", "confirmed", "shipped", "out_for_delivery", "delivered"]
ORDER_STATUSES = get_args(OrderStatus)


def _decimal_string(value, field_name: str) -> str:
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a decimal string")
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a decimal string")
    text = value.strip()
    try:
        number = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"{field_name} must be a decimal string") from exc
    if not number.is_finite() or number < 0:
        raise ValueError(f"{field_name} must be a non-negative number")
    return text


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class InsertProduct(_Payload):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str
    price: str
    original_price: Optional[str] = None
    images: List[str] = Field(..., min_length=1, description="Image URLs, first one is the cover")
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    fabric: str = Field(..., min_length=1)
    in_stock: bool = True
    featured: bool = False
    new_arrival: bool = False

    @field_validator("category")
    @classmethod
    def _known_category(cls, v: str) -> str:
        if v not in CATEGORY_NAMES.values():
            raise ValueError(f"unknown category: {v}")
        return v

    @field_validator("price", "original_price", mode="before")
    @classmethod
    def _prices(cls, v, info):
        if v is None and info.field_name == "original_price":
            return None
        return _decimal_string(v, info.field_name)


class ProductUpdate(_Payload):
    """Editable product fields. Derived fields (rating, reviewCount) are not accepted."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[str] = None
    original_price: Optional[str] = None
    images: Optional[List[str]] = Field(None, min_length=1)
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    fabric: Optional[str] = None
    in_stock: Optional[bool] = None
    featured: Optional[bool] = None
    new_arrival: Optional[bool] = None

    @field_validator("category")
    @classmethod
    def _known_category(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in CATEGORY_NAMES.values():
            raise ValueError(f"unknown category: {v}")
        return v

    @field_validator("price", "original_price", mode="before")
    @classmethod
    def _prices(cls, v, info):
        if v is None:
            return None
        return _decimal_string(v, info.field_name)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class InsertReview(_Payload):
    product_id: str = Field(..., min_length=1)
    customer_name: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


class InsertCartItem(_Payload):
    session_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    size: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)


class CartQuantityUpdate(_Payload):
    quantity: int = Field(..., ge=1)


class InsertOrder(_Payload):
    customer_name: str = Field(..., min_length=1)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=1)
    shipping_address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    total_amount: str
    status: OrderStatus = "pending"
    payment_intent_id: Optional[str] = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def _total(cls, v):
        return _decimal_string(v, "totalAmount")


class InsertOrderItem(_Payload):
    product_id: str
    product_name: str
    product_image: str
    quantity: int = Field(..., ge=1)
    size: str
    color: str
    price: str

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v):
        return _decimal_string(v, "price")


class OrderStatusUpdate(_Payload):
    status: OrderStatus


class AdminLogin(_Payload):
    password: str = ""
