"""Storefront records returned by the storage layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Product:
    """A catalog entry. ``rating`` and ``review_count`` are derived from reviews."""

    id: str
    name: str
    description: str
    category: str
    price: str
    images: List[str]
    sizes: List[str]
    colors: List[str]
    fabric: str
    original_price: Optional[str] = None
    in_stock: bool = True
    featured: bool = False
    new_arrival: bool = False
    rating: Optional[str] = "0"
    review_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "originalPrice": self.original_price,
            "images": list(self.images),
            "sizes": list(self.sizes),
            "colors": list(self.colors),
            "fabric": self.fabric,
            "inStock": self.in_stock,
            "featured": self.featured,
            "newArrival": self.new_arrival,
            "rating": self.rating,
            "reviewCount": self.review_count,
        }


@dataclass
class Review:
    id: str
    product_id: str
    customer_name: str
    rating: int
    comment: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "productId": self.product_id,
            "customerName": self.customer_name,
            "rating": self.rating,
            "comment": self.comment,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class CartItem:
    id: str
    session_id: str
    product_id: str
    quantity: int
    size: str
    color: str

    @property
    def merge_key(self) -> tuple:
        return (self.session_id, self.product_id, self.size, self.color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
        }


@dataclass
class CartItemWithProduct:
    """A cart row joined with the product it points at (computed, never stored)."""

    item: CartItem
    product: Product

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        data["product"] = self.product.to_dict()
        return data


@dataclass
class Order:
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    city: str
    state: str
    zip_code: str
    total_amount: str
    status: str
    tracking_number: Optional[str]
    created_at: datetime
    payment_intent_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "shippingAddress": self.shipping_address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "totalAmount": self.total_amount,
            "status": self.status,
            "trackingNumber": self.tracking_number,
            "paymentIntentId": self.payment_intent_id,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class OrderItem:
    """Line of an order; a frozen copy of the product as it was at checkout."""

    id: str
    order_id: str
    product_id: str
    product_name: str
    product_image: str
    quantity: int
    size: str
    color: str
    price: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "orderId": self.order_id,
            "productId": self.product_id,
            "productName": self.product_name,
            "productImage": self.product_image,
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
            "price": self.price,
        }


@dataclass
class OrderWithItems:
    order: Order
    items: List[OrderItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self.order.to_dict()
        data["items"] = [it.to_dict() for it in self.items]
        return data
