"""Conversions from ORM rows to storefront records."""

from datetime import datetime, timezone
from typing import Any, Optional

from .. import records


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_product(row: Any) -> records.Product:
    return records.Product(
        id=row.id,
        name=row.name,
        description=row.description,
        category=row.category,
        price=row.price,
        original_price=row.original_price,
        images=list(row.images or []),
        sizes=list(row.sizes or []),
        colors=list(row.colors or []),
        fabric=row.fabric,
        in_stock=bool(row.in_stock),
        featured=bool(row.featured),
        new_arrival=bool(row.new_arrival),
        rating=row.rating,
        review_count=row.review_count or 0,
    )


def to_review(row: Any) -> records.Review:
    return records.Review(
        id=row.id,
        product_id=row.product_id,
        customer_name=row.customer_name,
        rating=row.rating,
        comment=row.comment or "",
        created_at=_aware(row.created_at),
    )


def to_cart_item(row: Any) -> records.CartItem:
    return records.CartItem(
        id=row.id,
        session_id=row.session_id,
        product_id=row.product_id,
        quantity=row.quantity,
        size=row.size,
        color=row.color,
    )


def to_order(row: Any) -> records.Order:
    return records.Order(
        id=row.id,
        customer_name=row.customer_name,
        customer_email=row.customer_email,
        customer_phone=row.customer_phone,
        shipping_address=row.shipping_address,
        city=row.city,
        state=row.state,
        zip_code=row.zip_code,
        total_amount=row.total_amount,
        status=row.status,
        tracking_number=row.tracking_number,
        payment_intent_id=row.payment_intent_id,
        created_at=_aware(row.created_at),
    )


def to_order_item(row: Any) -> records.OrderItem:
    return records.OrderItem(
        id=row.id,
        order_id=row.order_id,
        product_id=row.product_id,
        product_name=row.product_name,
        product_image=row.product_image,
        quantity=row.quantity,
        size=row.size,
        color=row.color,
        price=row.price,
    )
