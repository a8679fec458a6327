"""Storefront storage: the ``IStorage`` contract and its in-memory implementation."""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from ..common.errors import InvalidTransitionError
from ..common.records import (
    CartItem,
    CartItemWithProduct,
    Order,
    OrderItem,
    OrderWithItems,
    Product,
    Review,
)
from ..common.schemas import (
    ORDER_STATUSES,
    InsertCartItem,
    InsertOrder,
    InsertOrderItem,
    InsertProduct,
    InsertReview,
)
from ..common.services.logging import log_event
from ..common.utils.catalog_filters import ProductFilters, apply_filters
from ..common.utils.ratings import recompute_rating
from ..common.utils.tracking import generate_tracking_number

EDITABLE_PRODUCT_FIELDS = {
    "name",
    "description",
    "category",
    "price",
    "original_price",
    "images",
    "sizes",
    "colors",
    "fabric",
    "in_stock",
    "featured",
    "new_arrival",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_transition(current: str, new: str) -> None:
    """Order status only moves forward along ``ORDER_STATUSES``."""
    if new not in ORDER_STATUSES:
        raise InvalidTransitionError(f"Unknown order status: {new}")
    if current in ORDER_STATUSES and ORDER_STATUSES.index(new) < ORDER_STATUSES.index(current):
        raise InvalidTransitionError(f"Cannot move order from {current} to {new}")


class IStorage(ABC):
    """Catalog, review, cart and order stores behind one object.

    Lookups signal "not found" with ``None`` (or ``False`` for deletes) and
    never raise for it; the request layer decides the HTTP status.
    """

    # Products
    @abstractmethod
    def get_products(self, filters: Optional[ProductFilters] = None) -> List[Product]: ...

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Product]: ...

    @abstractmethod
    def get_featured_products(self) -> List[Product]: ...

    @abstractmethod
    def create_product(self, data: InsertProduct) -> Product: ...

    @abstractmethod
    def update_product(self, product_id: str, changes: Dict) -> Optional[Product]: ...

    # Reviews
    @abstractmethod
    def get_reviews_by_product(self, product_id: str) -> List[Review]: ...

    @abstractmethod
    def create_review(self, data: InsertReview) -> Review: ...

    # Cart
    @abstractmethod
    def get_cart_items(self, session_id: str) -> List[CartItem]: ...

    @abstractmethod
    def get_cart_items_with_products(self, session_id: str) -> List[CartItemWithProduct]: ...

    @abstractmethod
    def add_to_cart(self, item: InsertCartItem) -> CartItem: ...

    @abstractmethod
    def update_cart_item(self, item_id: str, quantity: int) -> Optional[CartItem]: ...

    @abstractmethod
    def remove_from_cart(self, item_id: str) -> bool: ...

    @abstractmethod
    def clear_cart(self, session_id: str) -> int: ...

    @abstractmethod
    def consume_cart_items(self, items: Sequence[CartItem]) -> int:
        """Take the given rows' quantities out of the cart; rows left at zero are deleted.

        Rows added or topped up after ``items`` were read keep what was added.
        Returns the number of rows deleted.
        """

    # Orders
    @abstractmethod
    def create_order(self, order: InsertOrder, items: Sequence[InsertOrderItem]) -> Order: ...

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[OrderWithItems]: ...

    @abstractmethod
    def update_order_status(self, order_id: str, status: str) -> Optional[Order]: ...

    @abstractmethod
    def list_orders(self, *, limit: int = 20, offset: int = 0) -> List[Order]: ...

    @abstractmethod
    def count_orders(self) -> int: ...


class MemStorage(IStorage):
    """Dict-backed storage.

    Every map is guarded by one re-entrant lock so that Flask's threaded
    server cannot interleave two cart merges or two order writes. Records are
    handed out as copies; mutating them does not touch the store.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._products: Dict[str, Product] = {}
        self._reviews: Dict[str, Review] = {}
        self._reviews_by_product: Dict[str, List[str]] = defaultdict(list)
        self._cart_items: Dict[str, CartItem] = {}
        self._cart_by_session: Dict[str, List[str]] = defaultdict(list)
        self._cart_by_line: Dict[Tuple[str, str, str, str], str] = {}
        self._orders: Dict[str, Order] = {}
        self._order_items: Dict[str, OrderItem] = {}
        self._items_by_order: Dict[str, List[str]] = defaultdict(list)

    @staticmethod
    def _copy(record):
        return copy.deepcopy(record)

    # --- products -------------------------------------------------------

    def get_products(self, filters: Optional[ProductFilters] = None) -> List[Product]:
        with self._lock:
            products = [self._copy(p) for p in self._products.values()]
        return apply_filters(products, filters)

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
            return self._copy(product) if product else None

    def get_featured_products(self) -> List[Product]:
        with self._lock:
            return [self._copy(p) for p in self._products.values() if p.featured]

    def create_product(self, data: InsertProduct) -> Product:
        product = Product(
            id=str(uuid4()),
            name=data.name,
            description=data.description,
            category=data.category,
            price=data.price,
            original_price=data.original_price,
            images=list(data.images),
            sizes=list(data.sizes),
            colors=list(data.colors),
            fabric=data.fabric,
            in_stock=data.in_stock,
            featured=data.featured,
            new_arrival=data.new_arrival,
            rating="0",
            review_count=0,
        )
        with self._lock:
            self._products[product.id] = product
        log_event("info", "product.created", product_id=product.id, category=product.category)
        return self._copy(product)

    def update_product(self, product_id: str, changes: Dict) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                return None
            for key, value in changes.items():
                if key in EDITABLE_PRODUCT_FIELDS:
                    setattr(product, key, list(value) if isinstance(value, list) else value)
            return self._copy(product)

    # --- reviews --------------------------------------------------------

    def get_reviews_by_product(self, product_id: str) -> List[Review]:
        with self._lock:
            ids = list(reversed(self._reviews_by_product.get(product_id, [])))
            reviews = [self._copy(self._reviews[i]) for i in ids]
        # newest first; equal timestamps keep the later insert first
        reviews.sort(key=lambda r: r.created_at, reverse=True)
        return reviews

    def create_review(self, data: InsertReview) -> Review:
        review = Review(
            id=str(uuid4()),
            product_id=data.product_id,
            customer_name=data.customer_name,
            rating=data.rating,
            comment=data.comment,
            created_at=self._clock(),
        )
        with self._lock:
            self._reviews[review.id] = review
            self._reviews_by_product[review.product_id].append(review.id)
            product = self._products.get(review.product_id)
            if product is not None:
                ratings = [self._reviews[i].rating for i in self._reviews_by_product[review.product_id]]
                product.rating, product.review_count = recompute_rating(ratings)
        log_event(
            "info",
            "review.created",
            review_id=review.id,
            product_id=review.product_id,
            recomputed=product is not None,
        )
        return self._copy(review)

    # --- cart -----------------------------------------------------------

    def get_cart_items(self, session_id: str) -> List[CartItem]:
        with self._lock:
            return [self._copy(self._cart_items[i]) for i in self._cart_by_session.get(session_id, [])]

    def get_cart_items_with_products(self, session_id: str) -> List[CartItemWithProduct]:
        joined: List[CartItemWithProduct] = []
        with self._lock:
            for item_id in self._cart_by_session.get(session_id, []):
                item = self._cart_items[item_id]
                product = self._products.get(item.product_id)
                if product is None:
                    log_event("warning", "cart.dangling_product", item_id=item.id, product_id=item.product_id)
                    continue
                joined.append(CartItemWithProduct(item=self._copy(item), product=self._copy(product)))
        return joined

    def add_to_cart(self, item: InsertCartItem) -> CartItem:
        line = (item.session_id, item.product_id, item.size, item.color)
        with self._lock:
            existing_id = self._cart_by_line.get(line)
            if existing_id is not None:
                existing = self._cart_items[existing_id]
                existing.quantity += item.quantity
                log_event("info", "cart.item_merged", item_id=existing.id, quantity=existing.quantity)
                return self._copy(existing)
            row = CartItem(
                id=str(uuid4()),
                session_id=item.session_id,
                product_id=item.product_id,
                quantity=item.quantity,
                size=item.size,
                color=item.color,
            )
            self._cart_items[row.id] = row
            self._cart_by_session[row.session_id].append(row.id)
            self._cart_by_line[line] = row.id
        log_event("info", "cart.item_added", item_id=row.id, product_id=row.product_id, quantity=row.quantity)
        return self._copy(row)

    def update_cart_item(self, item_id: str, quantity: int) -> Optional[CartItem]:
        with self._lock:
            row = self._cart_items.get(item_id)
            if row is None:
                return None
            row.quantity = quantity
            return self._copy(row)

    def remove_from_cart(self, item_id: str) -> bool:
        with self._lock:
            row = self._cart_items.pop(item_id, None)
            if row is None:
                return False
            self._cart_by_session[row.session_id].remove(row.id)
            if not self._cart_by_session[row.session_id]:
                del self._cart_by_session[row.session_id]
            self._cart_by_line.pop(row.merge_key, None)
            return True

    def clear_cart(self, session_id: str) -> int:
        with self._lock:
            ids = self._cart_by_session.pop(session_id, [])
            for item_id in ids:
                row = self._cart_items.pop(item_id)
                self._cart_by_line.pop(row.merge_key, None)
        log_event("info", "cart.cleared", session_id=session_id, items=len(ids))
        return len(ids)

    def consume_cart_items(self, items: Sequence[CartItem]) -> int:
        removed = 0
        with self._lock:
            for taken in items:
                row = self._cart_items.get(taken.id)
                if row is None:
                    continue
                if row.quantity > taken.quantity:
                    row.quantity -= taken.quantity
                    continue
                self.remove_from_cart(row.id)
                removed += 1
        log_event("info", "cart.consumed", items=len(items), removed=removed)
        return removed

    # --- orders ---------------------------------------------------------

    def create_order(self, order: InsertOrder, items: Sequence[InsertOrderItem]) -> Order:
        header = Order(
            id=str(uuid4()),
            customer_name=order.customer_name,
            customer_email=str(order.customer_email),
            customer_phone=order.customer_phone,
            shipping_address=order.shipping_address,
            city=order.city,
            state=order.state,
            zip_code=order.zip_code,
            total_amount=order.total_amount,
            status=order.status,
            tracking_number=generate_tracking_number(),
            payment_intent_id=order.payment_intent_id,
            created_at=self._clock(),
        )
        # every line is built before anything is stored: no partial orders
        lines = [
            OrderItem(
                id=str(uuid4()),
                order_id=header.id,
                product_id=it.product_id,
                product_name=it.product_name,
                product_image=it.product_image,
                quantity=it.quantity,
                size=it.size,
                color=it.color,
                price=it.price,
            )
            for it in items
        ]
        with self._lock:
            self._orders[header.id] = header
            for line in lines:
                self._order_items[line.id] = line
                self._items_by_order[header.id].append(line.id)
        log_event("info", "order.created", order_id=header.id, items=len(lines), total=header.total_amount)
        return self._copy(header)

    def get_order(self, order_id: str) -> Optional[OrderWithItems]:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            items = [self._copy(self._order_items[i]) for i in self._items_by_order.get(order_id, [])]
            return OrderWithItems(order=self._copy(order), items=items)

    def update_order_status(self, order_id: str, status: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            ensure_transition(order.status, status)
            previous, order.status = order.status, status
            result = self._copy(order)
        if previous != status:
            log_event("info", "order.status_changed", order_id=order_id, previous=previous, status=status)
        return result

    def list_orders(self, *, limit: int = 20, offset: int = 0) -> List[Order]:
        with self._lock:
            newest_first = list(reversed(list(self._orders.values())))
        return [self._copy(o) for o in newest_first[offset : offset + limit]]

    def count_orders(self) -> int:
        with self._lock:
            return len(self._orders)
