"""Order placement from a session's cart."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Iterator, List

from ..common.errors import EmptyCartError
from ..common.records import CartItemWithProduct, Order
from ..common.schemas import InsertOrder, InsertOrderItem
from ..common.services.logging import log_event
from .storage import IStorage


def snapshot_line(line: CartItemWithProduct) -> InsertOrderItem:
    """Copy the product fields an order keeps, as they are right now."""
    product = line.product
    return InsertOrderItem(
        product_id=line.item.product_id,
        product_name=product.name,
        product_image=product.images[0] if product.images else "",
        quantity=line.item.quantity,
        size=line.item.size,
        color=line.item.color,
        price=product.price,
    )


def cart_subtotal(lines: List[CartItemWithProduct]) -> Decimal:
    return sum((Decimal(line.product.price) * line.item.quantity for line in lines), Decimal("0"))


class CheckoutService:
    """Turns a cart into an order, then takes the ordered lines out of the cart.

    Both steps run while holding the session's lock, so two concurrent
    checkouts for one session cannot both consume the same cart. Only the
    quantities that went into the order leave the cart; anything added
    meanwhile stays there.
    """

    def __init__(self, storage: IStorage) -> None:
        self._storage = storage
        self._guard = threading.Lock()
        # session id -> [lock, number of callers holding or waiting on it]
        self._session_locks: Dict[str, list] = {}

    @contextmanager
    def session_lock(self, session_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._session_locks.setdefault(session_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._session_locks[session_id]

    def place_order(self, session_id: str, order: InsertOrder) -> Order:
        with self.session_lock(session_id):
            lines = self._storage.get_cart_items_with_products(session_id)
            if not lines:
                raise EmptyCartError()

            subtotal = cart_subtotal(lines)
            if subtotal != Decimal(order.total_amount):
                # the total is caller supplied; record the difference and keep it
                log_event(
                    "warning",
                    "order.total_mismatch",
                    session_id=session_id,
                    submitted=order.total_amount,
                    computed=str(subtotal),
                )

            created = self._storage.create_order(order, [snapshot_line(line) for line in lines])
            taken = [line.item for line in lines]
            ordered_ids = {item.id for item in taken}
            # rows whose product is gone never reach the order; drop them too
            taken.extend(
                item
                for item in self._storage.get_cart_items(session_id)
                if item.id not in ordered_ids and self._storage.get_product(item.product_id) is None
            )
            self._storage.consume_cart_items(taken)
            return created
