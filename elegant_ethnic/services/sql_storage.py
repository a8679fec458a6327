"""SQLAlchemy-backed implementation of ``IStorage``."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from sqlalchemy import and_, func

from ..common import models
from ..common.db.session import DEFAULT_DATABASE_URL, create_db_engine, create_session_factory
from ..common.records import CartItem, CartItemWithProduct, Order, OrderWithItems, Product, Review
from ..common.schemas import InsertCartItem, InsertOrder, InsertOrderItem, InsertProduct, InsertReview
from ..common.services.logging import log_event
from ..common.utils import dto
from ..common.utils.catalog_filters import ProductFilters, matches, resolve_category, sort_products
from ..common.utils.ratings import recompute_rating
from ..common.utils.tracking import generate_tracking_number
from .storage import EDITABLE_PRODUCT_FIELDS, IStorage, ensure_transition, utcnow


def _naive_utc(value: datetime) -> datetime:
    # SQLite DateTime columns drop tzinfo; values are always UTC
    return value.replace(tzinfo=None) if value.tzinfo else value


class SqlStorage(IStorage):
    """Storage over any SQLAlchemy database URL (in-memory SQLite by default).

    Writes are serialised by a process lock; the order header and its items
    are written in a single transaction.
    """

    def __init__(
        self,
        database_url: str = DEFAULT_DATABASE_URL,
        *,
        session_factory=None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory or create_session_factory(create_db_engine(database_url))
        self._clock = clock
        self._lock = threading.RLock()

    @staticmethod
    def _next_position(session, model) -> int:
        return (session.query(func.max(model.position)).scalar() or 0) + 1

    # --- products -------------------------------------------------------

    def get_products(self, filters: Optional[ProductFilters] = None) -> List[Product]:
        filters = filters or ProductFilters()
        with self._session_factory() as session:
            q = session.query(models.Product)
            if filters.category:
                q = q.filter(models.Product.category == resolve_category(filters.category))
            if filters.fabrics:
                q = q.filter(models.Product.fabric.in_(filters.fabrics))
            rows = q.order_by(models.Product.position.asc()).all()
            products = [dto.to_product(r) for r in rows]
        # search (Unicode case folding), price, sizes and colors are matched in Python
        selected = [p for p in products if matches(p, filters)]
        return sort_products(selected, filters.sort_by)

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._session_factory() as session:
            row = session.query(models.Product).filter(models.Product.id == product_id).first()
            return dto.to_product(row) if row else None

    def get_featured_products(self) -> List[Product]:
        with self._session_factory() as session:
            rows = (
                session.query(models.Product)
                .filter(models.Product.featured.is_(True))
                .order_by(models.Product.position.asc())
                .all()
            )
            return [dto.to_product(r) for r in rows]

    def create_product(self, data: InsertProduct) -> Product:
        with self._lock, self._session_factory() as session:
            row = models.Product(
                id=str(uuid4()),
                position=self._next_position(session, models.Product),
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
            session.add(row)
            session.flush()
            product = dto.to_product(row)
        log_event("info", "product.created", product_id=product.id, category=product.category)
        return product

    def update_product(self, product_id: str, changes: Dict) -> Optional[Product]:
        with self._lock, self._session_factory() as session:
            row = session.query(models.Product).filter(models.Product.id == product_id).first()
            if row is None:
                return None
            for key, value in changes.items():
                if key in EDITABLE_PRODUCT_FIELDS:
                    setattr(row, key, list(value) if isinstance(value, list) else value)
            session.flush()
            return dto.to_product(row)

    # --- reviews --------------------------------------------------------

    def get_reviews_by_product(self, product_id: str) -> List[Review]:
        with self._session_factory() as session:
            rows = (
                session.query(models.Review)
                .filter(models.Review.product_id == product_id)
                .order_by(models.Review.created_at.desc(), models.Review.position.desc())
                .all()
            )
            return [dto.to_review(r) for r in rows]

    def create_review(self, data: InsertReview) -> Review:
        with self._lock, self._session_factory() as session:
            row = models.Review(
                id=str(uuid4()),
                position=self._next_position(session, models.Review),
                product_id=data.product_id,
                customer_name=data.customer_name,
                rating=data.rating,
                comment=data.comment,
                created_at=_naive_utc(self._clock()),
            )
            session.add(row)
            session.flush()
            product = session.query(models.Product).filter(models.Product.id == data.product_id).first()
            if product is not None:
                ratings = [
                    r for (r,) in session.query(models.Review.rating).filter(models.Review.product_id == data.product_id)
                ]
                product.rating, product.review_count = recompute_rating(ratings)
            review = dto.to_review(row)
        log_event(
            "info",
            "review.created",
            review_id=review.id,
            product_id=review.product_id,
            recomputed=product is not None,
        )
        return review

    # --- cart -----------------------------------------------------------

    def _cart_query(self, session, session_id: str):
        return (
            session.query(models.CartItem)
            .filter(models.CartItem.session_id == session_id)
            .order_by(models.CartItem.position.asc())
        )

    def get_cart_items(self, session_id: str) -> List[CartItem]:
        with self._session_factory() as session:
            return [dto.to_cart_item(r) for r in self._cart_query(session, session_id).all()]

    def get_cart_items_with_products(self, session_id: str) -> List[CartItemWithProduct]:
        joined: List[CartItemWithProduct] = []
        with self._session_factory() as session:
            rows = (
                self._cart_query(session, session_id)
                .outerjoin(models.Product, models.Product.id == models.CartItem.product_id)
                .add_entity(models.Product)
                .all()
            )
            for item, product in rows:
                if product is None:
                    log_event("warning", "cart.dangling_product", item_id=item.id, product_id=item.product_id)
                    continue
                joined.append(CartItemWithProduct(item=dto.to_cart_item(item), product=dto.to_product(product)))
        return joined

    def add_to_cart(self, item: InsertCartItem) -> CartItem:
        with self._lock, self._session_factory() as session:
            # Try merge with existing same product + size + color for this session
            existing = (
                session.query(models.CartItem)
                .filter(
                    and_(
                        models.CartItem.session_id == item.session_id,
                        models.CartItem.product_id == item.product_id,
                        models.CartItem.size == item.size,
                        models.CartItem.color == item.color,
                    )
                )
                .first()
            )
            if existing:
                existing.quantity = existing.quantity + item.quantity
                session.flush()
                log_event("info", "cart.item_merged", item_id=existing.id, quantity=existing.quantity)
                return dto.to_cart_item(existing)
            row = models.CartItem(
                id=str(uuid4()),
                position=self._next_position(session, models.CartItem),
                session_id=item.session_id,
                product_id=item.product_id,
                quantity=item.quantity,
                size=item.size,
                color=item.color,
            )
            session.add(row)
            session.flush()
            added = dto.to_cart_item(row)
        log_event("info", "cart.item_added", item_id=added.id, product_id=added.product_id, quantity=added.quantity)
        return added

    def update_cart_item(self, item_id: str, quantity: int) -> Optional[CartItem]:
        with self._lock, self._session_factory() as session:
            row = session.query(models.CartItem).filter(models.CartItem.id == item_id).first()
            if row is None:
                return None
            row.quantity = quantity
            session.flush()
            return dto.to_cart_item(row)

    def remove_from_cart(self, item_id: str) -> bool:
        with self._lock, self._session_factory() as session:
            row = session.query(models.CartItem).filter(models.CartItem.id == item_id).first()
            if row is None:
                return False
            session.delete(row)
            session.flush()
            return True

    def clear_cart(self, session_id: str) -> int:
        with self._lock, self._session_factory() as session:
            removed = (
                session.query(models.CartItem)
                .filter(models.CartItem.session_id == session_id)
                .delete(synchronize_session=False)
            )
        log_event("info", "cart.cleared", session_id=session_id, items=removed)
        return removed

    def consume_cart_items(self, items: Sequence[CartItem]) -> int:
        removed = 0
        with self._lock, self._session_factory() as session:
            for taken in items:
                row = session.query(models.CartItem).filter(models.CartItem.id == taken.id).first()
                if row is None:
                    continue
                if row.quantity > taken.quantity:
                    row.quantity = row.quantity - taken.quantity
                    continue
                session.delete(row)
                removed += 1
        log_event("info", "cart.consumed", items=len(items), removed=removed)
        return removed

    # --- orders ---------------------------------------------------------

    def create_order(self, order: InsertOrder, items: Sequence[InsertOrderItem]) -> Order:
        # the surrounding session commits header and items together or not at all
        with self._lock, self._session_factory() as session:
            header = models.Order(
                id=str(uuid4()),
                position=self._next_position(session, models.Order),
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
                created_at=_naive_utc(self._clock()),
            )
            session.add(header)
            position = self._next_position(session, models.OrderItem)
            for offset, it in enumerate(items):
                session.add(
                    models.OrderItem(
                        id=str(uuid4()),
                        position=position + offset,
                        order_id=header.id,
                        product_id=it.product_id,
                        product_name=it.product_name,
                        product_image=it.product_image,
                        quantity=it.quantity,
                        size=it.size,
                        color=it.color,
                        price=it.price,
                    )
                )
            session.flush()
            created = dto.to_order(header)
        log_event("info", "order.created", order_id=created.id, items=len(items), total=created.total_amount)
        return created

    def get_order(self, order_id: str) -> Optional[OrderWithItems]:
        if not order_id:
            return None
        with self._session_factory() as session:
            row = session.query(models.Order).filter(models.Order.id == order_id).first()
            if row is None:
                return None
            items = (
                session.query(models.OrderItem)
                .filter(models.OrderItem.order_id == order_id)
                .order_by(models.OrderItem.position.asc())
                .all()
            )
            return OrderWithItems(order=dto.to_order(row), items=[dto.to_order_item(i) for i in items])

    def update_order_status(self, order_id: str, status: str) -> Optional[Order]:
        with self._lock, self._session_factory() as session:
            row = session.query(models.Order).filter(models.Order.id == order_id).first()
            if row is None:
                return None
            ensure_transition(row.status, status)
            previous = row.status
            row.status = status
            session.flush()
            updated = dto.to_order(row)
        if previous != status:
            log_event("info", "order.status_changed", order_id=order_id, previous=previous, status=status)
        return updated

    def list_orders(self, *, limit: int = 20, offset: int = 0) -> List[Order]:
        with self._session_factory() as session:
            rows = (
                session.query(models.Order)
                .order_by(models.Order.position.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [dto.to_order(r) for r in rows]

    def count_orders(self) -> int:
        with self._session_factory() as session:
            return session.query(func.count(models.Order.id)).scalar() or 0
