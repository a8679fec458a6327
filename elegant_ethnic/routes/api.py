"""Public storefront API: catalog, reviews, cart and orders."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

import pydantic
from flask import Blueprint, current_app, jsonify, request

from ..common.errors import NotFoundError, ValidationError
from ..common.schemas import CartQuantityUpdate, InsertCartItem, InsertOrder, InsertReview
from ..common.utils.catalog_filters import ProductFilters
from ..common.utils.validators import parse_csv, parse_price_range

api_bp = Blueprint("storefront_api", __name__, url_prefix="/api")

M = TypeVar("M", bound=pydantic.BaseModel)


def _components() -> Dict[str, Any]:
    return current_app.extensions["storefront_components"]


def _storage():
    return _components()["storage"]


def json_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def parse_body(model: Type[M], payload: Dict[str, Any], message: str) -> M:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        current_app.logger.debug("rejected %s payload: %s", model.__name__, exc.errors())
        raise ValidationError(message) from exc


def _session_id(payload: Optional[Dict[str, Any]] = None) -> str:
    """Session id from the body, the ``sessionId`` query value or the ``x-session-id`` header."""
    if payload and payload.get("sessionId"):
        return str(payload["sessionId"]).strip()
    return (request.args.get("sessionId") or request.headers.get("x-session-id") or "").strip()


# --- products ---------------------------------------------------------------


@api_bp.get("/products")
def list_products():
    args = request.args
    filters = ProductFilters(
        category=args.get("category") or None,
        search=args.get("search") or None,
        price_range=parse_price_range(args.get("priceRange")),
        sizes=parse_csv(args.get("sizes")),
        colors=parse_csv(args.get("colors")),
        fabrics=parse_csv(args.get("fabrics")),
        sort_by=args.get("sortBy") or None,
    )
    products = _storage().get_products(filters)
    return jsonify([p.to_dict() for p in products])


@api_bp.get("/products/featured")
def featured_products():
    return jsonify([p.to_dict() for p in _storage().get_featured_products()])


@api_bp.get("/products/<product_id>")
def product_detail(product_id: str):
    product = _storage().get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return jsonify(product.to_dict())


# --- reviews ----------------------------------------------------------------


@api_bp.get("/reviews")
def reviews_by_query():
    product_id = (request.args.get("productId") or "").strip()
    if not product_id:
        raise ValidationError("productId is required")
    return reviews_for_product(product_id)


@api_bp.get("/reviews/<product_id>")
def reviews_for_product(product_id: str):
    reviews = _storage().get_reviews_by_product(product_id)
    return jsonify([r.to_dict() for r in reviews])


@api_bp.post("/reviews")
def create_review():
    data = parse_body(InsertReview, json_payload(), "Invalid review data")
    review = _storage().create_review(data)
    return jsonify(review.to_dict())


# --- cart -------------------------------------------------------------------


@api_bp.get("/cart")
def cart_items():
    session_id = _session_id()
    if not session_id:
        return jsonify([])
    return jsonify([it.to_dict() for it in _storage().get_cart_items(session_id)])


@api_bp.get("/cart/items")
def cart_items_with_products():
    session_id = _session_id()
    if not session_id:
        return jsonify([])
    return jsonify([line.to_dict() for line in _storage().get_cart_items_with_products(session_id)])


@api_bp.post("/cart")
def add_to_cart():
    payload = json_payload()
    if not payload.get("sessionId"):
        header_session = _session_id()
        if header_session:
            payload["sessionId"] = header_session
    data = parse_body(InsertCartItem, payload, "Invalid cart item data")
    storage = _storage()
    if storage.get_product(data.product_id) is None:
        raise NotFoundError("Product not found")
    item = storage.add_to_cart(data)
    return jsonify(item.to_dict())


@api_bp.patch("/cart/<item_id>")
def update_cart_item(item_id: str):
    data = parse_body(CartQuantityUpdate, json_payload(), "Invalid quantity")
    item = _storage().update_cart_item(item_id, data.quantity)
    if item is None:
        raise NotFoundError("Cart item not found")
    return jsonify(item.to_dict())


@api_bp.delete("/cart/<item_id>")
def remove_cart_item(item_id: str):
    if not _storage().remove_from_cart(item_id):
        raise NotFoundError("Cart item not found")
    return jsonify({"success": True})


# --- orders -----------------------------------------------------------------


@api_bp.post("/orders")
def create_order():
    payload = json_payload()
    session_id = _session_id(payload)
    if not session_id:
        raise ValidationError("sessionId is required")
    order_data = {k: v for k, v in payload.items() if k != "sessionId"}
    order = parse_body(InsertOrder, order_data, "Invalid order data")
    created = _components()["checkout"].place_order(session_id, order)
    return jsonify({"orderId": created.id})


@api_bp.get("/orders/<order_id>")
def order_detail(order_id: str):
    order = _storage().get_order(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return jsonify(order.to_dict())


# --- settings ---------------------------------------------------------------


@api_bp.get("/settings")
def store_settings():
    config = current_app.config["STORE_CONFIG"]
    settings = config.load_store_settings()
    settings["currency"] = config.currency
    return jsonify(settings)
