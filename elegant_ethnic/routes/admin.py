"""Admin panel API guarded by the static admin password."""

from __future__ import annotations

import hmac

from flask import Blueprint, current_app, jsonify, request, session

from ..common.errors import AuthenticationError, NotFoundError, ValidationError
from ..common.schemas import AdminLogin, InsertProduct, OrderStatusUpdate, ProductUpdate
from ..common.services.logging import log_event
from ..common.utils.pagination import normalize_paging, page_meta
from .api import json_payload, parse_body

admin_bp = Blueprint("storefront_admin", __name__, url_prefix="/admin")

SESSION_FLAG = "storefront_admin"
PUBLIC_ENDPOINTS = {
    "storefront_admin.login",
    "storefront_admin.session_status",
}


def _components() -> dict:
    return current_app.extensions["storefront_components"]


def _config():
    return current_app.config["STORE_CONFIG"]


def _is_authenticated() -> bool:
    return bool(session.get(SESSION_FLAG))


@admin_bp.before_request
def guard_private_routes():
    if request.endpoint and request.endpoint not in PUBLIC_ENDPOINTS and not _is_authenticated():
        raise AuthenticationError()
    return None


@admin_bp.post("/login")
def login():
    data = parse_body(AdminLogin, json_payload(), "Invalid login data")
    if hmac.compare_digest(data.password.encode("utf-8"), _config().admin_password.encode("utf-8")):
        session[SESSION_FLAG] = True
        return jsonify({"status": "ok"})
    log_event("warning", "admin.login_failed", remote_addr=request.remote_addr)
    raise AuthenticationError("Invalid password")


@admin_bp.post("/logout")
def logout():
    session.pop(SESSION_FLAG, None)
    return jsonify({"status": "ok"})


@admin_bp.get("/session")
def session_status():
    return jsonify({"authenticated": _is_authenticated()})


# --- products ---------------------------------------------------------------


@admin_bp.post("/products")
def create_product():
    data = parse_body(InsertProduct, json_payload(), "Invalid product data")
    product = _components()["storage"].create_product(data)
    return jsonify(product.to_dict()), 201


@admin_bp.patch("/products/<product_id>")
def update_product(product_id: str):
    data = parse_body(ProductUpdate, json_payload(), "Invalid product data")
    product = _components()["storage"].update_product(product_id, data.changes())
    if product is None:
        raise NotFoundError("Product not found")
    return jsonify(product.to_dict())


# --- orders -----------------------------------------------------------------


@admin_bp.get("/orders")
def list_orders():
    page, per_page = normalize_paging(request.args.get("page"), request.args.get("per_page"))
    storage = _components()["storage"]
    orders = storage.list_orders(limit=per_page, offset=(page - 1) * per_page)
    body = {"status": "ok", "orders": [o.to_dict() for o in orders]}
    body.update(page_meta(page, per_page, storage.count_orders()))
    return jsonify(body)


@admin_bp.patch("/orders/<order_id>/status")
def update_order_status(order_id: str):
    data = parse_body(OrderStatusUpdate, json_payload(), "Invalid order status")
    order = _components()["storage"].update_order_status(order_id, data.status)
    if order is None:
        raise NotFoundError("Order not found")
    return jsonify(order.to_dict())


# --- settings ---------------------------------------------------------------


@admin_bp.get("/settings/data")
def get_settings():
    return jsonify({"status": "ok", "settings": _config().load_store_settings()})


@admin_bp.put("/settings/data")
def update_settings():
    settings = json_payload().get("settings")
    if not isinstance(settings, dict) or not settings:
        raise ValidationError("No settings provided")
    saved = _config().save_store_settings(settings)
    return jsonify({"status": "ok", "settings": saved})
