from .base import Base
from .cart_item import CartItem
from .order import Order
from .order_item import OrderItem
from .product import Product
from .review import Review

__all__ = ["Base", "CartItem", "Order", "OrderItem", "Product", "Review"]
