"""Storefront storage and checkout services."""

from .checkout import CheckoutService
from .seed import seed_catalog
from .sql_storage import SqlStorage
from .storage import IStorage, MemStorage

__all__ = [
    "CheckoutService",
    "IStorage",
    "MemStorage",
    "SqlStorage",
    "seed_catalog",
]
