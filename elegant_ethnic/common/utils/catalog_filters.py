"""Product listing predicates and sort orders shared by both storage backends."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Sequence, Tuple

CATEGORY_NAMES = {
    "sarees": "Sarees",
    "salwar-suits": "Salwar Suits",
    "kurtis": "Kurtis",
    "lehengas": "Lehengas",
    "mens-wear": "Mens Wear",
    "kids-wear": "Kids Wear",
    "bags": "Bags",
}

SORT_FEATURED = "featured"
SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_RATING = "rating"
SORT_NEWEST = "newest"


@dataclass
class ProductFilters:
    """Optional listing filters; every one that is set narrows the result."""

    category: Optional[str] = None
    search: Optional[str] = None
    price_range: Optional[Tuple[float, float]] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    fabrics: Optional[List[str]] = None
    sort_by: Optional[str] = None


def resolve_category(slug: str) -> str:
    """Map a URL slug to its category name; unknown values pass through as-is."""
    return CATEGORY_NAMES.get(slug, slug)


def to_number(value: Optional[str]) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def matches(product, filters: ProductFilters) -> bool:
    if filters.category and product.category != resolve_category(filters.category):
        return False
    if filters.search:
        needle = filters.search.lower()
        haystacks = (product.name, product.category, product.fabric)
        if not any(needle in (h or "").lower() for h in haystacks):
            return False
    if filters.price_range is not None:
        low, high = filters.price_range
        price = to_number(product.price)
        if price < Decimal(str(low)) or price > Decimal(str(high)):
            return False
    if filters.sizes and not any(s in product.sizes for s in filters.sizes):
        return False
    if filters.colors and not any(c in product.colors for c in filters.colors):
        return False
    if filters.fabrics and product.fabric not in filters.fabrics:
        return False
    return True


def sort_products(products: Sequence, sort_by: Optional[str]) -> list:
    """Return a new list ordered by ``sort_by``.

    ``products`` must already be in insertion order. Python's sort is stable,
    so products with equal keys keep their insertion order.
    """
    ordered = list(products)
    if sort_by == SORT_PRICE_LOW:
        ordered.sort(key=lambda p: to_number(p.price))
    elif sort_by == SORT_PRICE_HIGH:
        ordered.sort(key=lambda p: to_number(p.price), reverse=True)
    elif sort_by == SORT_RATING:
        ordered.sort(key=lambda p: to_number(p.rating), reverse=True)
    elif sort_by == SORT_NEWEST:
        ordered.reverse()
    return ordered


def apply_filters(products: Iterable, filters: Optional[ProductFilters]) -> list:
    if filters is None:
        return list(products)
    selected = [p for p in products if matches(p, filters)]
    return sort_products(selected, filters.sort_by)
