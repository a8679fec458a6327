from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple


def recompute_rating(ratings: Iterable[int]) -> Tuple[str, int]:
    """Return ``(rating, review_count)`` for a product's review ratings.

    The rating is the arithmetic mean rounded half-up to one decimal place,
    e.g. ``[5, 4, 3] -> ("4.0", 3)``. No ratings gives ``("0", 0)``.
    """
    values = [int(r) for r in ratings]
    if not values:
        return "0", 0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return str(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)), len(values)
