import math
from typing import List, Optional, Tuple

from ..errors import ValidationError


def parse_csv(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma separated query value, dropping blanks."""
    if not value:
        return None
    parts = [p.strip() for p in value.split(",")]
    return [p for p in parts if p] or None


def parse_price_range(value: Optional[str]) -> Optional[Tuple[float, float]]:
    if not value:
        return None
    parts = value.split(",")
    if len(parts) != 2:
        raise ValidationError("Invalid price range")
    try:
        low, high = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValidationError("Invalid price range") from exc
    if math.isnan(low) or math.isnan(high):
        raise ValidationError("Invalid price range")
    return low, high
