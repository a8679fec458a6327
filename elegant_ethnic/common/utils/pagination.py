from typing import Dict, Optional, Tuple


def _to_int(value: Optional[str], fallback: int) -> int:
    try:
        return int(value) if value not in (None, "") else fallback
    except (TypeError, ValueError):
        return fallback


def normalize_paging(page, per_page, max_per_page: int = 100) -> Tuple[int, int]:
    """Clamp raw query values to a usable ``(page, per_page)`` pair."""
    p = _to_int(page, 1)
    pp = _to_int(per_page, 20)
    p = p if p > 0 else 1
    pp = pp if pp > 0 else 20
    return p, min(pp, max_per_page)


def page_meta(page: int, per_page: int, total: int) -> Dict[str, int]:
    return {
        "total": total,
        "page": page,
        "per_page": per_page,
        "total_pages": (total + per_page - 1) // per_page if total > 0 else 0,
    }
