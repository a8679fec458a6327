"""Demo catalog loaded into a fresh storage at startup."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..common.schemas import InsertProduct, InsertReview
from .storage import IStorage

logger = logging.getLogger(__name__)

DEFAULT_SEED_FILE = Path(__file__).resolve().parents[1] / "data" / "seed_catalog.json"


def load_seed_file(path: Path = DEFAULT_SEED_FILE) -> List[Dict]:
    if not path.exists():
        return []
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return []
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"seed catalog is not valid JSON: {path}") from exc
    if not isinstance(payload, list):
        raise ValueError("seed catalog must be a JSON array")
    return [item for item in payload if isinstance(item, dict)]


def seed_catalog(storage: IStorage, path: Optional[Path] = None) -> int:
    """Create every seed product, then replay its reviews.

    Reviews go through ``create_review`` so seeded ratings obey the same
    recompute rule as customer reviews. Returns the number of products added.
    """
    entries = load_seed_file(path or DEFAULT_SEED_FILE)
    for entry in entries:
        reviews = entry.pop("reviews", None) or []
        product = storage.create_product(InsertProduct.model_validate(entry))
        for review in reviews:
            storage.create_review(InsertReview.model_validate({**review, "productId": product.id}))
    logger.info("Seeded %d products", len(entries))
    return len(entries)
