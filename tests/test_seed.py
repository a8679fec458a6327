import json

import pytest

from elegant_ethnic.app import create_app
from elegant_ethnic.common.utils.catalog_filters import CATEGORY_NAMES
from elegant_ethnic.common.utils.ratings import recompute_rating
from elegant_ethnic.services import MemStorage, seed_catalog
from elegant_ethnic.services.seed import load_seed_file


def test_seed_catalog_loads_every_category(storage):
    assert seed_catalog(storage) == 20
    products = storage.get_products()
    assert len(products) == 20
    assert {p.category for p in products} == set(CATEGORY_NAMES.values())
    assert storage.get_featured_products()


def test_seeded_ratings_match_seeded_reviews(storage):
    seed_catalog(storage)
    for product in storage.get_products():
        ratings = [r.rating for r in storage.get_reviews_by_product(product.id)]
        assert (product.rating, product.review_count) == recompute_rating(ratings)


def test_seed_file_can_be_replaced(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            [
                {
                    "name": "Chikankari Kurti",
                    "description": "Lucknowi embroidery",
                    "category": "Kurtis",
                    "price": "1899",
                    "images": ["https://img.example.com/k.jpg"],
                    "sizes": ["S", "M"],
                    "colors": ["White"],
                    "fabric": "Cotton",
                    "reviews": [{"customerName": "Nisha", "rating": 5, "comment": "Perfect"}],
                }
            ]
        ),
        encoding="utf-8",
    )
    storage = MemStorage()
    assert seed_catalog(storage, path) == 1
    (product,) = storage.get_products()
    assert (product.rating, product.review_count) == ("5.0", 1)


def test_missing_or_empty_seed_file(tmp_path):
    assert load_seed_file(tmp_path / "absent.json") == []
    empty = tmp_path / "empty.json"
    empty.write_text("  ", encoding="utf-8")
    assert load_seed_file(empty) == []


def test_seed_file_must_be_a_list(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text('{"name": "x"}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_file(path)


def test_app_seeds_when_configured(config):
    config.seed_catalog = True
    app = create_app(config)
    products = app.test_client().get("/api/products").get_json()
    assert len(products) == 20
