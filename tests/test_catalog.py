from elegant_ethnic.common.schemas import InsertReview
from elegant_ethnic.common.utils.catalog_filters import ProductFilters, resolve_category


def names(products):
    return [p.name for p in products]


def test_create_product_starts_without_rating(make_product, storage):
    product = make_product(name="Potli Bag", category="Bags")
    assert product.id
    assert product.rating == "0"
    assert product.review_count == 0
    assert storage.get_product(product.id).name == "Potli Bag"


def test_get_product_unknown_returns_none(storage):
    assert storage.get_product("missing") is None


def test_featured_and_price_high_scenario(make_product, storage):
    a = make_product(name="A", price="1000", featured=True)
    b = make_product(name="B", price="2000", featured=False)
    assert [p.id for p in storage.get_featured_products()] == [a.id]
    assert [p.id for p in storage.get_products(ProductFilters(sort_by="price-high"))] == [b.id, a.id]


def test_category_slug_is_mapped(make_product, storage):
    make_product(name="Saree", category="Sarees")
    make_product(name="Suit", category="Salwar Suits")
    make_product(name="Kid", category="Kids Wear")
    assert names(storage.get_products(ProductFilters(category="salwar-suits"))) == ["Suit"]
    assert names(storage.get_products(ProductFilters(category="kids-wear"))) == ["Kid"]


def test_unmapped_category_passes_through_literally(make_product, storage):
    make_product(name="Saree", category="Sarees")
    assert names(storage.get_products(ProductFilters(category="Sarees"))) == ["Saree"]
    assert storage.get_products(ProductFilters(category="dupattas")) == []
    assert resolve_category("dupattas") == "dupattas"


def test_search_matches_name_category_or_fabric(make_product, storage):
    make_product(name="Royal Kurti", category="Kurtis", fabric="Cotton")
    make_product(name="Velvet Suit", category="Salwar Suits", fabric="Velvet")
    make_product(name="Clutch", category="Bags", fabric="Silk")
    assert names(storage.get_products(ProductFilters(search="royal"))) == ["Royal Kurti"]
    assert names(storage.get_products(ProductFilters(search="BAGS"))) == ["Clutch"]
    assert names(storage.get_products(ProductFilters(search="velvet"))) == ["Velvet Suit"]


def test_price_range_is_inclusive(make_product, storage):
    make_product(name="cheap", price="999")
    make_product(name="edge", price="1000")
    make_product(name="top", price="5000")
    make_product(name="over", price="5000.01")
    found = storage.get_products(ProductFilters(price_range=(1000, 5000)))
    assert names(found) == ["edge", "top"]


def test_sizes_and_colors_use_any_of(make_product, storage):
    make_product(name="small", sizes=["S"], colors=["Red"])
    make_product(name="large", sizes=["L", "XL"], colors=["Blue"])
    make_product(name="free", sizes=["Free Size"], colors=["Red", "Gold"])
    assert names(storage.get_products(ProductFilters(sizes=["S", "XL"]))) == ["small", "large"]
    assert names(storage.get_products(ProductFilters(colors=["Gold", "Blue"]))) == ["large", "free"]


def test_fabrics_membership(make_product, storage):
    make_product(name="silk", fabric="Silk")
    make_product(name="net", fabric="Net")
    make_product(name="cotton", fabric="Cotton")
    assert names(storage.get_products(ProductFilters(fabrics=["Net", "Cotton"]))) == ["net", "cotton"]


def test_filters_compose_and_removing_one_only_grows(make_product, storage):
    make_product(name="saree cheap", category="Sarees", price="4000")
    make_product(name="saree dear", category="Sarees", price="9000")
    make_product(name="kurti cheap", category="Kurtis", price="1200")

    both = storage.get_products(ProductFilters(category="sarees", price_range=(0, 5000)))
    only_category = storage.get_products(ProductFilters(category="sarees"))
    only_price = storage.get_products(ProductFilters(price_range=(0, 5000)))

    assert names(both) == ["saree cheap"]
    assert set(names(both)) <= set(names(only_category))
    assert set(names(both)) <= set(names(only_price))
    assert set(names(only_category)) == {"saree cheap", "saree dear"}
    assert set(names(only_price)) == {"saree cheap", "kurti cheap"}


def test_price_low_keeps_insertion_order_for_ties(make_product, storage):
    make_product(name="first", price="1500")
    make_product(name="second", price="900")
    make_product(name="third", price="1500")
    make_product(name="fourth", price="900")
    ordered = storage.get_products(ProductFilters(sort_by="price-low"))
    assert names(ordered) == ["second", "fourth", "first", "third"]


def test_price_sort_is_numeric_not_lexical(make_product, storage):
    make_product(name="nine", price="999")
    make_product(name="ten-k", price="10000")
    assert names(storage.get_products(ProductFilters(sort_by="price-low"))) == ["nine", "ten-k"]


def test_rating_sort_descending_with_unrated_last(make_product, storage):
    unrated = make_product(name="unrated")
    good = make_product(name="good")
    great = make_product(name="great")
    storage.create_review(InsertReview(product_id=good.id, customer_name="a", rating=3))
    storage.create_review(InsertReview(product_id=great.id, customer_name="b", rating=5))
    ordered = storage.get_products(ProductFilters(sort_by="rating"))
    assert [p.id for p in ordered] == [great.id, good.id, unrated.id]


def test_newest_reverses_insertion_order(make_product, storage):
    for name in ("one", "two", "three"):
        make_product(name=name)
    assert names(storage.get_products(ProductFilters(sort_by="newest"))) == ["three", "two", "one"]


def test_unknown_or_featured_sort_keeps_insertion_order(make_product, storage):
    for name, price in (("one", "300"), ("two", "100"), ("three", "200")):
        make_product(name=name, price=price)
    assert names(storage.get_products(ProductFilters(sort_by="featured"))) == ["one", "two", "three"]
    assert names(storage.get_products(ProductFilters(sort_by="bogus"))) == ["one", "two", "three"]
    assert names(storage.get_products()) == ["one", "two", "three"]


def test_update_product_leaves_derived_fields(make_product, storage):
    product = make_product(name="old")
    storage.create_review(InsertReview(product_id=product.id, customer_name="a", rating=4))
    updated = storage.update_product(product.id, {"name": "new", "rating": "1.0", "review_count": 99})
    assert updated.name == "new"
    assert updated.rating == "4.0"
    assert updated.review_count == 1
    assert storage.update_product("missing", {"name": "x"}) is None


def test_returned_records_do_not_alias_the_store(make_product, storage):
    product = make_product(name="original")
    product.name = "mutated"
    product.images.append("https://img.example.com/z.jpg")
    stored = storage.get_product(product.id)
    assert stored.name == "original"
    assert len(stored.images) == 2


def test_search_folds_non_ascii_case(make_product, storage):
    make_product(name="Éclat Kurti", category="Kurtis", fabric="Crêpe")
    make_product(name="Plain Kurti", category="Kurtis", fabric="Cotton")
    assert names(storage.get_products(ProductFilters(search="éclat"))) == ["Éclat Kurti"]
    assert names(storage.get_products(ProductFilters(search="CRÊPE"))) == ["Éclat Kurti"]
