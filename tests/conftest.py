from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from elegant_ethnic.app import create_app
from elegant_ethnic.common.schemas import InsertCartItem, InsertOrder, InsertProduct
from elegant_ethnic.config import StoreConfig
from elegant_ethnic.services import MemStorage, SqlStorage


class TickingClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    clock = TickingClock()
    if request.param == "sql":
        return SqlStorage("sqlite:///:memory:", clock=clock)
    return MemStorage(clock=clock)


def product_payload(**overrides):
    data = {
        "name": "Royal Blue Banarasi Silk Saree",
        "description": "Banarasi silk with zari work",
        "category": "Sarees",
        "price": "1000",
        "originalPrice": "1500",
        "images": ["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"],
        "sizes": ["Free Size"],
        "colors": ["Navy Blue", "Gold"],
        "fabric": "Silk",
        "inStock": True,
        "featured": False,
        "newArrival": False,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_product(storage):
    def _make(**overrides):
        return storage.create_product(InsertProduct.model_validate(product_payload(**overrides)))

    return _make


def cart_line(product_id, session_id="s1", quantity=1, size="M", color="Red"):
    return InsertCartItem(session_id=session_id, product_id=product_id, quantity=quantity, size=size, color=color)


def order_payload(**overrides):
    data = {
        "customerName": "Priya Sharma",
        "customerEmail": "priya@example.com",
        "customerPhone": "+91 98765 00000",
        "shippingAddress": "12 MG Road",
        "city": "Pune",
        "state": "Maharashtra",
        "zipCode": "411001",
        "totalAmount": "1000",
    }
    data.update(overrides)
    return data


def make_order(**overrides):
    return InsertOrder.model_validate(order_payload(**overrides))


@pytest.fixture
def config(tmp_path: Path):
    return StoreConfig(
        secret_key="test-secret",
        admin_password="letmein",
        log_level="WARNING",
        backend="memory",
        database_url="sqlite:///:memory:",
        seed_catalog=False,
        currency="INR",
        data_dir=tmp_path,
    )


@pytest.fixture
def app(config, storage):
    app = create_app(config, storage=storage)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    resp = client.post("/admin/login", json={"password": "letmein"})
    assert resp.status_code == 200
    return client
