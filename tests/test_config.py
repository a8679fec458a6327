import json

import pytest

from elegant_ethnic.config import DEFAULT_STORE_SETTINGS, StoreConfig, validate_currency

ENV_VARS = (
    "STORE_SECRET_KEY",
    "STORE_ADMIN_PASS",
    "STORE_LOG_LEVEL",
    "STORE_BACKEND",
    "DATABASE_URL",
    "STORE_SEED_CATALOG",
    "STORE_CURRENCY",
    "STORE_DATA_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = StoreConfig.load(data_dir=tmp_path)
    assert config.backend == "memory"
    assert config.database_url == "sqlite:///:memory:"
    assert config.seed_catalog is True
    assert config.currency == "INR"
    assert config.log_level == "INFO"
    assert json.loads(config.settings_file.read_text(encoding="utf-8")) == DEFAULT_STORE_SETTINGS


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "SQL")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///store.db")
    monkeypatch.setenv("STORE_SEED_CATALOG", "no")
    monkeypatch.setenv("STORE_CURRENCY", "usd")
    monkeypatch.setenv("STORE_LOG_LEVEL", "debug")
    monkeypatch.setenv("STORE_ADMIN_PASS", "s3cret")
    config = StoreConfig.load(data_dir=tmp_path)
    assert config.backend == "sql"
    assert config.database_url == "sqlite:///store.db"
    assert config.seed_catalog is False
    assert config.currency == "USD"
    assert config.log_level == "DEBUG"
    assert config.admin_password == "s3cret"


def test_data_dir_from_environment(tmp_path, monkeypatch):
    target = tmp_path / "nested" / "data"
    monkeypatch.setenv("STORE_DATA_DIR", str(target))
    config = StoreConfig.load()
    assert config.data_dir == target
    assert target.is_dir()


def test_unknown_backend_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "redis")
    with pytest.raises(ValueError):
        StoreConfig.load(data_dir=tmp_path)


def test_admin_file_overrides_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("STORE_ADMIN_PASS", "from-env")
    (tmp_path / "admin.json").write_text(json.dumps({"password": "from-file"}), encoding="utf-8")
    assert StoreConfig.load(data_dir=tmp_path).admin_password == "from-file"


def test_unreadable_admin_file_falls_back(tmp_path, monkeypatch):
    monkeypatch.setenv("STORE_ADMIN_PASS", "from-env")
    (tmp_path / "admin.json").write_text("{not json", encoding="utf-8")
    assert StoreConfig.load(data_dir=tmp_path).admin_password == "from-env"


def test_existing_settings_are_kept(tmp_path):
    (tmp_path / "settings.json").write_text(json.dumps({"storeName": "Kept"}), encoding="utf-8")
    config = StoreConfig.load(data_dir=tmp_path)
    assert config.load_store_settings()["storeName"] == "Kept"
    assert config.load_store_settings()["city"] == DEFAULT_STORE_SETTINGS["city"]


def test_save_settings_ignores_unknown_keys(tmp_path):
    config = StoreConfig.load(data_dir=tmp_path)
    saved = config.save_store_settings({"shippingFree": "2500", "adminPassword": "x"})
    assert saved["shippingFree"] == "2500"
    assert "adminPassword" not in saved
    assert "adminPassword" not in json.loads(config.settings_file.read_text(encoding="utf-8"))


def test_corrupt_settings_file_raises(tmp_path):
    config = StoreConfig.load(data_dir=tmp_path)
    config.settings_file.write_text("[broken", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load_store_settings()


@pytest.mark.parametrize("value, expected", [(None, "INR"), ("", "INR"), (" eur ", "EUR")])
def test_validate_currency(value, expected):
    assert validate_currency(value) == expected


@pytest.mark.parametrize("value", ["RUPEE", "12", "U$D"])
def test_validate_currency_rejects(value):
    with pytest.raises(ValueError):
        validate_currency(value)
