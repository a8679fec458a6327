"""Storefront application settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

BACKENDS = {"memory", "sql"}

DEFAULT_STORE_SETTINGS: Dict[str, Any] = {
    "storeName": "Elegant Ethnic",
    "storeEmail": "support@elegantethnic.com",
    "storePhone": "+91 98765 43210",
    "address": "123 Fashion Street",
    "city": "Mumbai",
    "state": "Maharashtra",
    "zipCode": "400001",
    "facebookUrl": "https://facebook.com",
    "instagramUrl": "https://instagram.com",
    "twitterUrl": "https://twitter.com",
    "paymentMethods": {"upi": True, "card": True, "netBanking": True, "cod": True},
    "shippingFree": "2000",
    "shippingStandard": "100",
}
ALLOWED_SETTING_KEYS = set(DEFAULT_STORE_SETTINGS)


def validate_currency(value: Optional[str]) -> str:
    v = (value or "INR").strip().upper()
    if len(v) != 3 or not v.isalpha():
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class StoreConfig:
    """Settings for the storefront, read from the environment."""

    secret_key: str
    admin_password: str
    log_level: str
    backend: str
    database_url: str
    seed_catalog: bool
    currency: str
    data_dir: Path

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.json"

    @property
    def admin_credentials_file(self) -> Path:
        return self.data_dir / "admin.json"

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> "StoreConfig":
        """Build settings from ``.env`` and environment variables; make sure the data dir exists."""

        load_dotenv()
        backend = os.environ.get("STORE_BACKEND", "memory").strip().lower()
        if backend not in BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {sorted(BACKENDS)}, got {backend!r}")

        default_dir = Path(__file__).resolve().parent / "data"
        config = cls(
            secret_key=os.environ.get("STORE_SECRET_KEY", "elegant-ethnic-dev"),
            admin_password=os.environ.get("STORE_ADMIN_PASS", "admin@store"),
            log_level=os.environ.get("STORE_LOG_LEVEL", "INFO").upper(),
            backend=backend,
            database_url=os.environ.get("DATABASE_URL", "sqlite:///:memory:"),
            seed_catalog=_flag(os.environ.get("STORE_SEED_CATALOG"), True),
            currency=validate_currency(os.environ.get("STORE_CURRENCY")),
            data_dir=Path(data_dir or os.environ.get("STORE_DATA_DIR") or default_dir),
        )
        config.data_dir.mkdir(parents=True, exist_ok=True)

        # admin.json, when present, wins over the environment
        if config.admin_credentials_file.exists():
            try:
                admin_data = json.loads(config.admin_credentials_file.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Could not read %s: %s", config.admin_credentials_file, exc)
            else:
                if isinstance(admin_data, dict) and admin_data.get("password"):
                    config.admin_password = str(admin_data["password"])
                    logger.info("Admin password loaded from %s", config.admin_credentials_file)

        if not config.settings_file.exists():
            config.save_store_settings(DEFAULT_STORE_SETTINGS)
            logger.info("Created default store settings at %s", config.settings_file)

        return config

    def load_store_settings(self) -> Dict[str, Any]:
        settings = dict(DEFAULT_STORE_SETTINGS)
        try:
            stored = json.loads(self.settings_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return settings
        except json.JSONDecodeError as exc:
            raise ValueError(f"store settings file is not valid JSON: {self.settings_file}") from exc
        if isinstance(stored, dict):
            settings.update({k: v for k, v in stored.items() if k in ALLOWED_SETTING_KEYS})
        return settings

    def save_store_settings(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Merge whitelisted keys into the settings file and return the result."""

        settings = self.load_store_settings() if self.settings_file.exists() else dict(DEFAULT_STORE_SETTINGS)
        settings.update({k: v for k, v in (updates or {}).items() if k in ALLOWED_SETTING_KEYS})
        self.settings_file.write_text(json.dumps(settings, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        return settings
