"""Error taxonomy shared by the request layer."""

from __future__ import annotations

from typing import Dict, Optional


class StoreError(Exception):
    """Base error carrying the HTTP status and a short user-facing message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.message}


class ValidationError(StoreError):
    status_code = 400
    default_message = "Invalid request data"


class EmptyCartError(StoreError):
    status_code = 400
    default_message = "Cart is empty"


class InvalidTransitionError(StoreError):
    status_code = 400
    default_message = "Invalid status transition"


class AuthenticationError(StoreError):
    status_code = 401
    default_message = "Admin login required"


class NotFoundError(StoreError):
    status_code = 404
    default_message = "Not found"
