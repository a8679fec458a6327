import secrets
import string

TRACKING_PREFIX = "TRK"
_ALPHABET = string.ascii_uppercase + string.digits


def generate_tracking_number(length: int = 8) -> str:
    return TRACKING_PREFIX + "".join(secrets.choice(_ALPHABET) for _ in range(length))
