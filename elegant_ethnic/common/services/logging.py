import json
import sys
from datetime import datetime, timezone

_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}
_threshold = _LEVELS["info"]
_stream = None


def configure_events(level: str = "INFO", stream=None) -> None:
    """Set the minimum event level and, optionally, the output stream (stdout by default)."""
    global _threshold, _stream
    _threshold = _LEVELS.get((level or "info").lower(), _LEVELS["info"])
    _stream = stream


def log_event(level: str, event: str, **fields) -> None:
    level = level.lower()
    if _LEVELS.get(level, _LEVELS["info"]) < _threshold:
        return
    payload = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": level,
        "event": event,
    }
    payload.update(fields or {})
    out = _stream or sys.stdout
    try:
        out.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
    except (OSError, ValueError):
        # best-effort logging
        pass
