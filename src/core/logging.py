import json
import logging
import sys
from datetime import datetime, timezone


_SENSITIVE_KEYS = {"email", "whatsapp", "phone", "token", "api_key", "authorization"}
_DEFAULT_LOG_RECORD_KEYS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__)


def _sanitize_value(data: dict) -> dict:
    """Replace values for keys containing sensitive terms with '********'."""
    sanitized = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(s in key_lower for s in _SENSITIVE_KEYS):
            sanitized[key] = "********"
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_value(value)
        else:
            sanitized[key] = value
    return sanitized


def mask_email(address: str) -> str:
    """Mask an email address for safe logging."""
    if "@" in address:
        return address.split("@")[0][:2] + "***@" + address.split("@")[-1]
    return "***"


def mask_phone(number: str) -> str:
    """Keep only the last three digits of a phone number."""
    digits = [c for c in number if c.isdigit()]
    if len(digits) <= 3:
        return "***"
    return "***" + "".join(digits[-3:])


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Read request_id from contextvars (async-safe)
        from src.api.middleware.request_id import request_id_var
        request_id = request_id_var.get("")
        if request_id:
            log_entry["request_id"] = request_id
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        extra = {
            k: v for k, v in record.__dict__.items()
            if k not in _DEFAULT_LOG_RECORD_KEYS and k not in ("message", "asctime")
        }
        if extra:
            extra = _sanitize_value(extra)
            log_entry["extra"] = extra
        return json.dumps(log_entry, default=str)


def setup_logging(debug: bool = False) -> None:
    """Configure structured JSON logging for the application."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.handlers.clear()
    root.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
