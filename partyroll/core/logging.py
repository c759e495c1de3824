"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this installs the single
stdout handler on the root logger once at startup.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from partyroll.core.config import settings


class JSONFormatter(logging.Formatter):
    """Emit every log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_data["error"] = str(record.exc_info[1])
            log_data["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(log_data)


def configure_logging() -> None:
    """Attach a stdout handler at LOG_LEVEL. Safe to call more than once."""
    root = logging.getLogger()
    if any(getattr(h, "_partyroll", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
    handler._partyroll = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
