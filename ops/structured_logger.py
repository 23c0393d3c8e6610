from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional

from config.settings import settings


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time_unix": record.created,
            "service": settings.SERVICE_NAME,
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            payload.update(record.extra)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    # httpx logs every request URL at INFO; keep the Graph endpoint and phone number id out of the stream
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    root.handlers[:] = [handler]
