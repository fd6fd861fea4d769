"""Structured Logging — JSON log lines and a per-request access log.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Marketplace context (user_id, order_id, group_id, amount, ...) is copied
      from `extra` only when present
    - Each HTTP request logs exactly one access line: method, path, status, duration_ms
    - Repeated setup_logging calls replace the handler instead of stacking duplicates

Design Decisions:
    - Access logging as a plain ASGI-level HTTP middleware function; health
      probes are skipped so orchestrator polling does not flood the log
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import Request

_EXTRA_KEYS = (
    "user_id", "order_id", "group_id", "error_code", "path", "method",
    "status_code", "duration_ms", "notification_type", "amount", "service", "attempt",
)
_QUIET_PREFIXES = ("/api/v1/health",)

access_logger = logging.getLogger("kringp.access")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    global _handler
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    if _handler is not None:
        logging.root.removeHandler(_handler)
    _handler = handler
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


async def log_requests(request: Request, call_next):
    """HTTP middleware: one access line per request."""
    path = request.url.path
    if path.startswith(_QUIET_PREFIXES):
        return await call_next(request)
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 1)
    access_logger.info(
        f"{request.method} {path} -> {response.status_code}",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
