"""
Structured Logging

JSON log lines (or plain text for local runs) carrying the request id of the
HTTP call that produced them, plus the filter/accessory/booking the line is
about when a service provides one.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Optional, Any, Dict, List
from contextvars import ContextVar

# Set by RequestIdMiddleware for the duration of a request
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

_CONTEXT_FIELDS = ("entity_type", "entity_id", "duration_ms")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        request_id = request_id_var.get()
        if request_id:
            payload["request_id"] = request_id

        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value

        data = getattr(record, "data", None)
        if data:
            payload["data"] = data

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """
    Adapter with helpers for the events worth aggregating: committed
    bookings, rejected submissions and request timings.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def event(
        self,
        level: int,
        msg: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[Any] = None,
        duration_ms: Optional[float] = None,
        **data
    ):
        extra: Dict[str, Any] = {"data": data}
        if entity_type:
            extra["entity_type"] = entity_type
        if entity_id is not None:
            extra["entity_id"] = str(entity_id)
        if duration_ms is not None:
            extra["duration_ms"] = round(duration_ms, 2)
        self.log(level, msg, extra=extra)

    def bookings_committed(self, filter_id: int, booking_count: int, service_dates: List[str]):
        self.event(
            logging.INFO,
            f"Committed {booking_count} bookings on filter {filter_id}",
            entity_type="filter",
            entity_id=filter_id,
            booking_count=booking_count,
            service_dates=service_dates,
        )

    def capacity_rejected(self, filter_id: int, violations: List[dict]):
        self.event(
            logging.WARNING,
            f"Rejected bookings on filter {filter_id}: {len(violations)} accessory shortfalls",
            entity_type="filter",
            entity_id=filter_id,
            violations=violations,
        )

    def api_request(self, method: str, path: str, status_code: int, duration_ms: float):
        self.event(
            logging.INFO,
            f"{method} {path} -> {status_code}",
            duration_ms=duration_ms,
            status_code=status_code,
        )


def setup_logging(level: str = "INFO", json_format: bool = True, include_uvicorn: bool = True) -> None:
    """
    Route every logger through one stdout handler.

    json_format=False gives a readable line format for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)-7s %(name)s: %(message)s'))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = [handler]

    if include_uvicorn:
        for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
            logging.getLogger(name).handlers = [handler]
            logging.getLogger(name).propagate = False

    # SQL echo and client chatter stay quiet unless asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name), {})


def set_request_context(request_id: str):
    request_id_var.set(request_id)


def clear_request_context():
    request_id_var.set('')
