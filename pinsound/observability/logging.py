"""
JSON logs for PinSound.

Every record carries the request it was emitted under and, when it is about
a vendor failure, which vendor (``service``) and the vendor's HTTP status.
Vendor fields come either from ``extra=vendor_fields(exc)`` or from an
``UpstreamError`` attached with ``exc_info``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import g, has_app_context, has_request_context, request

from pinsound.errors import UpstreamError

REQUEST_FIELDS = ("request_id", "path", "method", "remote_addr")
VENDOR_FIELDS = ("service", "vendor_status")


def vendor_fields(exc: UpstreamError) -> Dict[str, Any]:
    """``extra=`` mapping that tags a log line with the failing vendor."""
    return {"service": exc.service, "vendor_status": exc.status_code}


def _request_fields() -> Dict[str, Optional[str]]:
    fields: Dict[str, Optional[str]] = dict.fromkeys(REQUEST_FIELDS)
    if has_app_context():
        fields["request_id"] = getattr(g, "request_id", None)
    if has_request_context():
        fields["path"] = request.path
        fields["method"] = request.method
        fields["remote_addr"] = request.headers.get("X-Forwarded-For", request.remote_addr)
    return fields


class RequestContextFilter(logging.Filter):
    """Stamp records with request metadata and the vendor behind a failure."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in _request_fields().items():
            setattr(record, name, value)

        exc = record.exc_info[1] if record.exc_info else None
        if isinstance(exc, UpstreamError):
            for name, value in vendor_fields(exc).items():
                if getattr(record, name, None) is None:
                    setattr(record, name, value)
        for name in VENDOR_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; vendor keys appear only on vendor failures."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({name: getattr(record, name, None) for name in REQUEST_FIELDS})
        if getattr(record, "service", None):
            payload.update({name: getattr(record, name, None) for name in VENDOR_FIELDS})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_structured_logging(app) -> None:
    """Attach one JSON stdout handler to the root logger, however many apps are built."""
    root = logging.getLogger()
    if root.level == logging.NOTSET or root.level > logging.INFO:
        root.setLevel(logging.INFO)

    if any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestContextFilter())
    root.addHandler(handler)
    app.logger.debug("Structured JSON logging attached to the root logger.")
