"""Structured JSON logging to standard error."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from typing import Any

_FIELDS_ATTR = "structured_fields"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname.lower(),
            "time": datetime.fromtimestamp(record.created)
            .astimezone()
            .isoformat(timespec="milliseconds"),
            "message": record.getMessage(),
        }
        entry.update(getattr(record, _FIELDS_ATTR, {}))
        return json.dumps(entry, default=str)


class _StderrHandler(logging.Handler):
    """Writes to whatever sys.stderr is at the time of each record."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stderr.write(self.format(record) + "\n")
            sys.stderr.flush()
        except Exception:
            self.handleError(record)


def _build_logger() -> logging.Logger:
    log = logging.getLogger("auctionhouse")
    log.setLevel(logging.INFO)
    log.propagate = False
    if not log.handlers:
        handler = _StderrHandler()
        handler.setFormatter(_JsonFormatter())
        log.addHandler(handler)
    return log


_log = _build_logger()


def info(message: str, **kwargs: Any) -> None:
    """Log an informational message with extra structured fields."""
    _log.info(message, extra={_FIELDS_ATTR: kwargs})


def error(message: str, err: BaseException | None, **kwargs: Any) -> None:
    """Log an error message, recording the error under the "error" field."""
    fields = dict(kwargs)
    fields["error"] = None if err is None else str(err)
    _log.error(message, extra={_FIELDS_ATTR: fields})