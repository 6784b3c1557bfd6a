"""
Structured JSON logging for CSV ingestion.

Every record is one JSON object per line:

    {"ts": "...", "level": "INFO", "logger": "csv_ingestion.pipeline.assembler",
     "message": "parse_completed", "run_id": "...", "source": "orders.csv",
     "rows_emitted": 42}

Messages are snake_case event names; details go in ``extra=``. Run-scoped
fields (run_id, source, config_checksum) come from LogContext and are added
to every record logged while they are bound. Exceptions that carry a
``code`` have their attributes flattened into ``exc_*`` keys.

The level defaults to the CSV_INGESTION_LOG_LEVEL environment variable,
else INFO.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, Iterator

LOG_LEVEL_ENV = "CSV_INGESTION_LOG_LEVEL"

_LOGGER_PREFIX = "csv_ingestion"


# ---------------------------------------------------------------------------
# Run context
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = ("run_id", "source", "config_checksum")

_run_context: ContextVar[dict[str, str]] = ContextVar("csv_ingestion_run_context", default={})


class LogContext:
    """Run-scoped log fields, isolated per thread and per asyncio task."""

    @staticmethod
    def set(
        *,
        run_id: str | None = None,
        source: str | None = None,
        config_checksum: str | None = None,
    ) -> None:
        """Update the given fields; None leaves a field untouched."""
        updates = {"run_id": run_id, "source": source, "config_checksum": config_checksum}
        merged = dict(_run_context.get())
        merged.update({k: v for k, v in updates.items() if v is not None})
        _run_context.set(merged)

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_run_context.get())

    @staticmethod
    def clear() -> None:
        _run_context.set({})

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Bind fields for the duration of a with-block, then restore the previous ones."""
        unknown = set(fields) - set(_CONTEXT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown log context fields: {sorted(unknown)}")
        merged = dict(_run_context.get())
        merged.update({k: v for k, v in fields.items() if v is not None})
        token = _run_context.set(merged)
        try:
            yield
        finally:
            _run_context.reset(token)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

# Attribute names every LogRecord has; anything else came in via extra=
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _to_json(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return str(obj)  # Decimal, dataclasses, enums, ...


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is None:
        return fields
    fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRS:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_to_json)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger under the csv_ingestion namespace, e.g. get_logger("pipeline.assembler")."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def _default_level() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


_setup_lock = threading.Lock()
_handler_installed = False


def configure_logging(
    *,
    level: int | None = None,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the JSON handler on the csv_ingestion logger.

    Only the first call has an effect until reset_logging() is called.
    """
    global _handler_installed
    with _setup_lock:
        if _handler_installed:
            return
        _handler_installed = True

    target = handler or logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())
    package_logger = logging.getLogger(_LOGGER_PREFIX)
    package_logger.setLevel(_default_level() if level is None else level)
    package_logger.propagate = False
    package_logger.addHandler(target)


def reset_logging() -> None:
    """Remove the handler and allow configure_logging() again. Tests only."""
    global _handler_installed
    with _setup_lock:
        _handler_installed = False
    package_logger = logging.getLogger(_LOGGER_PREFIX)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
