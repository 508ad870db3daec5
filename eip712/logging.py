"""
eip712.logging
--------------

Structured logging for the hashing pipeline:
- JSON or concise (optionally colored) text formats
- Context-local fields via `contextvars` (trace_id, primary_type, version, ...)
- Safe value coercion (bytes → 0x-hex, enums → value)

The library itself never installs handlers; applications opt in:

    from eip712 import logging as elog

    elog.configure(json=False, level="DEBUG")
    with elog.trace_scope():
        elog.bind(component="wallet")
        digest = hash_typed_data(doc)

Log calls attach fields through ``extra={...}``; both formatters render them.
"""

from __future__ import annotations

import datetime as _dt
import enum
import io
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

# ----------------------------
# Context
# ----------------------------

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_EIP712_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = ("trace_id", "component", "primary_type", "version")

# Attributes every LogRecord carries; anything else came in through `extra`.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    """Merge fields into the active context."""
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce_value(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


@contextmanager
def trace_scope(trace_id: Optional[str] = None, **fields: Any) -> Iterator[str]:
    """
    Ensure a trace_id (plus any extra *fields*) for the duration of the
    scope; the prior context is restored on exit.
    """
    prev = dict(_LOG_CONTEXT.get())
    tid = trace_id or prev.get("trace_id") or short_uuid()
    try:
        bind(trace_id=tid, **fields)
        yield tid
    finally:
        _LOG_CONTEXT.set(prev)


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


# ----------------------------
# Formatters
# ----------------------------


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float)):
        return v
    if isinstance(v, enum.Enum):
        return v.value
    if isinstance(v, str):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    if isinstance(v, (list, tuple)):
        return [_coerce_value(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _coerce_value(x) for k, x in v.items()}
    return str(v)


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce_value(v)
        for k, v in record.__dict__.items()
        if k not in _RECORD_ATTRS and not k.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(context())
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, separators=(",", ":"), default=str)


_GREY = "\x1b[90m"
_RESET = "\x1b[0m"
_LEVEL_COLOR = {
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[35m",
}


def _supports_color(stream: Any) -> bool:
    try:
        return stream.isatty() and os.environ.get("NO_COLOR") is None
    except (AttributeError, ValueError):
        return False


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2026-01-05T12:34:56.789+00:00 | DEBUG | eip712.typed_data | trace_id=abc123 | signable hash digest=0x…
    """

    def __init__(self, stream: Optional[io.TextIOBase] = None):
        super().__init__()
        self._color = _supports_color(stream) if stream is not None else False

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        ctx_str = " ".join(f"{k}={ctx[k]}" for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None)
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items() if k not in ctx)

        lvl = f"{record.levelname:<5}"
        if self._color:
            lvl = f"{_LEVEL_COLOR.get(record.levelno, '')}{lvl}{_RESET}"
            if ctx_str:
                ctx_str = f"{_GREY}{ctx_str}{_RESET}"

        line = f"{_utcnow_iso()} | {lvl} | {record.name}"
        if ctx_str:
            line += f" | {ctx_str}"
        line += f" | {record.getMessage()}"
        if extras:
            line += f" {extras}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


# ----------------------------
# Public setup API
# ----------------------------


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: Any = None,
    logger_name: str = "eip712",
) -> logging.Logger:
    """
    Attach a console handler to the package logger (not the root logger).

    Parameters
    ----------
    json : bool | None
        If None, determined by env EIP712_LOG_FORMAT=(json|text); text otherwise.
    level : str | int
        Minimum log level.
    stream : TextIO
        Stream for the console handler (default: stderr).
    """
    stream = stream if stream is not None else sys.stderr
    if json is None:
        json = os.environ.get("EIP712_LOG_FORMAT", "").strip().lower() == "json"

    logger = logging.getLogger(logger_name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter() if json else TextFormatter(stream))
    logger.addHandler(handler)
    logger.setLevel(_coerce_level(level))
    return logger


def configure_from_config(cfg: Any, *, stream: Any = None) -> logging.Logger:
    """Configure from an `eip712.config.Config` (log_level / log_format)."""
    return configure(
        json=cfg.log_format == "json",
        level=cfg.log_level,
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "eip712")


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


__all__ = [
    "context",
    "bind",
    "unbind",
    "clear_context",
    "trace_scope",
    "short_uuid",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "configure_from_config",
    "get_logger",
]
