"""Structured JSON logging with secret masking and request correlation.

Every line is a single JSON object. Values stored under sensitive keys and
token-looking substrings are masked before they reach any handler, so the
DominioDZ envelope can be logged as-is.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
import time
import uuid
from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from logging.handlers import RotatingFileHandler
from typing import Any

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(value: str | None = None) -> str:
    """Set current request_id (or generate new). Returns active id."""
    rid = value or uuid.uuid4().hex
    _request_id.set(rid)
    return rid


def get_request_id() -> str:
    """Get current request_id for contextual logging."""
    return _request_id.get()


_PATTERNS = [
    (re.compile(r"(?i)\bBearer\s+[A-Za-z0-9._-]{10,}\b"), "Bearer ***"),
    (re.compile(r"\beyJhbGciOi[A-Za-z0-9+/=_-]{20,}\b"), "eyJ***"),
    # Opaque API tokens (long hashes/base64/hex)
    (re.compile(r"\b[A-Za-z0-9+/=_-]{32,}\b"), "***"),
]

_SENSITIVE_KEYS = {
    "authorization",
    "token",
    "dominio_token",
    "x-api-key",
    "api_key",
    "password",
    "secret",
}

# LogRecord attributes that are not user-supplied extras
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)


def mask_value(v: Any) -> Any:
    """Recursively mask sensitive data in any structure."""
    if v is None or isinstance(v, (int, float, bool)):
        return v
    if is_dataclass(v) and not isinstance(v, type):
        v = asdict(v)
    if isinstance(v, Mapping):
        return {
            k: ("***" if str(k).lower() in _SENSITIVE_KEYS else mask_value(val))
            for k, val in v.items()
        }
    if isinstance(v, (list, tuple, set)):
        return type(v)(mask_value(i) for i in v)
    s = str(v)
    for rx, repl in _PATTERNS:
        s = rx.sub(repl, s)
    return s


class JsonFormatter(logging.Formatter):
    """JSON log formatter with automatic secret masking."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": mask_value(record.getMessage()),
            "func": record.funcName,
            "line": record.lineno,
            "request_id": get_request_id() or None,
        }

        extras = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        if extras:
            payload["extra"] = mask_value(extras)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)


def setup_logging(
    level: str | int = "INFO",
    to_stdout: bool = True,
    file_path: str | None = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Initialize structured JSON logging on the root logger.

    Args:
        level: Log level (INFO, DEBUG, WARNING, ERROR)
        to_stdout: Enable stdout logging (for containers/journalctl)
        file_path: Path to JSON log file (None to disable file logging)
        max_bytes: Max log file size before rotation (default: 5MB)
        backup_count: Number of backup files to keep

    """
    root = logging.getLogger()
    root.setLevel(logging.getLevelName(level.upper()) if isinstance(level, str) else level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = JsonFormatter()

    if to_stdout:
        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(fmt)
        root.addHandler(sh)

    if file_path:
        os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)
        fh = RotatingFileHandler(
            file_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # uvicorn installs its own handlers; route them through ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Get logger instance by name."""
    return logging.getLogger(name)


__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "mask_value",
    "JsonFormatter",
]
