"""Structured logging with run, package and source-file context.

Every record emitted while a scan is running carries the run id plus the Go
package and file currently being written, so per-file log lines can be
grepped out of a whole-tree run.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

_UNSET = "-"

_CONTEXT: dict[str, contextvars.ContextVar[str]] = {
    name: contextvars.ContextVar(name, default=_UNSET)
    for name in ("run_id", "package", "source")
}

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | "
    "%(package)s:%(source)s | %(name)s | %(message)s"
)


class _ScanContextFilter(logging.Filter):
    """Copy the current scan context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, var in _CONTEXT.items():
            setattr(record, name, var.get())
        return True


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_structured_logging(level: int | str = logging.INFO) -> None:
    """Install the scan log format and context filter on the root handlers.

    Safe to call more than once; the level is updated and the filter is
    attached to handlers that do not carry it yet.
    """
    level = _resolve_level(level)
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    for handler in root_logger.handlers:
        if not any(isinstance(f, _ScanContextFilter) for f in handler.filters):
            handler.addFilter(_ScanContextFilter())


def set_run_id(run_id: Optional[str] = None) -> str:
    """Set the run id, generating a short one when none is given."""
    value = run_id or uuid.uuid4().hex[:12]
    _CONTEXT["run_id"].set(value)
    return value


def get_run_id() -> str:
    return _CONTEXT["run_id"].get()


def get_source() -> str:
    return _CONTEXT["source"].get()


def get_package() -> str:
    return _CONTEXT["package"].get()


@contextmanager
def file_scope(source: str, package: Optional[str] = None) -> Iterator[None]:
    """Tag logs emitted inside the block with a Go file and its package."""
    tokens = [
        (_CONTEXT["source"], _CONTEXT["source"].set(source)),
        (_CONTEXT["package"], _CONTEXT["package"].set(package or _UNSET)),
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
