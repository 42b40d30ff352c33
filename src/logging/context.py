# src/logging/context.py — v1
"""Contextual logging support — attach request_id, path and fingerprint to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_request_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_path", default=None
)
_fingerprint: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fingerprint", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    request_path: str | None = None
    fingerprint: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        request_path=_request_path.get(),
        fingerprint=_fingerprint.get(),
    )


def set_request_context(request_id: str, request_path: str) -> None:
    """Set request-level context (called once per intercepted request)."""
    _request_id.set(request_id)
    _request_path.set(request_path)
    _fingerprint.set(None)


def set_fingerprint_context(fingerprint: str) -> None:
    """Attach the computed fingerprint once it is known."""
    _fingerprint.set(fingerprint)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _request_path.set(None)
    _fingerprint.set(None)
