# src/logging/context.py — v2
"""Contextual logging support: attach request_id, user_id, stage to log records.

The request id is the correlation identifier returned in response metadata,
so a single request can be traced across stage, cache and retry logs.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_user_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "user_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    user_id: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        user_id=_user_id.get(),
        stage=_stage.get(),
    )


def set_request_context(request_id: str, user_id: str | None = None) -> None:
    """Set request-level context (called once at request entry)."""
    _request_id.set(request_id)
    _user_id.set(user_id)


def set_stage_context(stage: str | None) -> None:
    """Set the analysis stage currently running."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _user_id.set(None)
    _stage.set(None)
