"""Context propagation for session correlation across async boundaries."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


# Per-task context carrying the active session id
session_context: ContextVar[dict | None] = ContextVar("session_context", default=None)


def generate_session_id() -> str:
    """Generate a 12-char hex session ID."""
    return uuid4().hex[:12]


def get_session_context() -> dict:
    """Get the current session context (empty when no session is active)."""
    return session_context.get() or {}


@contextmanager
def bind_session(session_id: str | None = None, **extra: object) -> Iterator[str]:
    """Bind a session id for the duration of the block and restore the previous context."""
    resolved = session_id or generate_session_id()
    token = session_context.set({"session_id": resolved, **extra})
    try:
        yield resolved
    finally:
        session_context.reset(token)
