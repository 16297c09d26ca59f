"""Observability module: structured logging and session correlation."""

from fzf_import.observability.context import (
    bind_session,
    generate_session_id,
    get_session_context,
    session_context,
)
from fzf_import.observability.logging import JsonFormatter, configure_logging


__all__ = [
    "JsonFormatter",
    "bind_session",
    "configure_logging",
    "generate_session_id",
    "get_session_context",
    "session_context",
]
