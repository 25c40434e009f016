"""Observability module for structured logging."""

from flowtrace.observability.logging import (
    bind_session_context,
    clear_session_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    "bind_session_context",
    "clear_session_context",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
