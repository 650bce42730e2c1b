"""Observability: structured logging."""

from pricing_engine.observability.logging import (
    bind_session_context,
    clear_session_context,
    configure_logging,
)

__all__ = [
    "bind_session_context",
    "clear_session_context",
    "configure_logging",
]
