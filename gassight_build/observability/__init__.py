from __future__ import annotations

from .context import add_error, bind_context, current_stage, set_stage
from .ids import new_trace_id
from .logging import configure_logging, get_logger

__all__ = [
    "add_error",
    "bind_context",
    "configure_logging",
    "current_stage",
    "get_logger",
    "new_trace_id",
    "set_stage",
]
