from __future__ import annotations

from contextvars import ContextVar


_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)
_build_type: ContextVar[str | None] = ContextVar("build_type", default=None)
_stage: ContextVar[str | None] = ContextVar("stage", default=None)
_errors: ContextVar[list[str] | None] = ContextVar("errors", default=None)


def bind_context(*, trace_id: str, build_type: str) -> None:
    _trace_id.set(trace_id)
    _build_type.set(build_type)
    _stage.set(None)
    _errors.set([])


def set_stage(stage: str) -> None:
    _stage.set(stage)


def current_stage() -> str | None:
    return _stage.get()


def add_error(message: str) -> None:
    errs = list(_errors.get() or [])
    errs.append(message)
    _errors.set(errs)


def snapshot() -> dict[str, object]:
    """Return the current resolution-pass context for logging."""

    out: dict[str, object] = {}
    if (v := _trace_id.get()) is not None:
        out["trace_id"] = v
    if (v := _build_type.get()) is not None:
        out["build_type"] = v
    if (v := _stage.get()) is not None:
        out["stage"] = v
    if errs := _errors.get():
        out["errors"] = list(errs)
    return out
