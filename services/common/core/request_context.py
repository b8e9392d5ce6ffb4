"""
Run context management.
ContextVars carry the run id and the runtime activation id across the
coroutines of one pipeline run so every log line can be correlated.
"""

import uuid
from contextvars import ContextVar
from typing import Optional


_run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)
_activation_id_var: ContextVar[Optional[str]] = ContextVar("activation_id", default=None)


def get_run_id() -> Optional[str]:
    """Get the current run id."""
    return _run_id_var.get()


def get_activation_id() -> Optional[str]:
    """Get the activation id of the action that started this run."""
    return _activation_id_var.get()


def start_run(activation_id: Optional[str] = None) -> str:
    """
    Generate a new run id and bind it (and the activation id, if any) to the
    current context.
    """
    run_id = uuid.uuid4().hex
    _run_id_var.set(run_id)
    _activation_id_var.set(activation_id or None)
    return run_id


def clear_run() -> None:
    """Clear the run context."""
    _run_id_var.set(None)
    _activation_id_var.set(None)
