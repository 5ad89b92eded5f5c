"""Scoped logging context backed by contextvars.

Fields pushed here (document path, job id, candidate email...) are merged into
every log record emitted while the scope is active.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("workbench_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return dict(LogContextVar.get())


def push_log_context(**fields: Any) -> Token:
    """Merge fields into the active context.

    Args:
        **fields: Key-value pairs to attach to subsequent log records

    Returns:
        Token for :func:`pop_log_context`

    Example:
        >>> token = push_log_context(document="resume.pdf")
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by ``token``."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mainly useful in tests."""
    LogContextVar.set({})


class log_context:
    """Context manager that scopes logging fields to a block.

    Example:
        >>> with log_context(job_id=7):
        ...     logger.info("Ranking candidates")  # record carries job_id=7
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
