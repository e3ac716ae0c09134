"""
Correlation ID generation and context management.

Every report operation runs under one correlation ID so the log lines of
its post-commit effects can be grouped together.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Context variable for operation-scoped correlation ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short, unique correlation ID.

    Returns:
        8-character hexadecimal string.
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """
    Get the current correlation ID.

    Returns:
        The correlation ID for the current context, or empty string if not set.
    """
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: The correlation ID to set.
    """
    correlation_id_var.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Run a block under a correlation ID.

    An ID already present in the context is reused, so nested scopes share
    the caller's ID. The previous value is restored on exit.

    Args:
        correlation_id: Explicit ID to use instead of the inherited/generated one.

    Yields:
        The active correlation ID.
    """
    active = correlation_id or get_correlation_id() or generate_correlation_id()
    token = correlation_id_var.set(active)
    try:
        yield active
    finally:
        correlation_id_var.reset(token)
