"""Request context variables shared with logging."""

from contextvars import ContextVar
from typing import Optional

# Context variables for the acting user and the current request
user_id_var: ContextVar[Optional[int]] = ContextVar("user_id", default=None)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_user_context(user_id: int | None) -> None:
    """Set the acting user for the current request.

    Args:
        user_id: User ID to set in context
    """
    user_id_var.set(user_id)


def get_user_context() -> int | None:
    """Get the acting user for the current request.

    Returns:
        Current user ID or None
    """
    return user_id_var.get()


def set_request_id(request_id: str | None) -> None:
    """Set the current request ID."""
    request_id_var.set(request_id)


def get_request_id() -> str | None:
    """Get the current request ID."""
    return request_id_var.get()


def clear_request_context() -> None:
    """Clear the current request context."""
    user_id_var.set(None)
    request_id_var.set(None)
