"""Context-local storage for request tracking.

Uses a context variable rather than thread-local storage so the request ID
follows asyncio tasks and ``sync_to_async`` hops inside the engine.
"""

from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str) -> None:
    """Store the request ID for the current context.

    Args:
        request_id: The unique request identifier to store.
    """
    _request_id.set(request_id)


def get_request_id() -> str | None:
    """Retrieve the request ID for the current context.

    Returns:
        The current request ID, or None if not set.
    """
    return _request_id.get()


def clear_request_id() -> None:
    """Clear the request ID once request processing is complete."""
    _request_id.set(None)
