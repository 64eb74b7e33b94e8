"""
Request-scoped storage for the caller's Langdock API key

This module carries the X-API-Key header value from the HTTP middleware to the
agent executor without changing the A2A SDK's handler signatures. The value
lives in a ContextVar, so every asyncio task spawned while handling a request
sees that request's key and nothing else.
"""

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TypeVar

T = TypeVar("T")

_api_key: ContextVar[str | None] = ContextVar("langdock_api_key", default=None)


def current_credential() -> str | None:
    """
    Return the API key of the innermost active credential scope.

    Returns:
        str | None: The API key, or None when no scope is active on this
                    logical path (meaning no key was supplied)

    Example:
        api_key = current_credential()
    """
    return _api_key.get()


@contextmanager
def credential_scope(api_key: str) -> Iterator[None]:
    """
    Make an API key visible to all code running inside the ``with`` block.

    The previous value is restored on exit, whether the block returns,
    raises or is cancelled, so nested scopes unwind cleanly.

    Args:
        api_key (str): The API key taken from the inbound request

    Example:
        with credential_scope(request.headers["X-API-Key"]):
            response = await call_next(request)
    """
    token = _api_key.set(api_key)
    try:
        yield
    finally:
        _api_key.reset(token)


async def with_credential(api_key: str, continuation: Callable[[], Awaitable[T]]) -> T:
    """
    Await ``continuation()`` inside a credential scope and return its result.

    Args:
        api_key (str): The API key to expose to the continuation
        continuation: Zero-argument callable returning an awaitable

    Returns:
        Whatever the continuation's awaitable resolves to

    Example:
        reply = await with_credential("sk-123", lambda: executor.execute(ctx, queue))
    """
    with credential_scope(api_key):
        return await continuation()
