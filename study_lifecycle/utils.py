"""Small helpers shared across modules."""

import inspect
from typing import Any

__all__ = ["maybe_await"]


async def maybe_await(result: Any) -> Any:
    """Await result if it is awaitable, otherwise return it as is.

    Collaborators may implement their hooks as plain functions or
    coroutines.
    """
    if inspect.isawaitable(result):
        return await result
    return result
