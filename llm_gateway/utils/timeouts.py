"""Per-attempt deadlines for provider calls.

Every provider attempt runs inside :func:`attempt_deadline`.  When the
deadline fires, the in-flight SDK call is cancelled and
:class:`DeadlineExceeded` is raised in its place; the classifier turns that
into a TIMEOUT error.  Cancellation requested by the *caller* (e.g. the HTTP
request was dropped) is left alone and propagates as
``asyncio.CancelledError``, so the two cases can always be told apart.

Usage::

    async with attempt_deadline(request.timeout_ms):
        response = await client.messages.create(...)

The timer is released on every exit path by the ``async with`` block, so
callers never clean it up by hand.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class DeadlineExceeded(Exception):
    """Raised when an attempt outlives its own deadline."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"attempt deadline of {timeout_ms}ms exceeded")
        self.timeout_ms = timeout_ms


@asynccontextmanager
async def attempt_deadline(timeout_ms: int) -> AsyncIterator[None]:
    """Bound the enclosed block to ``timeout_ms`` milliseconds of wall-clock time."""
    scope = asyncio.timeout(timeout_ms / 1000)
    try:
        async with scope:
            yield
    except TimeoutError as exc:
        # A TimeoutError raised by the SDK itself is not ours to relabel.
        if scope.expired():
            raise DeadlineExceeded(timeout_ms) from exc
        raise
