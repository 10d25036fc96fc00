"""Shared HTTP client helper.

Internal module, not part of the public API.  Lets every pipeline
component accept an injected :class:`httpx.AsyncClient` (one per
invocation, or a respx-mocked one in tests) while still working
standalone.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

DEFAULT_TIMEOUT_SECONDS: float = 30.0


@asynccontextmanager
async def borrow_client(
    http_client: httpx.AsyncClient | None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield *http_client* unchanged, or a fresh client closed on exit.

    An injected client is owned by the caller and is never closed here.

    Args:
        http_client: Caller-owned client, or ``None``.
        timeout: Timeout in seconds for a freshly created client.
    """
    if http_client is not None:
        yield http_client
        return
    async with httpx.AsyncClient(timeout=timeout) as client:
        yield client
