"""
Request execution layer shared by every provider adapter.

Adapters prepare an ``httpx.Request`` and hand it to :func:`execute` together
with a transform over the decoded JSON body. Failures are mapped to the two
provider error types and never retried here:

- ``RequestError``: the call itself failed (DNS, connect, timeout, undecodable
  body, redirect loop).
- ``ResponseError``: non-2xx status, empty body or a body that is not JSON.

Exceptions raised by the transform itself propagate unchanged.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import httpx
import structlog

from nearby.core.config import get_settings
from nearby.core.errors import RequestError, ResponseError

T = TypeVar("T")

log = structlog.get_logger(__name__)


def new_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    settings = get_settings()
    return httpx.AsyncClient(
        headers={
            "User-Agent": settings.user_agent,
            "Accept-Language": settings.accept_language,
            "Accept": "application/json",
        },
        transport=transport,
        follow_redirects=True,
    )


async def execute(
    client: httpx.AsyncClient,
    request: httpx.Request,
    transform: Callable[[Any], T],
) -> T:
    url = str(request.url)
    try:
        response = await client.send(request)
    except httpx.RequestError as exc:
        log.warning("upstream_unreachable", url=url, error=repr(exc))
        raise RequestError(url, exc) from exc

    if not response.is_success or not response.content:
        status_line = f"{response.status_code} {response.reason_phrase}".strip()
        log.warning("upstream_unsuccessful", url=url, status=status_line)
        raise ResponseError(status_line, url=url)

    try:
        payload = response.json()
    except ValueError as exc:
        raise ResponseError("body is not valid JSON", url=url) from exc

    return transform(payload)


async def _with_client(
    fn: Callable[[httpx.AsyncClient], Awaitable[T]],
    transport: httpx.AsyncBaseTransport | None,
) -> T:
    async with new_client(transport) as client:
        return await fn(client)


def run_blocking(
    fn: Callable[[httpx.AsyncClient], Awaitable[T]],
    transport: httpx.AsyncBaseTransport | None = None,
) -> T:
    """Run ``fn(client)`` to completion for call sites that cannot await."""
    return asyncio.run(_with_client(fn, transport))
