"""Exception hierarchy for outbound provider calls."""

from __future__ import annotations

import httpx


class NearbyError(Exception):
    """Base exception for all nearby errors."""


class RequestError(NearbyError):
    """The call itself failed before a usable response (DNS, connect, timeout, redirects)."""

    def __init__(self, url: str, cause: Exception | None = None):
        self.url = url
        self.cause = cause
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(f"Request to {url} failed{detail}")

    @property
    def timed_out(self) -> bool:
        return isinstance(self.cause, httpx.TimeoutException)


class ResponseError(NearbyError):
    """The upstream service answered with an unsuccessful status or an unusable body."""

    def __init__(self, message: str, url: str | None = None):
        self.message = message
        self.url = url
        where = f" from {url}" if url else ""
        super().__init__(f"Unusable response{where}: {message}")
