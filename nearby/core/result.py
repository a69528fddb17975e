from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from nearby.core.errors import RequestError, ResponseError

T = TypeVar("T")


class ServiceError(str, Enum):
    API_REQUEST_ERROR = "api_request_error"
    API_RESPONSE_ERROR = "api_response_error"
    API_TIMEOUT = "api_timeout"
    INVALID_QUERY = "invalid_query"
    LOCATION_NOT_FOUND = "location_not_found"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: ServiceError
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]


def classify(exc: BaseException) -> ServiceError:
    if isinstance(exc, RequestError):
        return ServiceError.API_TIMEOUT if exc.timed_out else ServiceError.API_REQUEST_ERROR
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return ServiceError.API_TIMEOUT
    if isinstance(exc, ResponseError):
        return ServiceError.API_RESPONSE_ERROR
    return ServiceError.INTERNAL_ERROR


def failure_from(exc: BaseException) -> Failure:
    return Failure(error=classify(exc), detail=str(exc))
