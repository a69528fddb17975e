from __future__ import annotations

from typing import Iterable

import httpx
import structlog

from nearby.core.errors import NearbyError
from nearby.core.result import Result, Success, failure_from
from nearby.schemas.location import ZoneIdentifier
from nearby.services.fetchers.geocoding import fetch_zone_sync
from nearby.services.fetchers.housing_prices import resolve_housing_price_sync
from nearby.services.i18n import label

log = structlog.get_logger(__name__)

UNKNOWN_ZONE_SIZE = 3


def fetch_zone_result(
    lat: float, lon: float, transport: httpx.AsyncBaseTransport | None = None
) -> Result[ZoneIdentifier]:
    try:
        return Success(fetch_zone_sync(lat, lon, transport=transport))
    except NearbyError as exc:
        log.warning("zone_lookup_failed", lat=lat, lon=lon, error=str(exc))
        return failure_from(exc)


def fetch_house_sales(
    admin_names: Iterable[str], transport: httpx.AsyncBaseTransport | None = None
) -> Result[int]:
    names = list(admin_names)
    try:
        return Success(resolve_housing_price_sync(names, transport=transport))
    except NearbyError as exc:
        log.warning("housing_lookup_failed", names=names, error=str(exc))
        return failure_from(exc)


def resolve_admin_chain(
    admin_names: Iterable[str] | None, zone: ZoneIdentifier | None
) -> list[str]:
    """Pre-known names win; otherwise the chain is derived from the zone."""
    names = [_as_str(name) for name in admin_names or ()]
    names = [name for name in names if name]
    if names:
        return names
    if zone is None:
        return []
    return zone.admin_chain()


def display_names(
    zone: ZoneIdentifier | None,
    admin_names: Iterable[str] | None = None,
    lang: str = "en",
) -> list[str]:
    names = resolve_admin_chain(admin_names if zone is None else None, zone)
    if names:
        return names
    return [label("unknown", lang)] * UNKNOWN_ZONE_SIZE


def _as_str(value) -> str:
    if value is None:
        return ""
    return str(value).strip()
