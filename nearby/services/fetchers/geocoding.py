from __future__ import annotations

from typing import Any

import httpx

from nearby.core.config import get_settings
from nearby.core.errors import ResponseError
from nearby.schemas.location import BoundingBox, ZoneIdentifier
from nearby.services.http import execute, run_blocking

ZONE_FIELDS = (
    "road",
    "hamlet",
    "village",
    "suburb",
    "city",
    "town",
    "municipality",
    "county",
)


async def fetch_zone(client: httpx.AsyncClient, lat: float, lon: float) -> ZoneIdentifier:
    settings = get_settings()
    request = client.build_request(
        "GET",
        f"{settings.nominatim_base_url}/reverse",
        params={
            "lat": lat,
            "lon": lon,
            "format": "json",
            "addressdetails": "1",
        },
        timeout=settings.nominatim_timeout_sec,
    )
    return await execute(client, request, _parse_zone)


def fetch_zone_sync(
    lat: float, lon: float, transport: httpx.AsyncBaseTransport | None = None
) -> ZoneIdentifier:
    return run_blocking(lambda client: fetch_zone(client, lat, lon), transport=transport)


async def fetch_bounding_box(
    client: httpx.AsyncClient, parish: str, municipality: str, district: str
) -> BoundingBox | None:
    """Bounding box of the first search hit for the area, or None when nothing matches."""
    settings = get_settings()
    request = client.build_request(
        "GET",
        f"{settings.nominatim_base_url}/search",
        params={
            "q": f"{parish}, {municipality}, {district}, Portugal",
            "format": "json",
            "limit": "1",
        },
        timeout=settings.bbox_timeout_sec,
    )
    return await execute(client, request, _parse_bounding_box)


def _parse_zone(payload: Any) -> ZoneIdentifier:
    address = payload.get("address") if isinstance(payload, dict) else None
    if not isinstance(address, dict):
        raise ResponseError("Address data not found in response")

    return ZoneIdentifier(**{name: _as_str(address.get(name)) for name in ZONE_FIELDS})


def _parse_bounding_box(payload: Any) -> BoundingBox | None:
    if not isinstance(payload, list) or not payload:
        return None

    raw = payload[0].get("boundingbox") if isinstance(payload[0], dict) else None
    if not isinstance(raw, list) or len(raw) < 4:
        raise ResponseError("Bounding box not available")
    try:
        # Nominatim orders the box as [min_lat, max_lat, min_lon, max_lon]
        return BoundingBox(
            min_lat=float(raw[0]),
            max_lat=float(raw[1]),
            min_lon=float(raw[2]),
            max_lon=float(raw[3]),
        )
    except (TypeError, ValueError) as exc:
        raise ResponseError("Bounding box is not numeric") from exc


def _as_str(value) -> str:
    if value is None:
        return ""
    return str(value).strip()
