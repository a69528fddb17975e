"""
Housing price resolution with a coarse-grained fallback chain.

Given administrative names ordered fine to coarse (district last):

1. The district's OSM relation id comes from a local JSON table; districts
   missing from it are looked up on Overpass by name.
2. With two names or fewer, the district price is used directly.
3. Otherwise the council boundary id is searched inside the district area;
   no match (0) falls back to the district price.
4. The council series is searched for the municipality, then the council,
   then the municipality again. That third lookup repeats the first one and
   is kept as-is because callers rely on the current order.

0 is the "unresolved" price. Only an empty council series is an error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import httpx
import structlog

from nearby.core.config import get_settings
from nearby.core.errors import ResponseError
from nearby.services.fetchers.overpass_osm import (
    AREA_ID_OFFSET,
    fetch_council_id,
    fetch_district_id,
)
from nearby.services.http import execute, run_blocking

log = structlog.get_logger(__name__)


async def resolve_housing_price(
    client: httpx.AsyncClient,
    admin_names: Iterable[str],
    district_table_path: str | None = None,
) -> int:
    names = [name.strip() for name in admin_names if name and name.strip()]
    if not names:
        return 0

    district = names[-1]
    osm_id = lookup_district_id(district, district_table_path)
    if osm_id is None:
        osm_id = await fetch_district_id(client, district, timeout=_timeout()) or None
    if len(names) <= 2:
        return await fetch_district_price(client, osm_id, district)

    council = names[-2]
    municipality = names[-3]
    council_id = 0
    if osm_id is not None:
        council_id = await fetch_council_id(
            client, osm_id + AREA_ID_OFFSET, council, timeout=_timeout()
        )
    if council_id == 0:
        log.info("council_unresolved", council=council, district=district)
        return await fetch_district_price(client, osm_id, district)

    return await fetch_council_price(client, council_id, council, municipality)


def resolve_housing_price_sync(
    admin_names: Iterable[str],
    district_table_path: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    names = list(admin_names)
    return run_blocking(
        lambda client: resolve_housing_price(client, names, district_table_path),
        transport=transport,
    )


async def fetch_council_price(
    client: httpx.AsyncClient, council_id: int, council: str, municipality: str
) -> int:
    settings = get_settings()
    request = client.build_request(
        "GET", f"{settings.housing_base_url}/concelho/{council_id}", timeout=_timeout()
    )
    return await execute(
        client, request, lambda payload: _council_price(payload, council, municipality)
    )


async def fetch_district_price(
    client: httpx.AsyncClient, osm_id: int | None, district: str
) -> int:
    if osm_id is None:
        log.info("district_unresolved", district=district)
        return 0

    settings = get_settings()
    request = client.build_request(
        "GET", f"{settings.housing_base_url}/distrito/{osm_id}", timeout=_timeout()
    )
    return await execute(client, request, lambda payload: _district_price(payload, district))


def lookup_district_id(district: str, path: str | None = None) -> int | None:
    return read_district_ids(path or get_settings().district_table_path).get(
        district.strip().lower()
    )


def read_district_ids(path: str) -> dict[str, int]:
    table_path = Path(path)
    if not table_path.exists():
        log.warning("district_table_missing", path=str(table_path))
        return {}

    with table_path.open("r", encoding="utf-8") as f:
        rows = json.load(f)

    ids: dict[str, int] = {}
    for row in rows:
        name = str(row.get("name") or "").strip().lower()
        osm_id = row.get("osm_id")
        if name and osm_id is not None:
            ids[name] = int(osm_id)
    return ids


def _council_price(payload: Any, council: str, municipality: str) -> int:
    if not isinstance(payload, list) or not payload:
        raise ResponseError("Invalid or empty JSON response")
    entry = payload[-1]
    if not isinstance(entry, dict):
        raise ResponseError("Invalid or empty JSON response")

    for key in (municipality, council, municipality):
        price = _price_for_key(entry, key)
        if price is not None:
            return price
    return 0


def _district_price(payload: Any, district: str) -> int:
    if not isinstance(payload, list):
        raise ResponseError("District series is not a list")

    prices = [
        entry[district]
        for entry in payload
        if isinstance(entry, dict) and _is_number(entry.get(district))
    ]
    return int(prices[-1]) if prices else 0


def _price_for_key(entry: dict, name: str) -> int | None:
    needle = name.lower()
    for key, value in entry.items():
        if needle in str(key).lower():
            return int(value) if _is_number(value) else None
    return None


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _timeout() -> httpx.Timeout:
    settings = get_settings()
    return httpx.Timeout(
        settings.housing_read_timeout_sec, connect=settings.housing_connect_timeout_sec
    )
