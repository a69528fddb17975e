from __future__ import annotations

from typing import Any, Iterable

import httpx

from nearby.core.config import get_settings
from nearby.core.errors import ResponseError
from nearby.schemas.location import Amenity, BoundingBox, Place, RoadSegment
from nearby.services.http import execute

# Overpass area ids are relation ids shifted by this offset.
AREA_ID_OFFSET = 3_600_000_000
DISTRICT_ADMIN_LEVEL = 6
COUNCIL_ADMIN_LEVEL = 7


async def fetch_places(
    client: httpx.AsyncClient, lat: float, lon: float, radius_m: float
) -> list[Place]:
    """Points of interest (tagged nodes) within ``radius_m`` meters of the point."""
    query = build_around_query("node", lat, lon, radius_m)
    return await execute(client, overpass_request(client, query), _parse_places)


async def fetch_road_segments(
    client: httpx.AsyncClient, lat: float, lon: float, radius_m: float
) -> list[RoadSegment]:
    query = build_around_query("way", lat, lon, radius_m, filters=("highway",))
    return await execute(client, overpass_request(client, query), _parse_road_segments)


async def fetch_council_id(
    client: httpx.AsyncClient,
    area_id: int,
    council: str,
    timeout: float | httpx.Timeout | None = None,
) -> int:
    """
    Returns the relation id of the council named exactly ``council`` inside the
    given Overpass area, or 0 when no boundary carries that name.
    """
    query = f"""
[out:json];
area({area_id})->.searchArea;
(
  relation(area.searchArea)[admin_level={COUNCIL_ADMIN_LEVEL}];
);
out tags;
""".strip()
    request = overpass_request(client, query, timeout=timeout)
    return await execute(client, request, lambda payload: _match_relation_id(payload, council))


async def fetch_district_id(
    client: httpx.AsyncClient,
    district: str,
    timeout: float | httpx.Timeout | None = None,
) -> int:
    """Relation id of the Portuguese district named exactly ``district``, or 0."""
    name = district.replace("\\", "\\\\").replace('"', '\\"')
    query = f"""
[out:json];
area["ISO3166-1"="PT"][admin_level=2]->.country;
(
  relation(area.country)["boundary"="administrative"][admin_level={DISTRICT_ADMIN_LEVEL}]["name"="{name}"];
);
out tags;
""".strip()
    request = overpass_request(client, query, timeout=timeout)
    return await execute(client, request, lambda payload: _match_relation_id(payload, district))


async def fetch_amenities_in_bbox(
    client: httpx.AsyncClient, bbox: BoundingBox, tags: Iterable[str]
) -> list[Amenity]:
    settings = get_settings()
    query = build_bbox_query(bbox, tags)
    request = overpass_request(client, query, timeout=settings.amenities_timeout_sec)
    return await execute(client, request, _parse_amenities)


def build_around_query(
    element_type: str,
    lat: float,
    lon: float,
    radius_m: float,
    filters: Iterable[str] = (),
) -> str:
    filter_string = "".join(f"[{tag}]" for tag in filters)
    return f"""
[out:json][timeout:25];
(
  {element_type}(around:{radius_m:g},{lat},{lon}){filter_string};
);
out body;
""".strip()


def build_bbox_query(bbox: BoundingBox, tags: Iterable[str]) -> str:
    box = f"{bbox.min_lat},{bbox.min_lon},{bbox.max_lat},{bbox.max_lon}"
    lines = []
    for full_tag in tags:
        key, value = full_tag.split("=", 1)
        lines.append(f'  node["{key}"="{value}"]({box});')
    body = "\n".join(lines)
    return f"[out:json][timeout:25];\n(\n{body}\n);\nout center;"


def overpass_request(
    client: httpx.AsyncClient, query: str, timeout: float | httpx.Timeout | None = None
) -> httpx.Request:
    settings = get_settings()
    return client.build_request(
        "POST",
        settings.overpass_url,
        content=query.encode("utf-8"),
        headers={"Content-Type": "text/plain; charset=UTF-8"},
        timeout=timeout if timeout is not None else settings.overpass_timeout_sec,
    )


def _elements(payload: Any) -> list:
    elements = payload.get("elements") if isinstance(payload, dict) else None
    if not isinstance(elements, list):
        raise ResponseError("Overpass payload has no elements list")
    return [element for element in elements if isinstance(element, dict)]


def _parse_places(payload: Any) -> list[Place]:
    places: list[Place] = []
    for element in _elements(payload):
        tags = _tag_map(element.get("tags"))
        if not tags:
            continue
        try:
            places.append(
                Place(
                    type=str(element.get("type") or "node"),
                    id=int(element["id"]),
                    lat=float(element["lat"]),
                    lon=float(element["lon"]),
                    tags=tags,
                )
            )
        except (KeyError, TypeError, ValueError):
            continue
    return places


def _parse_road_segments(payload: Any) -> list[RoadSegment]:
    segments: list[RoadSegment] = []
    for element in _elements(payload):
        try:
            segments.append(
                RoadSegment(
                    type=str(element.get("type") or "way"),
                    id=int(element["id"]),
                    nodes=[int(node) for node in element.get("nodes") or []],
                    tags=_tag_map(element.get("tags")),
                )
            )
        except (KeyError, TypeError, ValueError):
            continue
    return segments


def _parse_amenities(payload: Any) -> list[Amenity]:
    amenities: list[Amenity] = []
    for element in _elements(payload):
        lat, lon = _element_lat_lon(element)
        if lat is None or lon is None or element.get("id") is None:
            continue
        amenities.append(
            Amenity(
                id=str(element["id"]),
                lat=lat,
                lon=lon,
                tags=_tag_map(element.get("tags")),
            )
        )
    return amenities


def _match_relation_id(payload: Any, name: str) -> int:
    for element in _elements(payload):
        tags = element.get("tags")
        if not isinstance(tags, dict) or tags.get("name") != name:
            continue
        try:
            return int(element["id"])
        except (KeyError, TypeError, ValueError):
            continue
    return 0


def _tag_map(tags: Any) -> dict[str, str]:
    if not isinstance(tags, dict):
        return {}
    return {str(key): str(value) for key, value in tags.items() if value is not None}


def _element_lat_lon(element: dict) -> tuple[float | None, float | None]:
    if element.get("type") == "node" or "lat" in element:
        return _to_float(element.get("lat")), _to_float(element.get("lon"))
    center = element.get("center")
    if isinstance(center, dict):
        return _to_float(center.get("lat")), _to_float(center.get("lon"))
    return None, None


def _to_float(value) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
