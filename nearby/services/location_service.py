from __future__ import annotations

import asyncio
from typing import Iterable

import httpx
import structlog
from pydantic import ValidationError
from structlog.contextvars import bound_contextvars

from nearby.core.config import get_settings
from nearby.core.data_sources import SOURCES_BY_FIELD
from nearby.core.errors import NearbyError
from nearby.core.result import Failure, Result, ServiceError, Success, classify
from nearby.schemas.location import CompositeLocationRecord, GeoQuery, Place
from nearby.services.fetchers.geocoding import fetch_zone
from nearby.services.fetchers.housing_prices import resolve_housing_price
from nearby.services.fetchers.ine_crime import fetch_crimes
from nearby.services.fetchers.open_meteo import fetch_seasonal_weather
from nearby.services.fetchers.overpass_osm import fetch_places, fetch_road_segments
from nearby.services.http import new_client, run_blocking
from nearby.services.scoring_service import compute_traffic_level
from nearby.services.zone_resolver import display_names, resolve_admin_chain

log = structlog.get_logger(__name__)

PARKING_AMENITIES = frozenset({"parking", "motorcycle_parking", "parking_entrance"})


def fetch_location(
    lat: float,
    lon: float,
    radius: float,
    admin_names: Iterable[str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[CompositeLocationRecord]:
    """Blocking entry point for callers outside an event loop."""
    try:
        query = _build_query(lat, lon, radius, admin_names)
    except ValidationError as exc:
        return Failure(error=ServiceError.INVALID_QUERY, detail=str(exc))
    return Success(run_blocking(lambda client: aggregate_location(client, query), transport))


async def fetch_location_async(
    lat: float,
    lon: float,
    radius: float,
    admin_names: Iterable[str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> Result[CompositeLocationRecord]:
    try:
        query = _build_query(lat, lon, radius, admin_names)
    except ValidationError as exc:
        return Failure(error=ServiceError.INVALID_QUERY, detail=str(exc))

    if client is not None:
        return Success(await aggregate_location(client, query))
    async with new_client() as own_client:
        return Success(await aggregate_location(own_client, query))


async def aggregate_location(
    client: httpx.AsyncClient, query: GeoQuery, lang: str | None = None
) -> CompositeLocationRecord:
    """
    Calls every provider concurrently and assembles whatever succeeded.

    Crime and housing wait on the zone lookup. Every call except housing is
    bounded by ``provider_deadline_sec``; housing relies on its own request
    timeouts. A failed provider leaves its field at the default value and is
    listed in ``gaps``; it never cancels the other calls.
    """
    settings = get_settings()
    language = lang or settings.label_language
    deadline = settings.provider_deadline_sec

    with bound_contextvars(lat=query.lat, lon=query.lon, radius=query.radius):
        zone_task = asyncio.create_task(
            asyncio.wait_for(fetch_zone(client, query.lat, query.lon), deadline)
        )

        async def crimes():
            try:
                candidates = (await zone_task).to_name_set()
            except (NearbyError, asyncio.TimeoutError):
                if not query.admin_names:
                    raise
                candidates = list(query.admin_names)
            return await asyncio.wait_for(fetch_crimes(client, candidates), deadline)

        async def housing_price():
            if query.admin_names:
                names = resolve_admin_chain(query.admin_names, None)
            else:
                names = resolve_admin_chain(None, await zone_task)
            return await resolve_housing_price(client, names)

        async def traffic_level():
            segments = await asyncio.wait_for(
                fetch_road_segments(client, query.lat, query.lon, query.radius), deadline
            )
            return compute_traffic_level(segments, language)

        calls = {
            "places": asyncio.wait_for(
                fetch_places(client, query.lat, query.lon, query.radius), deadline
            ),
            "traffic_level": traffic_level(),
            "weather": asyncio.wait_for(
                fetch_seasonal_weather(client, query.lat, query.lon, lang=language), deadline
            ),
            "zone": zone_task,
            "crimes": crimes(),
            "housing_price": housing_price(),
        }
        outcomes = dict(zip(calls, await asyncio.gather(*calls.values(), return_exceptions=True)))

        values = {}
        gaps: dict[str, ServiceError] = {}
        for field, outcome in outcomes.items():
            if isinstance(outcome, BaseException):
                gaps[field] = classify(outcome)
                _log_gap(field, outcome, gaps[field])
            else:
                values[field] = outcome

        places: list[Place] = values.get("places", [])
        zone = values.get("zone")
        log.info("location_aggregated", gaps=sorted(gaps), places=len(places))

    return CompositeLocationRecord(
        lat=query.lat,
        lon=query.lon,
        search_radius=query.radius,
        places=places,
        parking_spaces=[place for place in places if is_parking(place)],
        traffic_level=values.get("traffic_level"),
        weather=values.get("weather", []),
        crimes=values.get("crimes", []),
        housing_price=values.get("housing_price", 0),
        zone=zone,
        zone_names=display_names(zone, query.admin_names, language),
        gaps=gaps,
    )


def is_parking(place: Place) -> bool:
    return place.tags.get("amenity") in PARKING_AMENITIES


def _build_query(
    lat: float, lon: float, radius: float, admin_names: Iterable[str] | None
) -> GeoQuery:
    return GeoQuery(lat=lat, lon=lon, radius=radius, admin_names=tuple(admin_names or ()))


def _log_gap(field: str, exc: BaseException, kind: ServiceError) -> None:
    source = SOURCES_BY_FIELD[field].source
    if kind is ServiceError.INTERNAL_ERROR:
        log.error("provider_crashed", field=field, source=source, exc_info=exc)
    else:
        log.warning("provider_failed", field=field, source=source, kind=kind.value, error=str(exc))
