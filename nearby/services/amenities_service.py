from __future__ import annotations

import asyncio
from typing import Iterable

import httpx
import structlog

from nearby.core.config import get_settings
from nearby.core.errors import NearbyError
from nearby.core.result import Failure, Result, ServiceError, Success, failure_from
from nearby.schemas.location import AmenitiesResponse, MapCenter
from nearby.services.fetchers.geocoding import fetch_bounding_box
from nearby.services.fetchers.overpass_osm import fetch_amenities_in_bbox
from nearby.services.http import run_blocking
from nearby.utils.geo import bbox_center

log = structlog.get_logger(__name__)

# Category labels offered to users, mapped to the OSM tag they search for.
# Empty tags have no OSM equivalent and are skipped.
INTERESTED_POINTS: dict[str, str] = {
    "Escolas": "amenity=school",
    "Universidades": "amenity=university",
    "Hospitais": "amenity=hospital",
    "Clínicas de Saúde": "amenity=clinic",
    "Transportes Públicos": "highway=bus_stop",
    "Estações de Comboio / Metro": "railway=station",
    "Supermercados": "shop=supermarket",
    "Hipermercados": "shop=hypermarket",
    "Mercados Locais": "amenity=marketplace",
    "Farmácias": "amenity=pharmacy",
    "Parques e Jardins": "leisure=park",
    "Praias": "natural=beach",
    "Ginásios / Centros Desportivos": "leisure=sports_centre",
    "Restaurantes": "amenity=restaurant",
    "Cafés e Pastelarias": "amenity=cafe",
    "Centros Comerciais": "shop=mall",
    "Zonas Comerciais": "landuse=retail",
    "Bancos / ATMs": "amenity=bank",
    "Correios": "amenity=post_office",
    "Polícia / GNR": "amenity=police",
    "Bombeiros": "amenity=fire_station",
    "Bibliotecas": "amenity=library",
    "Igrejas / Locais de culto": "amenity=place_of_worship",
    "Ciclovias / Percursos pedonais": "highway=cycleway",
    "Creches / Infantários": "amenity=kindergarten",
    "Lojas de Conveniência": "shop=convenience",
    "Zonas com Baixo Ruído": "",
    "Zonas com Estacionamento Fácil": "",
    "Zonas com Boa Iluminação Pública": "",
}

NO_CENTER = MapCenter(lat=0.0, lon=0.0)


def category_tags(categories: Iterable[str]) -> list[str]:
    tags = [INTERESTED_POINTS.get(category, "") for category in categories]
    return [tag for tag in tags if tag]


async def search_amenities(
    client: httpx.AsyncClient,
    parish: str,
    municipality: str,
    district: str,
    categories: Iterable[str],
) -> AmenitiesResponse | None:
    """
    Amenities of the selected categories inside the area's bounding box.

    Returns None when the area cannot be geocoded. Without a usable category
    no Overpass request is made and the response is centred on the box.
    """
    settings = get_settings()
    box = await asyncio.wait_for(
        fetch_bounding_box(client, parish, municipality, district), settings.bbox_timeout_sec
    )
    if box is None:
        return None

    center = bbox_center(box)
    tags = category_tags(categories)
    if not tags:
        return AmenitiesResponse(center=center, amenities=[])

    amenities = await asyncio.wait_for(
        fetch_amenities_in_bbox(client, box, tags), settings.amenities_timeout_sec
    )
    return AmenitiesResponse(center=center, amenities=amenities)


def find_amenities(
    parish: str,
    municipality: str,
    district: str,
    categories: Iterable[str],
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[AmenitiesResponse]:
    selected = list(categories)
    try:
        response = run_blocking(
            lambda client: search_amenities(client, parish, municipality, district, selected),
            transport=transport,
        )
    except (NearbyError, asyncio.TimeoutError) as exc:
        log.warning("amenity_search_failed", parish=parish, municipality=municipality, error=str(exc))
        return failure_from(exc)

    if response is None:
        log.info("area_not_found", parish=parish, municipality=municipality, district=district)
        return Failure(error=ServiceError.LOCATION_NOT_FOUND)
    if not response.amenities:
        return Success(AmenitiesResponse(center=NO_CENTER, amenities=[]))
    return Success(response)
