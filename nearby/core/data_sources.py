from dataclasses import dataclass


@dataclass(frozen=True)
class DataSource:
    field: str
    source: str
    official_url: str
    note: str


CORE_DATA_SOURCES: tuple[DataSource, ...] = (
    DataSource(
        field="places",
        source="OpenStreetMap Overpass API",
        official_url="https://overpass-api.de",
        note="Tagged nodes around the point (points of interest, parking)",
    ),
    DataSource(
        field="traffic_level",
        source="OpenStreetMap Overpass API",
        official_url="https://overpass-api.de",
        note="Ways carrying a highway tag, scored by road class",
    ),
    DataSource(
        field="zone",
        source="Nominatim reverse geocoding",
        official_url="https://nominatim.openstreetmap.org",
        note="Administrative names of the point",
    ),
    DataSource(
        field="weather",
        source="Open-Meteo historical archive",
        official_url="https://open-meteo.com/en/docs/historical-weather-api",
        note="One year of hourly temperature and wind, bucketed by season",
    ),
    DataSource(
        field="crimes",
        source="INE (Statistics Portugal) indicator feed",
        official_url="https://www.ine.pt",
        note="Crimes registered by police authorities per municipality",
    ),
    DataSource(
        field="housing_price",
        source="habitacao.net price graphs",
        official_url="https://api.habitacao.net",
        note="Council or district price, with a district-level fallback",
    ),
)

SOURCES_BY_FIELD: dict[str, DataSource] = {source.field: source for source in CORE_DATA_SOURCES}
