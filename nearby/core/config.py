from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    app_env: str = "dev"
    log_level: str = "INFO"
    # Label language for traffic bands, seasons and placeholders ("en" or "pt")
    label_language: str = "en"

    user_agent: str = "nearby-backend/0.1 (location aggregation)"
    accept_language: str = "pt-PT"
    # Total time for one places, roads, weather, zone or crime call
    provider_deadline_sec: float = 10.0

    # Area search (places, road network, council boundaries, amenities)
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout_sec: float = 25.0

    # Reverse geocoding / area bounding boxes
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_timeout_sec: float = 10.0
    bbox_timeout_sec: float = 10.0
    amenities_timeout_sec: float = 15.0

    # Historical weather
    open_meteo_archive_url: str = "https://archive-api.open-meteo.com/v1/archive"
    open_meteo_timeout_sec: float = 10.0

    # National crime statistics
    ine_indicator_url: str = "https://www.ine.pt/ine/json_indicador/pindica.jsp"
    ine_crime_indicator: str = "0008074"
    ine_crime_year: int = 2022
    ine_timeout_sec: float = 10.0

    # Housing prices
    housing_base_url: str = "https://api.habitacao.net/graph"
    housing_connect_timeout_sec: float = 30.0
    housing_read_timeout_sec: float = 60.0
    district_table_path: str = str(PROJECT_ROOT / "data" / "district_osm_ids.json")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="NEARBY_", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
