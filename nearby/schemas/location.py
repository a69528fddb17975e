from pydantic import BaseModel, ConfigDict, Field

from nearby.core.result import ServiceError


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class GeoQuery(_Frozen):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    radius: float = Field(gt=0, description="Search radius in meters.")
    # Administrative names ordered fine to coarse, district last
    admin_names: tuple[str, ...] = ()


class Place(_Frozen):
    type: str = "node"
    id: int
    lat: float
    lon: float
    tags: dict[str, str] = Field(default_factory=dict)


class RoadSegment(_Frozen):
    type: str = "way"
    id: int
    nodes: list[int] = Field(default_factory=list)
    tags: dict[str, str] = Field(default_factory=dict)


class ZoneIdentifier(_Frozen):
    road: str = ""
    hamlet: str = ""
    village: str = ""
    suburb: str = ""
    city: str = ""
    town: str = ""
    municipality: str = ""
    county: str = ""

    def to_name_set(self) -> list[str]:
        """Non-empty names in field order, duplicates collapsed."""
        values = (
            self.road,
            self.hamlet,
            self.village,
            self.suburb,
            self.city,
            self.town,
            self.municipality,
            self.county,
        )
        return list(dict.fromkeys(value for value in values if value))

    def admin_chain(self) -> list[str]:
        """Administrative names ordered fine to coarse, usable as a housing name chain."""
        values = (
            self.suburb or self.village or self.hamlet,
            self.city or self.town,
            self.municipality,
            self.county,
        )
        return list(dict.fromkeys(value for value in values if value))


class WeatherInfo(_Frozen):
    temperature: float = 0.0
    wind_speed: float = 0.0


class SeasonalWeatherValues(_Frozen):
    season: str
    morning: WeatherInfo
    afternoon: WeatherInfo
    night: WeatherInfo


class CrimeRecord(_Frozen):
    city: str
    crime_type: str
    value: float = 0.0


class CompositeLocationRecord(_Frozen):
    lat: float
    lon: float
    search_radius: float
    places: list[Place] = Field(default_factory=list)
    parking_spaces: list[Place] = Field(default_factory=list)
    traffic_level: str | None = None
    weather: list[SeasonalWeatherValues] = Field(default_factory=list)
    crimes: list[CrimeRecord] = Field(default_factory=list)
    housing_price: int = 0
    zone: ZoneIdentifier | None = None
    zone_names: list[str] = Field(default_factory=list)
    # Provider fields that failed for this query, with the failure kind
    gaps: dict[str, ServiceError] = Field(default_factory=dict)


class BoundingBox(_Frozen):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float


class MapCenter(_Frozen):
    lat: float
    lon: float


class Amenity(_Frozen):
    id: str
    lat: float
    lon: float
    tags: dict[str, str] = Field(default_factory=dict)


class AmenitiesResponse(_Frozen):
    center: MapCenter
    amenities: list[Amenity] = Field(default_factory=list)
