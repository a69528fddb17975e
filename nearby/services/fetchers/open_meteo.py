"""
Seasonal weather profile from one year of hourly Open-Meteo archive samples.

Samples are grouped by season (month of year, Portuguese climate ranges) and
by time of day:

- morning   06:00-11:59
- afternoon 12:00-17:59
- night     18:00-23:59

Samples between 00:00 and 05:59 fall outside every bucket and are ignored.
Every season is always reported; a bucket without samples averages to 0.0.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Sequence

import httpx

from nearby.core.config import get_settings
from nearby.core.errors import ResponseError
from nearby.schemas.location import SeasonalWeatherValues, WeatherInfo
from nearby.services.http import execute
from nearby.services.i18n import label
from nearby.utils.time import previous_year_window

SEASONS: tuple[tuple[str, tuple[int, ...]], ...] = (
    ("season_summer", (6, 7, 8)),
    ("season_autumn", (9, 10, 11)),
    ("season_winter", (12, 1, 2)),
    ("season_spring", (3, 4, 5)),
)
MONTH_TO_SEASON = {month: key for key, months in SEASONS for month in months}
BUCKETS = ("morning", "afternoon", "night")


async def fetch_seasonal_weather(
    client: httpx.AsyncClient,
    lat: float,
    lon: float,
    today: date | None = None,
    lang: str | None = None,
) -> list[SeasonalWeatherValues]:
    settings = get_settings()
    start, end = previous_year_window(today or date.today())
    request = client.build_request(
        "GET",
        settings.open_meteo_archive_url,
        params={
            "latitude": lat,
            "longitude": lon,
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "hourly": "temperature_2m,wind_speed_10m",
        },
        timeout=settings.open_meteo_timeout_sec,
    )
    language = lang or settings.label_language
    return await execute(client, request, lambda payload: _parse_hourly(payload, language))


def aggregate_seasons(
    times: Sequence[str],
    temperatures: Sequence[float | None],
    wind_speeds: Sequence[float | None],
    lang: str = "en",
) -> list[SeasonalWeatherValues]:
    # season -> bucket -> [temperature_sum, wind_sum, count]
    totals = {key: {bucket: [0.0, 0.0, 0] for bucket in BUCKETS} for key, _ in SEASONS}

    for raw_time, temperature, wind in zip(times, temperatures, wind_speeds):
        if temperature is None or wind is None:
            continue
        try:
            moment = datetime.fromisoformat(str(raw_time))
        except ValueError:
            continue
        bucket = _bucket_for_hour(moment.hour)
        if bucket is None:
            continue
        acc = totals[MONTH_TO_SEASON[moment.month]][bucket]
        acc[0] += float(temperature)
        acc[1] += float(wind)
        acc[2] += 1

    return [
        SeasonalWeatherValues(
            season=label(key, lang),
            **{bucket: _average(totals[key][bucket]) for bucket in BUCKETS},
        )
        for key, _ in SEASONS
    ]


def _parse_hourly(payload: Any, lang: str) -> list[SeasonalWeatherValues]:
    hourly = payload.get("hourly") if isinstance(payload, dict) else None
    if not isinstance(hourly, dict):
        raise ResponseError("Hourly data not found")

    times = hourly.get("time") or []
    temperatures = hourly.get("temperature_2m") or []
    wind_speeds = hourly.get("wind_speed_10m") or []
    if not times or not temperatures or not wind_speeds:
        raise ResponseError("Invalid data format")

    return aggregate_seasons(times, temperatures, wind_speeds, lang=lang)


def _bucket_for_hour(hour: int) -> str | None:
    if 6 <= hour <= 11:
        return "morning"
    if 12 <= hour <= 17:
        return "afternoon"
    if 18 <= hour <= 23:
        return "night"
    return None


def _average(acc: list) -> WeatherInfo:
    temperature_sum, wind_sum, count = acc
    if count == 0:
        return WeatherInfo(temperature=0.0, wind_speed=0.0)
    return WeatherInfo(temperature=temperature_sum / count, wind_speed=wind_sum / count)
