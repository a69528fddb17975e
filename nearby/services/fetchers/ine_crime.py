from __future__ import annotations

from typing import Any, Iterable

import httpx

from nearby.core.config import get_settings
from nearby.core.errors import ResponseError
from nearby.schemas.location import CrimeRecord
from nearby.services.http import execute


async def fetch_crimes(client: httpx.AsyncClient, city_names: Iterable[str]) -> list[CrimeRecord]:
    """
    Crime records of the first candidate city with any match in the INE feed.

    An empty list means no candidate matched; it is not an error.
    """
    settings = get_settings()
    year = str(settings.ine_crime_year)
    request = client.build_request(
        "GET",
        settings.ine_indicator_url,
        params={
            "op": "2",
            "varcd": settings.ine_crime_indicator,
            "Dim1": f"S7A{year}",
            "lang": "PT",
        },
        timeout=settings.ine_timeout_sec,
    )
    candidates = list(city_names)
    return await execute(
        client, request, lambda payload: match_crimes(_entries_for_year(payload, year), candidates)
    )


def match_crimes(entries: list[dict], city_names: Iterable[str]) -> list[CrimeRecord]:
    designations = [(_normalize(entry.get("geodsg")), entry) for entry in entries]
    for city in normalize_candidates(city_names):
        matched = [entry for designation, entry in designations if city in designation]
        if matched:
            return [_to_record(entry) for entry in matched]
    return []


def normalize_candidates(city_names: Iterable[str]) -> list[str]:
    """Split on commas, trim, lower-case; empty tokens dropped, order kept."""
    tokens = (
        _normalize(token)
        for name in city_names
        for token in str(name).split(",")
    )
    return list(dict.fromkeys(token for token in tokens if token))


def _entries_for_year(payload: Any, year: str) -> list[dict]:
    if not isinstance(payload, list):
        raise ResponseError("Crime feed is not a list")

    entries: list[dict] = []
    for item in payload:
        data = item.get("Dados") if isinstance(item, dict) else None
        if not isinstance(data, dict):
            continue
        entries.extend(entry for entry in data.get(year) or [] if isinstance(entry, dict))
    return entries


def _to_record(entry: dict) -> CrimeRecord:
    return CrimeRecord(
        city=str(entry.get("geodsg") or ""),
        crime_type=str(entry.get("dim_3_t") or ""),
        value=_to_float(entry.get("valor")),
    )


def _normalize(value) -> str:
    return str(value or "").strip().lower()


def _to_float(value) -> float:
    if value in (None, ""):
        return 0.0
    try:
        # INE publishes decimals with a comma
        return float(str(value).replace(",", "."))
    except ValueError:
        return 0.0
