from collections import Counter
from typing import Iterable

from nearby.schemas.location import RoadSegment
from nearby.services.i18n import label

ROAD_CLASS_WEIGHTS: dict[str, int] = {
    "residential": 1,
    "service": 1,
    "tertiary": 2,
    "unclassified": 2,
    "secondary": 3,
    "primary": 3,
    "trunk": 4,
    "motorway": 4,
}

# Upper bounds (inclusive) of each band, checked in order
TRAFFIC_BANDS: tuple[tuple[int, str], ...] = (
    (5, "traffic_low"),
    (10, "traffic_moderate"),
    (20, "traffic_high"),
)


def traffic_score(segments: Iterable[RoadSegment]) -> int:
    counts = Counter(
        segment.tags["highway"] for segment in segments if "highway" in segment.tags
    )
    return sum(ROAD_CLASS_WEIGHTS.get(road_class, 0) * n for road_class, n in counts.items())


def compute_traffic_level(segments: list[RoadSegment], lang: str = "en") -> str:
    if not segments:
        return label("traffic_none", lang)

    score = traffic_score(segments)
    for upper, key in TRAFFIC_BANDS:
        if score <= upper:
            return label(key, lang)
    return label("traffic_extreme", lang)
