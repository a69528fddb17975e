import itertools

from nearby.schemas.location import RoadSegment
from nearby.services.scoring_service import compute_traffic_level, traffic_score


def _roads(*classes):
    return [
        RoadSegment(id=i, tags={"highway": road_class} if road_class else {})
        for i, road_class in enumerate(classes)
    ]


class TestTrafficScore:
    def test_weights_by_class(self):
        assert traffic_score(_roads("residential", "tertiary", "primary", "motorway")) == 10

    def test_unknown_and_untagged_roads_count_zero(self):
        assert traffic_score(_roads("footway", "cycleway", None)) == 0


class TestComputeTrafficLevel:
    def test_no_roads(self):
        assert compute_traffic_level([]) == "no traffic data"

    def test_band_boundaries(self):
        assert compute_traffic_level(_roads(*["residential"] * 5)) == "not very busy"
        assert compute_traffic_level(_roads(*["residential"] * 6)) == "generally busy"
        assert compute_traffic_level(_roads(*["residential"] * 10)) == "generally busy"
        assert compute_traffic_level(_roads(*["residential"] * 11)) == "very busy"
        assert compute_traffic_level(_roads(*["motorway"] * 5)) == "very busy"
        assert compute_traffic_level(_roads(*["motorway"] * 5, "service")) == "extremely busy"

    def test_roads_without_known_class_are_low(self):
        assert compute_traffic_level(_roads("footway", "path")) == "not very busy"

    def test_order_does_not_matter(self):
        roads = _roads("primary", "primary", "trunk", "service", "tertiary", "residential")
        levels = {compute_traffic_level(list(order)) for order in itertools.permutations(roads)}
        assert levels == {"very busy"}

    def test_repeated_calls_agree(self):
        roads = _roads("secondary", "secondary")
        assert compute_traffic_level(roads) == compute_traffic_level(roads) == "generally busy"

    def test_portuguese_labels(self):
        assert compute_traffic_level([], lang="pt") == "Sem dados de tráfego"
        assert compute_traffic_level(_roads("motorway"), lang="pt") == "Área não muito movimentada"
