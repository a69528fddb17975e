import httpx
import pytest

from nearby.core.errors import RequestError, ResponseError
from nearby.services.fetchers.geocoding import fetch_bounding_box, fetch_zone, fetch_zone_sync

REVERSE_PAYLOAD = {
    "display_name": "Avenida da Liberdade, Santo António, Lisboa, Portugal",
    "address": {
        "road": "Avenida da Liberdade",
        "suburb": "Santo António",
        "city": "Lisboa",
        "municipality": "Lisboa",
        "county": "Lisboa",
        "postcode": "1250-096",
        "country": "Portugal",
    },
}


class TestFetchZone:
    def test_maps_address_fields(self, upstream, run):
        upstream.reply("reverse", REVERSE_PAYLOAD)
        zone = run(lambda client: fetch_zone(client, 38.7223, -9.1393))

        assert zone.road == "Avenida da Liberdade"
        assert zone.suburb == "Santo António"
        assert zone.village == ""
        assert zone.to_name_set() == ["Avenida da Liberdade", "Santo António", "Lisboa"]

        params = upstream.calls("reverse")[0].url.params
        assert params["format"] == "json"
        assert params["addressdetails"] == "1"
        assert params["lat"] == "38.7223"

    def test_missing_address_is_response_error(self, upstream, run):
        upstream.reply("reverse", {"error": "Unable to geocode"})
        with pytest.raises(ResponseError) as info:
            run(lambda client: fetch_zone(client, 0.0, 0.0))
        assert info.value.message == "Address data not found in response"

    def test_blocking_wrapper(self, upstream):
        upstream.reply("reverse", REVERSE_PAYLOAD)
        zone = fetch_zone_sync(38.7223, -9.1393, transport=upstream.transport)
        assert zone.city == "Lisboa"

    def test_blocking_wrapper_propagates_transport_failure(self, upstream):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        upstream.on("reverse", refuse)
        with pytest.raises(RequestError):
            fetch_zone_sync(38.7223, -9.1393, transport=upstream.transport)


class TestFetchBoundingBox:
    def test_first_hit(self, upstream, run):
        upstream.reply(
            "search",
            [{"boundingbox": ["38.70", "38.73", "-9.16", "-9.13"], "display_name": "Santo António"}],
        )
        box = run(lambda client: fetch_bounding_box(client, "Santo António", "Lisboa", "Lisboa"))

        assert (box.min_lat, box.max_lat, box.min_lon, box.max_lon) == (38.70, 38.73, -9.16, -9.13)
        params = upstream.calls("search")[0].url.params
        assert params["q"] == "Santo António, Lisboa, Lisboa, Portugal"
        assert params["limit"] == "1"

    def test_no_hits_is_none(self, upstream, run):
        upstream.reply("search", [])
        assert run(lambda client: fetch_bounding_box(client, "Nowhere", "X", "Y")) is None

    def test_hit_without_box_is_response_error(self, upstream, run):
        upstream.reply("search", [{"display_name": "Somewhere"}])
        with pytest.raises(ResponseError):
            run(lambda client: fetch_bounding_box(client, "A", "B", "C"))
