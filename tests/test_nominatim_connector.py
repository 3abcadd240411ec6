"""
Tests for the Nominatim place search connector using a mocked requests session.

The tests verify that:
- Queries are bounded to the region's viewbox and capped at 40 results
- Hits are normalized into MapItem objects (name, address, coordinate, id)
- Hits without a usable coordinate or outside the region are skipped
- close() releases the HTTP session
- Transport and payload errors are wrapped in PlaceSearchError
"""

import os
from unittest.mock import Mock, patch

import pytest
import requests

from cookbook.connectors.nominatim_connector import DEFAULT_USER_AGENT, NominatimConnector
from cookbook.errors import PlaceSearchError
from cookbook.models import Coordinate, Region


@pytest.fixture
def region():
    return Region.around(Coordinate(latitude=37.3349, longitude=-122.0090), span=0.05)


def make_connector(payload=None, side_effect=None):
    session = Mock()
    response = Mock()
    response.json.return_value = payload if payload is not None else []
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = response
    connector = NominatimConnector(
        base_url="https://nominatim.test/search",
        user_agent="tests/1.0",
        timeout=5,
        session=session,
    )
    return connector, session, response


class TestNominatimRequest:
    """Test cases for the outgoing request."""

    def test_request_parameters(self, region):
        connector, session, _ = make_connector()

        connector.search("Grocery Store", region, limit=20)

        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args == ("https://nominatim.test/search",)
        assert kwargs["headers"] == {"User-Agent": "tests/1.0"}
        assert kwargs["timeout"] == 5

        params = kwargs["params"]
        assert params["q"] == "Grocery Store"
        assert params["format"] == "jsonv2"
        assert params["bounded"] == 1
        assert params["limit"] == 20

        west, north, east, south = (float(v) for v in params["viewbox"].split(","))
        assert west == pytest.approx(-122.034)
        assert north == pytest.approx(37.3599)
        assert east == pytest.approx(-121.984)
        assert south == pytest.approx(37.3099)

    def test_limit_is_capped(self, region):
        connector, session, _ = make_connector()
        connector.search("Grocery Store", region, limit=100)
        assert session.get.call_args.kwargs["params"]["limit"] == 40

    def test_zero_limit_skips_request(self, region):
        connector, session, _ = make_connector()
        assert connector.search("Grocery Store", region, limit=0) == []
        session.get.assert_not_called()

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        connector = NominatimConnector(session=Mock())
        assert connector.base_url == "https://nominatim.openstreetmap.org/search"
        assert connector.user_agent == DEFAULT_USER_AGENT
        assert connector.timeout == 15.0
        assert connector.provider == "nominatim"

    @patch.dict(os.environ, {"NOMINATIM_URL": "https://osm.example/search", "NOMINATIM_USER_AGENT": "me@example.com"})
    def test_reads_environment(self):
        connector = NominatimConnector(session=Mock())
        assert connector.base_url == "https://osm.example/search"
        assert connector.user_agent == "me@example.com"


class TestNominatimNormalization:
    """Test cases for mapping hits into MapItem objects."""

    def test_hits_are_normalized(self, region):
        payload = [
            {
                "place_id": 1,
                "osm_type": "node",
                "osm_id": 42,
                "lat": "37.3301",
                "lon": "-122.0101",
                "name": "Safeway",
                "display_name": "Safeway, 1 Main St, Cupertino, CA",
            },
            {
                "place_id": 2,
                "osm_type": "way",
                "osm_id": 7,
                "lat": "37.3400",
                "lon": "-122.0000",
                "name": "",
                "display_name": "2 Market St, Cupertino, CA",
            },
        ]
        connector, _, _ = make_connector(payload)

        items = connector.search("Grocery Store", region)

        assert len(items) == 2
        first, second = items
        assert first.name == "Safeway"
        assert first.formatted_address == "Safeway, 1 Main St, Cupertino, CA"
        assert first.coordinate == Coordinate(latitude=37.3301, longitude=-122.0101)
        assert first.provider == "nominatim"
        assert first.provider_id == "node:42"
        assert first.raw == payload[0]

        assert second.name is None
        assert second.formatted_address == "2 Market St, Cupertino, CA"
        assert second.provider_id == "way:7"

    def test_hits_without_coordinate_are_skipped(self, region):
        payload = [
            {"place_id": 1, "name": "No position"},
            {"place_id": 2, "lat": "not-a-number", "lon": "1"},
            {"place_id": 3, "lat": "95", "lon": "1"},
            "garbage",
            {"place_id": 4, "lat": "37.33", "lon": "-122.01", "name": "Kept"},
        ]
        connector, _, _ = make_connector(payload)

        items = connector.search("Grocery Store", region)

        assert [item.name for item in items] == ["Kept"]
        assert items[0].provider_id is None

    def test_hits_outside_region_are_skipped(self, region):
        payload = [
            {"place_id": 1, "lat": "37.3349", "lon": "-122.0090", "name": "Inside"},
            {"place_id": 2, "lat": "37.5000", "lon": "-122.0090", "name": "North of the box"},
            {"place_id": 3, "lat": "37.3349", "lon": "-121.9000", "name": "East of the box"},
        ]
        connector, _, _ = make_connector(payload)

        items = connector.search("Grocery Store", region)

        assert [item.name for item in items] == ["Inside"]

    def test_empty_result(self, region):
        connector, _, _ = make_connector([])
        assert connector.search("Grocery Store", region) == []


class TestNominatimErrors:
    """Test cases for error handling."""

    def test_timeout(self, region):
        connector, _, _ = make_connector(side_effect=requests.exceptions.Timeout())
        with pytest.raises(PlaceSearchError, match="timed out"):
            connector.search("Grocery Store", region)

    def test_connection_error(self, region):
        connector, _, _ = make_connector(side_effect=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(PlaceSearchError, match="Could not reach"):
            connector.search("Grocery Store", region)

    def test_http_error(self, region):
        connector, _, response = make_connector()
        error_response = Mock(status_code=429)
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=error_response)

        with pytest.raises(PlaceSearchError, match="status 429"):
            connector.search("Grocery Store", region)

    def test_invalid_json(self, region):
        connector, _, response = make_connector()
        response.json.side_effect = ValueError("no json")

        with pytest.raises(PlaceSearchError, match="invalid response"):
            connector.search("Grocery Store", region)

    def test_unexpected_payload(self, region):
        connector, _, _ = make_connector({"error": "Unable to geocode"})
        with pytest.raises(PlaceSearchError, match="unexpected response"):
            connector.search("Grocery Store", region)


class TestNominatimClose:
    """Test cases for releasing the HTTP session."""

    def test_close_closes_session(self):
        connector, session, _ = make_connector()
        connector.close()
        session.close.assert_called_once_with()
