"""
Tests for the location provider and LocationManager.

These tests verify that:
- Construction requests a one-shot location fix
- A transition into an authorized state starts updates exactly once
- Repeated authorized callbacks do not start further fetches
- Denied and restricted users are sent to settings instead of being prompted
- Revoking access stops updates
- A failed fetch records the error and keeps the previous location
- The IP provider maps the geolocation service's answers and failures
"""

import os
from unittest.mock import Mock, patch

import pytest
import requests

from cookbook.errors import LocationError
from cookbook.location import (
    IPLocationProvider,
    LocationManager,
    StaticLocationProvider,
    get_location_provider,
)
from cookbook.models import AuthorizationStatus, Coordinate, Location

AUTHORIZED = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE


class CountingProvider(StaticLocationProvider):
    """Static provider that counts fetches and can be told to fail."""

    def __init__(self, status=AuthorizationStatus.NOT_DETERMINED):
        super().__init__(latitude=37.3349, longitude=-122.0090, status=status)
        self.fetch_count = 0
        self.fail_with = None

    def fetch_location(self):
        self.fetch_count += 1
        if self.fail_with is not None:
            raise self.fail_with
        return super().fetch_location()


@pytest.fixture
def opener():
    return Mock()


class TestLocationManagerStartup:
    """Test cases for LocationManager construction."""

    def test_becomes_delegate_and_mirrors_status(self, opener):
        provider = CountingProvider(status=AuthorizationStatus.DENIED)
        manager = LocationManager(provider, settings_opener=opener)

        assert provider.delegate is manager
        assert manager.authorization_status == AuthorizationStatus.DENIED

    def test_already_authorized_gets_a_fix_immediately(self, opener):
        provider = CountingProvider(status=AUTHORIZED)
        manager = LocationManager(provider, settings_opener=opener)

        assert provider.fetch_count == 1
        assert manager.current_location is not None
        assert manager.current_location.coordinate == Coordinate(latitude=37.3349, longitude=-122.0090)
        assert manager.last_error is None

    def test_not_determined_records_error_without_fetching(self, opener):
        provider = CountingProvider()
        manager = LocationManager(provider, settings_opener=opener)

        assert provider.fetch_count == 0
        assert manager.current_location is None
        assert isinstance(manager.last_error, LocationError)


class TestAuthorizationTransitions:
    """Test cases for authorization changes."""

    def test_grant_starts_updates_exactly_once(self, opener):
        provider = CountingProvider()
        manager = LocationManager(provider, settings_opener=opener)

        manager.prompt_for_location_access()
        assert manager.prompt_pending is True
        assert provider.fetch_count == 0

        provider.resolve_authorization(True)

        assert manager.prompt_pending is False
        assert manager.authorization_status == AUTHORIZED
        assert provider.is_updating is True
        assert provider.fetch_count == 1
        assert manager.current_location is not None

    def test_repeated_authorized_callbacks_do_not_fetch_again(self, opener):
        provider = CountingProvider()
        manager = LocationManager(provider, settings_opener=opener)
        provider.set_authorization_status(AUTHORIZED)
        assert provider.fetch_count == 1

        provider.set_authorization_status(AUTHORIZED)
        provider.set_authorization_status(AuthorizationStatus.AUTHORIZED_ALWAYS)

        assert provider.fetch_count == 1

    def test_regrant_after_revoke_fetches_again(self, opener):
        provider = CountingProvider()
        manager = LocationManager(provider, settings_opener=opener)
        provider.set_authorization_status(AUTHORIZED)
        provider.set_authorization_status(AuthorizationStatus.DENIED)

        assert provider.is_updating is False
        assert manager.needs_settings_redirect is True

        provider.set_authorization_status(AUTHORIZED)
        assert provider.fetch_count == 2

    def test_revoke_stops_updates(self, opener):
        provider = CountingProvider(status=AUTHORIZED)
        LocationManager(provider, settings_opener=opener)
        provider.start_updating_location()
        assert provider.is_updating is True

        with patch.object(provider, "stop_updating_location", wraps=provider.stop_updating_location) as stop:
            provider.set_authorization_status(AuthorizationStatus.DENIED)

        stop.assert_called_once_with()
        assert provider.is_updating is False

    def test_deny_does_not_fetch(self, opener):
        provider = CountingProvider()
        manager = LocationManager(provider, settings_opener=opener)
        manager.request_authorization()
        provider.resolve_authorization(False)

        assert manager.authorization_status == AuthorizationStatus.DENIED
        assert provider.fetch_count == 0
        assert manager.current_location is None

    def test_prompt_only_raised_while_not_determined(self, opener):
        provider = CountingProvider(status=AuthorizationStatus.DENIED)
        LocationManager(provider, settings_opener=opener)

        provider.request_when_in_use_authorization()
        assert provider.prompt_pending is False


class TestPromptForLocationAccess:
    """Test cases for LocationManager.prompt_for_location_access."""

    @pytest.mark.parametrize("status", [AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED])
    def test_refused_opens_settings(self, opener, status):
        provider = CountingProvider(status=status)
        manager = LocationManager(provider, settings_opener=opener)

        manager.prompt_for_location_access()

        opener.assert_called_once_with()
        assert provider.prompt_pending is False
        assert provider.fetch_count == 0

    def test_refused_without_settings_screen_only_logs(self, caplog):
        provider = CountingProvider(status=AuthorizationStatus.DENIED)
        manager = LocationManager(provider)

        with caplog.at_level("WARNING", logger="cookbook.location"):
            manager.prompt_for_location_access()

        assert "no settings screen is configured" in caplog.text
        assert provider.fetch_count == 0

    def test_not_determined_prompts(self, opener):
        provider = CountingProvider()
        manager = LocationManager(provider, settings_opener=opener)

        manager.prompt_for_location_access()

        assert manager.prompt_pending is True
        opener.assert_not_called()

    def test_authorized_refreshes_once_per_call(self, opener):
        provider = CountingProvider(status=AUTHORIZED)
        manager = LocationManager(provider, settings_opener=opener)
        assert provider.fetch_count == 1

        manager.prompt_for_location_access()
        assert provider.is_updating is True
        assert provider.fetch_count == 2

        manager.prompt_for_location_access()
        assert provider.fetch_count == 3
        opener.assert_not_called()


class TestLocationFailures:
    """Test cases for failed location requests."""

    def test_failure_keeps_previous_location(self, opener):
        provider = CountingProvider(status=AUTHORIZED)
        manager = LocationManager(provider, settings_opener=opener)
        first = manager.current_location

        provider.fail_with = LocationError("no signal")
        provider.request_location()

        assert manager.current_location == first
        assert str(manager.last_error) == "no signal"

    def test_success_keeps_last_error(self, opener):
        provider = CountingProvider(status=AUTHORIZED)
        manager = LocationManager(provider, settings_opener=opener)
        provider.fail_with = LocationError("no signal")
        provider.request_location()

        provider.fail_with = None
        provider.request_location()

        assert manager.current_location is not None
        assert str(manager.last_error) == "no signal"

    def test_most_recent_of_several_locations_wins(self, opener):
        provider = CountingProvider(status=AUTHORIZED)
        manager = LocationManager(provider, settings_opener=opener)
        older = Location(coordinate=Coordinate(latitude=1.0, longitude=1.0))
        newer = Location(coordinate=Coordinate(latitude=2.0, longitude=2.0))

        manager.did_update_locations([older, newer])
        assert manager.current_location == newer

        manager.did_update_locations([])
        assert manager.current_location == newer


class TestIPLocationProvider:
    """Tests for the IP geolocation provider using mocked requests."""

    @patch("cookbook.location.requests.get")
    def test_fetch_location(self, mock_get):
        mock_response = Mock()
        mock_response.json.return_value = {"status": "success", "lat": 52.37, "lon": 4.89}
        mock_get.return_value = mock_response

        provider = IPLocationProvider(service_url="http://geo.test/json", timeout=3, status=AUTHORIZED)
        location = provider.fetch_location()

        mock_get.assert_called_once_with("http://geo.test/json", timeout=3)
        assert location.coordinate == Coordinate(latitude=52.37, longitude=4.89)
        assert location.source == "ip"
        assert location.horizontal_accuracy == 5000.0

    @patch("cookbook.location.requests.get")
    def test_service_failure_message(self, mock_get):
        mock_response = Mock()
        mock_response.json.return_value = {"status": "fail", "message": "private range"}
        mock_get.return_value = mock_response

        provider = IPLocationProvider(service_url="http://geo.test/json", status=AUTHORIZED)
        with pytest.raises(LocationError, match="private range"):
            provider.fetch_location()

    @patch("cookbook.location.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()

        provider = IPLocationProvider(service_url="http://geo.test/json", status=AUTHORIZED)
        with pytest.raises(LocationError, match="timed out"):
            provider.fetch_location()

    @patch("cookbook.location.requests.get")
    def test_missing_position(self, mock_get):
        mock_response = Mock()
        mock_response.json.return_value = {"status": "success"}
        mock_get.return_value = mock_response

        provider = IPLocationProvider(service_url="http://geo.test/json", status=AUTHORIZED)
        with pytest.raises(LocationError):
            provider.fetch_location()

    @patch("cookbook.location.requests.get")
    def test_request_location_reports_failure_to_delegate(self, mock_get, opener):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        provider = IPLocationProvider(service_url="http://geo.test/json", status=AUTHORIZED)
        manager = LocationManager(provider, settings_opener=opener)

        assert manager.current_location is None
        assert isinstance(manager.last_error, LocationError)

    @patch.dict(os.environ, {"LOCATION_SERVICE_URL": "http://env.test/json", "LOCATION_TIMEOUT_SECONDS": "2.5"})
    def test_reads_environment(self):
        provider = IPLocationProvider()
        assert provider.service_url == "http://env.test/json"
        assert provider.timeout == 2.5


class TestGetLocationProvider:
    """Test cases for get_location_provider."""

    def test_static(self):
        provider = get_location_provider("static", latitude=1.0, longitude=2.0)
        assert isinstance(provider, StaticLocationProvider)
        assert provider.coordinate == Coordinate(latitude=1.0, longitude=2.0)

    @patch.dict(os.environ, {"LOCATION_PROVIDER": "ip"})
    def test_default_from_environment(self):
        assert isinstance(get_location_provider(), IPLocationProvider)

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown location provider"):
            get_location_provider("gps")

    def test_status_is_passed_through(self):
        provider = get_location_provider("static", status=AuthorizationStatus.RESTRICTED)
        assert provider.authorization_status == AuthorizationStatus.RESTRICTED
