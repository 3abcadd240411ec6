"""
Location services for the Shopping page.

This module wraps a location source behind the same small surface a mobile
platform offers: an authorization status, a permission prompt, one-shot and
continuous location requests, and delegate callbacks for results.

Components:
- BaseLocationProvider: abstract location source
- IPLocationProvider: approximate position from an IP geolocation HTTP service
- StaticLocationProvider: fixed coordinate (offline/demo runs and tests)
- LocationManager: delegate that mirrors provider state into plain fields the
  UI reads on every render (authorization_status, current_location, last_error)

Permission prompts are two-phase: request_when_in_use_authorization() only
raises a pending prompt; the UI answers it later via resolve_authorization().

# NOTE: There is no retry policy. A failed request records last_error and
    leaves the previous location (or None) in place.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Protocol

import requests

from cookbook.errors import LocationError
from cookbook.models import AuthorizationStatus, Coordinate, Location

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_SERVICE_URL = "http://ip-api.com/json/"
DEFAULT_LOCATION_TIMEOUT_SECONDS = 10.0

# Apple Park, the map's initial region before any fix arrives
DEFAULT_LATITUDE = 37.3349
DEFAULT_LONGITUDE = -122.0090

# ip-api reports city-level fixes; treat them as ~5 km accurate
IP_FIX_ACCURACY_METERS = 5000.0


class LocationDelegate(Protocol):
    """Callbacks a provider sends to whoever owns it."""

    def did_change_authorization(self, status: AuthorizationStatus) -> None: ...

    def did_update_locations(self, locations: List[Location]) -> None: ...

    def did_fail_with_error(self, error: Exception) -> None: ...


class BaseLocationProvider(ABC):
    """
    Abstract base class for location sources.

    Providers never raise from request_location(); failures are reported to the
    delegate through did_fail_with_error(), the same way results are reported
    through did_update_locations().

    Attributes:
        delegate: Receiver of authorization, location and error callbacks
        is_updating: Whether continuous updates are on
        prompt_pending: Whether a permission prompt is waiting for an answer
    """
    kind: str

    def __init__(self, status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED) -> None:
        self._status = status
        self.delegate: Optional[LocationDelegate] = None
        self.is_updating = False
        self.prompt_pending = False

    @property
    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    def request_when_in_use_authorization(self) -> None:
        """
        Ask the user for location access.

        Only has an effect while the status is NOT_DETERMINED; the prompt is
        raised and answered later through resolve_authorization().
        """
        if self._status != AuthorizationStatus.NOT_DETERMINED:
            return
        self.prompt_pending = True

    def resolve_authorization(self, granted: bool) -> None:
        """
        Record the user's answer to a pending permission prompt.

        Args:
            granted: True if the user allowed location access
        """
        self.prompt_pending = False
        new_status = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE if granted else AuthorizationStatus.DENIED
        self.set_authorization_status(new_status)

    def set_authorization_status(self, status: AuthorizationStatus) -> None:
        """Change the authorization status and notify the delegate (used by Settings)."""
        self._status = status
        if status != AuthorizationStatus.NOT_DETERMINED:
            self.prompt_pending = False
        if self.delegate is not None:
            self.delegate.did_change_authorization(status)

    def start_updating_location(self) -> None:
        """
        Turn on updates and deliver the first fix right away.

        There is no push channel behind a provider, so later fixes are pulled:
        while updating, each request_location() call delivers a fresh one.
        LocationManager does this whenever the Shopping page appears.
        """
        if not self._status.is_authorized or self.is_updating:
            return
        self.is_updating = True
        self.request_location()

    def stop_updating_location(self) -> None:
        self.is_updating = False

    def request_location(self) -> None:
        """Request a single position fix, delivered through the delegate."""
        if not self._status.is_authorized:
            self._fail(LocationError("Location access has not been granted."))
            return
        try:
            location = self.fetch_location()
        except LocationError as e:
            self._fail(e)
            return
        if self.delegate is not None:
            self.delegate.did_update_locations([location])

    def _fail(self, error: Exception) -> None:
        if self.delegate is not None:
            self.delegate.did_fail_with_error(error)

    @abstractmethod
    def fetch_location(self) -> Location:
        """
        Resolve the current position.

        Returns:
            A Location fix

        Raises:
            LocationError: If the position cannot be determined
        """
        pass


class StaticLocationProvider(BaseLocationProvider):
    """Location provider that always reports the same coordinate."""
    kind = "static"

    def __init__(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
    ) -> None:
        super().__init__(status)
        if latitude is None:
            latitude = float(os.getenv("LOCATION_FALLBACK_LATITUDE", DEFAULT_LATITUDE))
        if longitude is None:
            longitude = float(os.getenv("LOCATION_FALLBACK_LONGITUDE", DEFAULT_LONGITUDE))
        self.coordinate = Coordinate(latitude=latitude, longitude=longitude)

    def fetch_location(self) -> Location:
        return Location(coordinate=self.coordinate, source=self.kind)


class IPLocationProvider(BaseLocationProvider):
    """
    Location provider backed by an IP geolocation HTTP service.

    Talks to an ip-api.com compatible endpoint which answers with a JSON body
    containing "status", "lat" and "lon" (and "message" on failure).
    """
    kind = "ip"

    def __init__(
        self,
        service_url: Optional[str] = None,
        timeout: Optional[float] = None,
        status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
    ) -> None:
        """
        Initialize the provider.

        Args:
            service_url: Geolocation endpoint (optional, reads LOCATION_SERVICE_URL env var
                         or defaults to http://ip-api.com/json/)
            timeout: Request timeout in seconds (optional, reads LOCATION_TIMEOUT_SECONDS)
            status: Initial authorization status (RESTRICTED models a managed device)
        """
        super().__init__(status)
        self.service_url = service_url or os.getenv("LOCATION_SERVICE_URL", DEFAULT_LOCATION_SERVICE_URL)
        self.timeout = timeout or float(os.getenv("LOCATION_TIMEOUT_SECONDS", DEFAULT_LOCATION_TIMEOUT_SECONDS))

    def fetch_location(self) -> Location:
        try:
            response = requests.get(self.service_url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise LocationError("The location service timed out.") from e
        except requests.exceptions.RequestException as e:
            raise LocationError(f"Could not reach the location service: {e}") from e
        except ValueError as e:
            raise LocationError("The location service returned an invalid response.") from e

        if data.get("status") not in (None, "success"):
            raise LocationError(f"The location service could not locate you: {data.get('message', 'unknown error')}")

        try:
            coordinate = Coordinate(latitude=float(data["lat"]), longitude=float(data["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise LocationError("The location service response did not include a position.") from e

        return Location(coordinate=coordinate, horizontal_accuracy=IP_FIX_ACCURACY_METERS, source=self.kind)


def get_location_provider(kind: Optional[str] = None, **kwargs: Any) -> BaseLocationProvider:
    """
    Build a location provider by kind.

    Args:
        kind: "ip" or "static" (optional, reads LOCATION_PROVIDER env var, default "ip")
        **kwargs: Passed through to the provider constructor

    Raises:
        ValueError: If the kind is not recognised
    """
    kind = (kind or os.getenv("LOCATION_PROVIDER", "ip")).lower()
    if kind == IPLocationProvider.kind:
        return IPLocationProvider(**kwargs)
    if kind == StaticLocationProvider.kind:
        return StaticLocationProvider(**kwargs)
    raise ValueError(f"Unknown location provider: '{kind}'. Valid options: 'ip', 'static'")


class LocationManager:
    """
    Mirrors a location provider's state for the UI.

    Fields:
        authorization_status: Last status reported by the provider
        current_location: Most recent fix, or None
        last_error: Most recent failure, or None
    """

    def __init__(
        self,
        provider: BaseLocationProvider,
        settings_opener: Optional[Callable[[], None]] = None,
    ) -> None:
        self.provider = provider
        self.settings_opener = settings_opener
        self.authorization_status = provider.authorization_status
        self.current_location: Optional[Location] = None
        self.last_error: Optional[Exception] = None

        provider.delegate = self
        provider.request_location()

    @property
    def needs_settings_redirect(self) -> bool:
        return self.authorization_status in (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED)

    @property
    def prompt_pending(self) -> bool:
        return self.provider.prompt_pending

    def request_authorization(self) -> None:
        if self.authorization_status == AuthorizationStatus.NOT_DETERMINED:
            self.provider.request_when_in_use_authorization()
        elif self.authorization_status.is_authorized:
            self.provider.start_updating_location()

    def prompt_for_location_access(self) -> None:
        """Prompt for access, refresh the fix, or send the user to settings if access was refused."""
        status = self.provider.authorization_status
        if status == AuthorizationStatus.NOT_DETERMINED:
            self.provider.request_when_in_use_authorization()
        elif status.is_authorized:
            self._refresh_location()
        else:
            self.open_app_settings()

    def open_app_settings(self) -> None:
        """Hand off to the settings screen, if the UI provided one."""
        if self.settings_opener is None:
            logger.warning("Location access is %s and no settings screen is configured",
                           self.authorization_status.value)
            return
        logger.info("Location access is %s; opening settings", self.authorization_status.value)
        self.settings_opener()

    def did_change_authorization(self, status: AuthorizationStatus) -> None:
        was_authorized = self.authorization_status.is_authorized
        self.authorization_status = status
        # Only a transition into an authorized state kicks off updates
        if status.is_authorized and not was_authorized:
            self._refresh_location()
        elif not status.is_authorized and self.provider.is_updating:
            self.provider.stop_updating_location()

    def _refresh_location(self) -> None:
        """Start continuous updates, or ask for a fresh fix if they are already running."""
        if self.provider.is_updating:
            self.provider.request_location()
        else:
            self.provider.start_updating_location()

    def did_update_locations(self, locations: List[Location]) -> None:
        if locations:
            self.current_location = locations[-1]

    def did_fail_with_error(self, error: Exception) -> None:
        self.last_error = error
        logger.warning("Location error: %s", error)
