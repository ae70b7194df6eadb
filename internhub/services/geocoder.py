"""
Geocoder Client - address text -> coordinate candidates.

Talks to the MapQuest geocoding API:
    GET {geocoder_url}?key=...&location=<address>

Every transport or provider error surfaces as UpstreamFailure. No retries
are performed here; a failed lookup fails the request.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from internhub.core.config import Settings, get_settings
from internhub.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoCandidate:
    latitude: float
    longitude: float
    formatted_address: str = ""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country_code: Optional[str] = None

    def to_point(self) -> dict:
        """GeoJSON Point, coordinates in (longitude, latitude) order."""
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}


class Geocoder:
    """
    Wrapper for the MapQuest geocoding endpoint.
    """

    def __init__(self, settings: Settings = None, session: requests.Session = None):
        settings = settings or get_settings()
        if settings.geocoder_provider != "mapquest":
            raise ValueError(f"Unsupported geocoder provider '{settings.geocoder_provider}'")
        self.url = settings.geocoder_url
        self.api_key = settings.geocoder_api_key
        self.timeout = settings.geocoder_timeout
        self.session = session or requests.Session()

    def geocode(self, address: str) -> List[GeoCandidate]:
        """
        Resolve an address.

        Returns:
            Candidates in provider order (best first); empty when unknown.
        """
        try:
            response = self.session.get(
                self.url,
                params={"key": self.api_key, "location": address, "maxResults": 5},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Geocoding '%s' failed: %s", address, e)
            raise UpstreamFailure("Geocoding service unavailable") from e

        info = payload.get("info", {})
        if info.get("statuscode", 0) != 0:
            messages = "; ".join(info.get("messages", [])) or "unknown error"
            logger.error("Geocoder rejected '%s': %s", address, messages)
            raise UpstreamFailure(f"Geocoding failed: {messages}")

        try:
            return [
                _candidate(location)
                for result in payload.get("results", [])
                for location in result.get("locations", [])
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Unreadable geocoder response for '%s': %s", address, e)
            raise UpstreamFailure("Geocoding service returned an unreadable response") from e

    def test_connection(self) -> bool:
        """Test if the geocoder is reachable with the configured key"""
        try:
            self.geocode("New York, NY")
            return True
        except UpstreamFailure:
            return False


def _candidate(location: dict) -> GeoCandidate:
    lat_lng = location.get("latLng") or location.get("displayLatLng") or {}
    parts = [
        location.get("street"),
        location.get("adminArea5"),
        location.get("adminArea3"),
        location.get("postalCode"),
        location.get("adminArea1"),
    ]
    return GeoCandidate(
        latitude=float(lat_lng["lat"]),
        longitude=float(lat_lng["lng"]),
        formatted_address=", ".join(p for p in parts if p),
        street=location.get("street") or None,
        city=location.get("adminArea5") or None,
        state=location.get("adminArea3") or None,
        zipcode=location.get("postalCode") or None,
        country_code=location.get("adminArea1") or None,
    )


# Singleton instance
_geocoder: Geocoder = None


def get_geocoder() -> Geocoder:
    """Get or create the geocoder (singleton pattern)"""
    global _geocoder
    if _geocoder is None:
        _geocoder = Geocoder()
    return _geocoder
