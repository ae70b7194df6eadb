"""
Geospatial Radius Calculator.

MongoDB's $centerSphere takes a centre as [longitude, latitude] and a radius
in radians, so a linear distance is divided by the planet's radius in the
same unit.
"""

import math
from dataclasses import dataclass
from typing import Union

from internhub.core.config import Settings
from internhub.core.errors import AddressNotFound, InvalidQuery, InvalidUnit

SUPPORTED_UNITS = ("mi", "km")


@dataclass(frozen=True)
class RadiusQuery:
    longitude: float
    latitude: float
    radius: float

    @property
    def center(self) -> list:
        return [self.longitude, self.latitude]


def planet_radius(unit: str, settings: Settings) -> float:
    unit = unit.lower()
    if unit == "mi":
        return settings.earth_radius_mi
    if unit == "km":
        return settings.earth_radius_km
    raise InvalidUnit(f"Unit '{unit}' is not supported, use one of: {', '.join(SUPPORTED_UNITS)}")


def compute_radius(address: str, distance: Union[str, float], unit: str,
                   geocoder, settings: Settings) -> RadiusQuery:
    """
    Resolve a radius search.

    The unit is validated before the geocoder is called. The geocoder's
    first candidate is the centre.

    Raises:
        InvalidUnit: unit not in {mi, km}
        InvalidQuery: distance is not a non-negative number
        AddressNotFound: geocoder returned no candidates
    """
    earth_radius = planet_radius(unit, settings)

    try:
        distance = float(distance)
    except (TypeError, ValueError):
        raise InvalidQuery(f"Distance must be a number, got '{distance}'") from None
    if not math.isfinite(distance) or distance < 0:
        raise InvalidQuery(f"Distance must be a non-negative number, got '{distance}'")

    candidates = geocoder.geocode(address)
    if not candidates:
        raise AddressNotFound(f"Address '{address}' could not be located")

    first = candidates[0]
    return RadiusQuery(
        longitude=first.longitude,
        latitude=first.latitude,
        radius=distance / earth_radius,
    )
