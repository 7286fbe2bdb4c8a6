import math
from dataclasses import dataclass
from typing import Tuple

from route_notams.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    """
    An immutable geographic position.

    All coordinates are stored in decimal degrees:
    - Latitude: -90 to +90 degrees (negative for South, positive for North)
    - Longitude: -180 to +180 degrees (negative for West, positive for East)

    Distances are in nautical miles on a spherical Earth.
    """

    EARTH_RADIUS_NM = 3440.065

    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate coordinates after initialization."""
        if not isinstance(self.latitude, (int, float)) or math.isnan(self.latitude):
            raise ValidationError(f"Latitude must be a number, got {self.latitude!r}")
        if not isinstance(self.longitude, (int, float)) or math.isnan(self.longitude):
            raise ValidationError(f"Longitude must be a number, got {self.longitude!r}")
        if not -90 <= self.latitude <= 90:
            raise ValidationError(f"Latitude must be between -90 and 90 degrees, got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValidationError(f"Longitude must be between -180 and 180 degrees, got {self.longitude}")

    def central_angle(self, other: 'Coordinate') -> float:
        """
        Central angle to another coordinate using the Haversine formula.

        Returns:
            Angle in radians
        """
        lat1 = math.radians(self.latitude)
        lon1 = math.radians(self.longitude)
        lat2 = math.radians(other.latitude)
        lon2 = math.radians(other.longitude)

        dlat = lat2 - lat1
        dlon = lon2 - lon1

        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        return 2 * math.asin(min(1.0, math.sqrt(a)))

    def distance_to(self, other: 'Coordinate') -> float:
        """Great circle distance to another coordinate in nautical miles."""
        return self.EARTH_RADIUS_NM * self.central_angle(other)

    def to_unit_vector(self) -> Tuple[float, float, float]:
        """Cartesian unit vector (x, y, z) for this position."""
        lat = math.radians(self.latitude)
        lon = math.radians(self.longitude)
        return (
            math.cos(lat) * math.cos(lon),
            math.cos(lat) * math.sin(lon),
            math.sin(lat),
        )

    @classmethod
    def from_unit_vector(cls, x: float, y: float, z: float) -> 'Coordinate':
        """Build a coordinate back from a (not necessarily unit) vector."""
        lat = math.degrees(math.atan2(z, math.sqrt(x * x + y * y)))
        lon = math.degrees(math.atan2(y, x))
        # atan2 can land a hair outside the valid range
        lat = max(-90.0, min(90.0, lat))
        lon = max(-180.0, min(180.0, lon))
        return cls(lat, lon)

    def to_dm(self) -> Tuple[str, str]:
        """
        Convert coordinates to Degrees, Decimal Minutes format.

        Returns:
            Tuple of (latitude string, longitude string)
            Example: ("35° 23.59' N", "97° 36.04' W")
        """
        def decimal_to_dm(decimal_degrees: float, is_longitude: bool) -> str:
            if is_longitude:
                direction = 'E' if decimal_degrees >= 0 else 'W'
            else:
                direction = 'N' if decimal_degrees >= 0 else 'S'
            decimal_degrees = abs(decimal_degrees)
            degrees = int(decimal_degrees)
            minutes = round((decimal_degrees - degrees) * 60, 2)
            return f"{degrees}° {minutes}' {direction}"

        return (
            decimal_to_dm(self.latitude, False),
            decimal_to_dm(self.longitude, True)
        )

    def to_tuple(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def __str__(self) -> str:
        return f"({self.latitude:.6f}, {self.longitude:.6f})"
