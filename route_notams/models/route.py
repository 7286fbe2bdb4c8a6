"""Route data models."""

from dataclasses import dataclass
from typing import Optional, Tuple

from route_notams.models.coordinate import Coordinate


@dataclass(frozen=True)
class Waypoint:
    """
    A sampled point along a great-circle route, used as a query center.

    Attributes:
        coordinate: Position of the point
        index: Ordinal position along the route, 0 at departure
    """
    coordinate: Coordinate
    index: int

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            'index': self.index,
            'latitude': self.latitude,
            'longitude': self.longitude,
        }

    def __str__(self) -> str:
        return f"#{self.index} {self.coordinate}"


@dataclass(frozen=True)
class RouteEndpoints:
    """
    Departure and destination of a flight, as seen by scoring rules.

    Codes are upper-cased ICAO identifiers; either side may be unknown.
    """
    departure_code: Optional[str] = None
    destination_code: Optional[str] = None
    departure: Optional[Coordinate] = None
    destination: Optional[Coordinate] = None

    def __post_init__(self):
        if self.departure_code:
            object.__setattr__(self, 'departure_code', self.departure_code.strip().upper())
        if self.destination_code:
            object.__setattr__(self, 'destination_code', self.destination_code.strip().upper())

    @property
    def codes(self) -> Tuple[str, ...]:
        """Known endpoint codes, departure first."""
        return tuple(c for c in (self.departure_code, self.destination_code) if c)

    def __repr__(self) -> str:
        return f"RouteEndpoints({self.departure_code} -> {self.destination_code})"
