"""Route NOTAM data models."""

from route_notams.models.coordinate import Coordinate
from route_notams.models.notam import (
    NotamRecord,
    NotamCategory,
    CoordinateSource,
    EffectiveWindow,
    ScoredNotam,
)
from route_notams.models.route import Waypoint, RouteEndpoints

__all__ = [
    'Coordinate',
    'NotamRecord',
    'NotamCategory',
    'CoordinateSource',
    'EffectiveWindow',
    'ScoredNotam',
    'Waypoint',
    'RouteEndpoints',
]
