"""Great-circle route sampling."""

import logging
import math
from typing import List

from route_notams.exceptions import ValidationError
from route_notams.models.coordinate import Coordinate
from route_notams.models.route import Waypoint

logger = logging.getLogger(__name__)


class GreatCircleRouter:
    """
    Samples query centers along the great circle between two coordinates.

    Points are spaced so that query circles with a radius close to the
    spacing overlap and leave no gap along the route.

    Example:
        router = GreatCircleRouter()
        kokc = Coordinate(35.3931, -97.6007)
        kdfw = Coordinate(32.8998, -97.0403)
        for wp in router.waypoints(kokc, kdfw, spacing_nm=50):
            print(wp.index, wp.coordinate)
    """

    # Below this central angle (radians) two points are considered identical
    COINCIDENT_EPSILON = 1e-12

    @staticmethod
    def distance(a: Coordinate, b: Coordinate) -> float:
        """
        Great-circle distance in nautical miles (Haversine).

        Args:
            a: First coordinate
            b: Second coordinate

        Returns:
            Distance in nautical miles
        """
        return a.distance_to(b)

    @classmethod
    def interpolate(cls, a: Coordinate, b: Coordinate, segments: int) -> List[Coordinate]:
        """
        Spherical linear interpolation between two coordinates.

        Args:
            a: Start coordinate
            b: End coordinate
            segments: Number of segments, at least 1

        Returns:
            segments + 1 coordinates including both endpoints
        """
        if segments < 1:
            raise ValidationError(f"segments must be at least 1, got {segments}")

        x1, y1, z1 = a.to_unit_vector()
        x2, y2, z2 = b.to_unit_vector()

        dot = x1 * x2 + y1 * y2 + z1 * z2
        dot = max(-1.0, min(1.0, dot))
        theta = math.acos(dot)

        if theta < cls.COINCIDENT_EPSILON:
            return [a] * (segments + 1)

        sin_theta = math.sin(theta)
        points = []
        for i in range(segments + 1):
            t = i / segments
            wa = math.sin((1 - t) * theta) / sin_theta
            wb = math.sin(t * theta) / sin_theta
            points.append(Coordinate.from_unit_vector(
                wa * x1 + wb * x2,
                wa * y1 + wb * y2,
                wa * z1 + wb * z2,
            ))
        return points

    @classmethod
    def waypoints(cls, a: Coordinate, b: Coordinate, spacing_nm: float) -> List[Waypoint]:
        """
        Waypoints separated by roughly spacing_nm along the route.

        The first and last waypoints are exactly a and b.

        Args:
            a: Departure coordinate
            b: Destination coordinate
            spacing_nm: Target spacing in nautical miles, must be positive

        Returns:
            Ordered list of waypoints
        """
        if spacing_nm is None or not spacing_nm > 0:
            raise ValidationError(f"Waypoint spacing must be positive, got {spacing_nm}")

        total_nm = cls.distance(a, b)
        segments = max(1, math.ceil(total_nm / spacing_nm))
        points = cls.interpolate(a, b, segments)
        points[0] = a
        points[-1] = b

        logger.debug(
            "Route %s -> %s: %.1f nm, %d waypoints at %.1f nm spacing",
            a, b, total_nm, len(points), spacing_nm
        )
        return [Waypoint(coordinate=point, index=i) for i, point in enumerate(points)]
