"""Query descriptors for the FAA NOTAM API."""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional

from route_notams.config import (
    NotamApiConfig,
    RESPONSE_FORMAT,
    SORT_BY,
    SORT_ORDER,
)
from route_notams.models.route import Waypoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotamQuery:
    """
    One page request against the NOTAM API.

    A query is either coordinate-based (latitude, longitude, radius) or
    ICAO-based (icao_location); never both.
    """
    page_num: int = 1
    page_size: int = 50
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_nm: Optional[int] = None
    icao_location: Optional[str] = None
    classification: Optional[str] = None
    waypoint_index: Optional[int] = None

    @property
    def is_location_query(self) -> bool:
        return self.icao_location is not None

    def next_page(self) -> 'NotamQuery':
        """The same query for the following page."""
        return replace(self, page_num=self.page_num + 1)

    def params(self) -> Dict[str, str]:
        """Request query parameters."""
        params = {"responseFormat": RESPONSE_FORMAT}
        if self.icao_location is not None:
            params["icaoLocation"] = self.icao_location
        else:
            params["locationLatitude"] = f"{self.latitude:.6f}"
            params["locationLongitude"] = f"{self.longitude:.6f}"
            params["locationRadius"] = str(self.radius_nm)
        if self.classification:
            params["classification"] = self.classification
        params["pageSize"] = str(self.page_size)
        params["pageNum"] = str(self.page_num)
        params["sortBy"] = SORT_BY
        params["sortOrder"] = SORT_ORDER
        return params

    def describe(self) -> str:
        """Short label for logs."""
        if self.icao_location is not None:
            target = self.icao_location
        else:
            target = f"({self.latitude:.4f}, {self.longitude:.4f}) r={self.radius_nm}nm"
        return f"{target} page {self.page_num}"


class QueryBuilder:
    """
    Builds NotamQuery objects from configuration.

    Example:
        builder = QueryBuilder(NotamApiConfig())
        query = builder.for_waypoint(waypoint)
        session.get(url, params=query.params())
    """

    def __init__(self, config: NotamApiConfig):
        self._config = config

    def for_waypoint(self, waypoint: Waypoint, page_num: int = 1) -> NotamQuery:
        """Coordinate-based query centred on a route waypoint."""
        return NotamQuery(
            page_num=page_num,
            page_size=self._config.page_size,
            latitude=waypoint.latitude,
            longitude=waypoint.longitude,
            radius_nm=self._config.query_radius_nm,
            classification=self._config.classification,
            waypoint_index=waypoint.index,
        )

    def for_airport(self, icao: str, page_num: int = 1) -> NotamQuery:
        """ICAO location query for a single airport."""
        return NotamQuery(
            page_num=page_num,
            page_size=self._config.page_size,
            icao_location=icao.strip().upper(),
            classification=self._config.classification,
        )
