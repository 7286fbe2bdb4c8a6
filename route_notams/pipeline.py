"""
Public entry point: fetch, deduplicate and rank NOTAMs for a route.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Union

import requests

from route_notams.airports import AirportDirectory, normalize_icao
from route_notams.api.credentials import CredentialPool
from route_notams.api.fetcher import FetchOrchestrator, FetchReport
from route_notams.collections.deduplicator import Deduplicator
from route_notams.config import NotamApiConfig
from route_notams.exceptions import ValidationError
from route_notams.models.coordinate import Coordinate
from route_notams.models.notam import NotamRecord, ScoredNotam
from route_notams.models.route import RouteEndpoints
from route_notams.route.great_circle import GreatCircleRouter
from route_notams.scoring.engine import ScoringEngine
from route_notams.scoring.prioritizer import Prioritizer

logger = logging.getLogger(__name__)


class RouteNotamPipeline:
    """
    Route NOTAM briefing pipeline.

    Builds waypoints along the great circle between two points, queries
    the NOTAM API around each of them, removes the duplicates caused by
    overlapping query circles and ranks what is left.

    Example:
        pipeline = RouteNotamPipeline(CredentialPool.from_env())
        records = pipeline.fetch_route(Coordinate(35.3931, -97.6007),
                                       Coordinate(32.8998, -97.0403))
        ranked = pipeline.prioritize(records, "KOKC", "KDFW")
    """

    def __init__(
        self,
        pool: CredentialPool,
        config: Optional[NotamApiConfig] = None,
        session: Optional[requests.Session] = None,
        directory: Optional[AirportDirectory] = None,
        engine: Optional[ScoringEngine] = None,
    ):
        """
        Args:
            pool: Credentials for the NOTAM API
            config: API and route settings; defaults if omitted
            session: Optional requests.Session for dependency injection (testing).
            directory: Airport lookup used by fetch_route_between
            engine: Scoring engine; default rules if omitted
        """
        self.config = config or NotamApiConfig()
        self.directory = directory
        self.fetcher = FetchOrchestrator(pool, self.config, session=session)
        self.deduplicator = Deduplicator()
        self.prioritizer = Prioritizer(engine)
        self.last_report: Optional[FetchReport] = None

    def fetch_route(self, departure: Coordinate, destination: Coordinate) -> List[NotamRecord]:
        """
        Fetch the unique NOTAMs along a route.

        Args:
            departure: Departure position
            destination: Destination position

        Returns:
            Deduplicated records, in waypoint order of first appearance

        Raises:
            ValidationError: If a position is invalid
            RateLimitError: If the API rate limited any request
        """
        departure = self._coordinate(departure, "departure")
        destination = self._coordinate(destination, "destination")

        waypoints = GreatCircleRouter.waypoints(departure, destination, self.config.waypoint_spacing_nm)
        self.last_report = None
        records, self.last_report = self.fetcher.fetch_waypoints(waypoints)
        unique = self.deduplicator.dedup(records)

        logger.info(f"Route {departure} -> {destination}: {len(waypoints)} waypoints, "
                    f"{len(records)} NOTAMs, {len(unique)} unique")
        return unique

    def fetch_airport(self, code: str) -> List[NotamRecord]:
        """
        Fetch the unique NOTAMs for one airport.

        Raises:
            ValidationError: If the code is not a valid ICAO code
            UpstreamError: If the airport could not be fetched
            RateLimitError: If the API rate limited the request
        """
        icao = normalize_icao(code)
        self.last_report = None
        records, self.last_report = self.fetcher.fetch_location(icao)
        return self.deduplicator.dedup(records)

    def fetch_route_between(self, departure_code: str, destination_code: str) -> List[NotamRecord]:
        """
        Fetch the unique NOTAMs between two airports known to the directory.

        Raises:
            ValidationError: If there is no directory or a code is unknown
        """
        if self.directory is None:
            raise ValidationError("No airport directory configured")

        departure = self._resolve(departure_code)
        destination = self._resolve(destination_code)
        return self.fetch_route(departure, destination)

    def prioritize(
        self,
        records: Iterable[Union[NotamRecord, ScoredNotam]],
        departure_code: Optional[str] = None,
        destination_code: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[ScoredNotam]:
        """
        Score and rank records for a flight.

        Args:
            records: Records, typically from fetch_route
            departure_code: Departure ICAO code, if known
            destination_code: Destination ICAO code, if known
            now: Evaluation instant, defaults to the current UTC time

        Returns:
            Scored records, most important first
        """
        endpoints = RouteEndpoints(departure_code=departure_code, destination_code=destination_code)
        return self.prioritizer.prioritize(records, now=now, endpoints=endpoints)

    def close(self) -> None:
        self.fetcher.close()

    def __enter__(self) -> 'RouteNotamPipeline':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _resolve(self, code: str) -> Coordinate:
        icao = normalize_icao(code)
        position = self.directory.lookup(icao)
        if position is None:
            raise ValidationError(f"Unknown airport: {icao}")
        return position

    @staticmethod
    def _coordinate(value, label: str) -> Coordinate:
        if isinstance(value, Coordinate):
            return value
        try:
            latitude, longitude = value
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid {label} position: {value!r}") from None
        return Coordinate(latitude, longitude)
