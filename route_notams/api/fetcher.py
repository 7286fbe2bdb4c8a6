"""Concurrent, paginated retrieval of FAA NOTAMs along a route."""

import logging
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed, CancelledError
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from route_notams.api.credentials import Credential, CredentialPool
from route_notams.api.query import NotamQuery, QueryBuilder
from route_notams.config import NotamApiConfig
from route_notams.exceptions import ConfigurationError, RateLimitError, UpstreamError
from route_notams.models.notam import NotamRecord
from route_notams.models.route import Waypoint
from route_notams.parsers.geojson_parser import ResponseParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawPage:
    """
    One decoded page of upstream response.

    Attributes:
        body: Decoded page document
        page_num: Page number that was requested
        total_pages: Total pages declared by the envelope, at least 1
    """
    body: Dict[str, Any]
    page_num: int
    total_pages: int


@dataclass
class FetchReport:
    """
    Counters for one fetch call.

    Item, page and waypoint failures are absorbed by the fetcher; this is
    where they surface.
    """
    waypoints_requested: int = 0
    waypoints_succeeded: int = 0
    waypoints_failed: int = 0
    pages_fetched: int = 0
    pages_failed: int = 0
    items_skipped: int = 0
    records: int = 0
    coordinate_sources: Counter = field(default_factory=Counter)
    elapsed_seconds: float = 0.0

    def summary(self) -> str:
        sources = ", ".join(f"{k.value}={v}" for k, v in sorted(
            self.coordinate_sources.items(), key=lambda kv: kv[0].value))
        return (
            f"{self.waypoints_succeeded}/{self.waypoints_requested} waypoints ok, "
            f"{self.pages_fetched} pages ({self.pages_failed} failed), "
            f"{self.records} NOTAMs ({self.items_skipped} items skipped), "
            f"coordinates [{sources}] in {self.elapsed_seconds:.2f}s"
        )


@dataclass
class _QueryResult:
    """Everything one waypoint (or airport) task produced."""
    records: List[NotamRecord] = field(default_factory=list)
    pages_fetched: int = 0
    pages_failed: int = 0
    items_skipped: int = 0
    coordinate_sources: Counter = field(default_factory=Counter)
    error: Optional[UpstreamError] = None


class FetchOrchestrator:
    """
    Fetch NOTAMs for many query centers concurrently.

    One task per waypoint runs on a thread pool sized from the credential
    count; inside a task pages are requested one after the other on the
    waypoint's credential. An HTTP 429 anywhere aborts the whole call with
    RateLimitError. Any other failure only drops the waypoint (or page) it
    happened on.

    Example:
        orchestrator = FetchOrchestrator(CredentialPool.from_env(), NotamApiConfig())
        records, report = orchestrator.fetch_waypoints(waypoints)
        print(report.summary())
    """

    def __init__(
        self,
        pool: CredentialPool,
        config: Optional[NotamApiConfig] = None,
        session: Optional[requests.Session] = None,
        parser: Optional[ResponseParser] = None,
    ):
        """
        Args:
            pool: Credentials to stripe requests over
            config: API settings; defaults are used if omitted
            session: Optional requests.Session for dependency injection (testing).
            parser: Optional response parser
        """
        if pool is None or len(pool) == 0:
            raise ConfigurationError("FetchOrchestrator needs at least one credential")
        self._pool = pool
        self._config = config or NotamApiConfig()
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", self._config.user_agent)
        self._session.headers.setdefault("Accept", "application/json")
        self._parser = parser or ResponseParser()
        self._queries = QueryBuilder(self._config)

    @property
    def config(self) -> NotamApiConfig:
        return self._config

    @property
    def max_workers(self) -> int:
        """Upper bound on concurrent waypoint tasks."""
        return self._config.workers_per_credential * len(self._pool)

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session:
            self._session.close()

    def fetch_waypoints(self, waypoints: Sequence[Waypoint]) -> Tuple[List[NotamRecord], FetchReport]:
        """
        Fetch every page for every waypoint.

        Args:
            waypoints: Query centers; waypoint.index selects the credential

        Returns:
            Tuple of (records in waypoint order, fetch report)

        Raises:
            RateLimitError: If any request was rate limited
        """
        report = FetchReport(waypoints_requested=len(waypoints))
        if not waypoints:
            return [], report

        started = time.monotonic()
        workers = min(len(waypoints), self.max_workers)
        abort = threading.Event()
        results: Dict[int, _QueryResult] = {}
        rate_limited: Optional[RateLimitError] = None

        logger.debug(f"Fetching {len(waypoints)} waypoints with {workers} workers over {len(self._pool)} credential(s)")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="notam-fetch") as executor:
            futures = {
                executor.submit(self._fetch_waypoint, waypoint, abort): waypoint
                for waypoint in waypoints
            }
            for future in as_completed(futures):
                waypoint = futures[future]
                try:
                    results[waypoint.index] = future.result()
                except CancelledError:
                    continue
                except RateLimitError as e:
                    if rate_limited is None:
                        rate_limited = e
                        abort.set()
                        cancelled = sum(1 for other in futures if other.cancel())
                        logger.error(
                            f"Rate limited on waypoint {waypoint.index}; cancelled {cancelled} pending "
                            f"waypoint(s), waiting for running ones to finish"
                        )

        if rate_limited is not None:
            raise rate_limited

        records: List[NotamRecord] = []
        for waypoint in sorted(waypoints, key=lambda wp: wp.index):
            result = results[waypoint.index]
            self._accumulate(report, result)
            if result.error is None:
                report.waypoints_succeeded += 1
                records.extend(result.records)
            else:
                report.waypoints_failed += 1

        report.records = len(records)
        report.elapsed_seconds = time.monotonic() - started
        logger.info(f"Route fetch: {report.summary()}")
        return records, report

    def fetch_location(self, icao: str) -> Tuple[List[NotamRecord], FetchReport]:
        """
        Fetch every page for a single airport.

        Args:
            icao: ICAO code

        Returns:
            Tuple of (records, fetch report)

        Raises:
            RateLimitError: If a request was rate limited
            UpstreamError: If the airport could not be fetched at all
        """
        started = time.monotonic()
        report = FetchReport(waypoints_requested=1)
        result = self._fetch_pages(self._queries.for_airport(icao), self._pool.for_index(0), None)
        self._accumulate(report, result)
        if result.error is not None:
            raise result.error

        report.waypoints_succeeded = 1
        report.records = len(result.records)
        report.elapsed_seconds = time.monotonic() - started
        logger.info(f"Airport fetch {icao.upper()}: {report.summary()}")
        return result.records, report

    def _fetch_waypoint(self, waypoint: Waypoint, abort: threading.Event) -> _QueryResult:
        credential = self._pool.for_index(waypoint.index)
        started = time.monotonic()
        result = self._fetch_pages(self._queries.for_waypoint(waypoint), credential, abort)
        if result.error is not None:
            logger.warning(f"Dropping waypoint {waypoint}: {result.error}")
        else:
            logger.debug(
                f"Waypoint {waypoint} ({credential.masked_id}): {len(result.records)} NOTAMs "
                f"from {result.pages_fetched} page(s) in {time.monotonic() - started:.2f}s"
            )
        return result

    def _fetch_pages(
        self,
        first: NotamQuery,
        credential: Credential,
        abort: Optional[threading.Event],
    ) -> _QueryResult:
        """
        Request first and following pages sequentially on one credential.

        RateLimitError propagates; any other request failure is stored on
        the result and discards what was collected so far.
        """
        result = _QueryResult()
        query = first
        last_page = 1

        while query.page_num <= last_page:
            if abort is not None and abort.is_set():
                logger.debug(f"Stopping {query.describe()}: fetch aborted")
                break

            try:
                text = self._request(query, credential)
            except UpstreamError as e:
                result.error = e
                result.records = []
                return result

            try:
                page = self._decode(text, query.page_num)
            except UpstreamError as e:
                result.pages_failed += 1
                logger.warning(f"Skipping malformed page {query.describe()}: {e}")
                if query.page_num == 1:
                    # page count unknown without a valid first page
                    break
                query = query.next_page()
                continue

            result.pages_fetched += 1
            if page.page_num == 1:
                last_page = min(page.total_pages, self._config.max_pages_per_waypoint)
                if page.total_pages > self._config.max_pages_per_waypoint:
                    logger.warning(
                        f"{query.describe()}: {page.total_pages} pages available, "
                        f"fetching only {self._config.max_pages_per_waypoint}"
                    )

            parsed = self._parser.parse_page(page.body)
            result.records.extend(parsed.records)
            result.items_skipped += parsed.skipped
            result.coordinate_sources.update(parsed.coordinate_sources)
            query = query.next_page()

        return result

    def _request(self, query: NotamQuery, credential: Credential) -> str:
        """
        Make one HTTP GET request and return the body text.

        Raises:
            RateLimitError: On HTTP 429
            UpstreamError: On any other non-200 status or network failure
        """
        started = time.monotonic()
        try:
            response = self._session.get(
                self._config.base_url,
                params=query.params(),
                headers=credential.headers(),
                timeout=self._config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Request for {query.describe()} failed: {e}") from e

        logger.debug(
            f"GET {query.describe()} ({credential.masked_id}) -> {response.status_code} "
            f"in {time.monotonic() - started:.2f}s"
        )

        if response.status_code == 429:
            raise RateLimitError(
                f"Rate limited fetching {query.describe()} with {credential.masked_id}",
                waypoint_index=query.waypoint_index,
                retry_after=response.headers.get("Retry-After"),
            )
        if response.status_code != 200:
            raise UpstreamError(
                f"NOTAM API returned HTTP {response.status_code} for {query.describe()}",
                status_code=response.status_code,
            )
        return response.text

    def _decode(self, text: str, page_num: int) -> RawPage:
        document = self._parser.parse_document(text)
        total_pages = document.get('totalPages')
        try:
            total_pages = max(1, int(total_pages))
        except (TypeError, ValueError, OverflowError):
            total_pages = 1
        return RawPage(body=document, page_num=page_num, total_pages=total_pages)

    @staticmethod
    def _accumulate(report: FetchReport, result: _QueryResult) -> None:
        report.pages_fetched += result.pages_fetched
        report.pages_failed += result.pages_failed
        report.items_skipped += result.items_skipped
        report.coordinate_sources.update(result.coordinate_sources)
