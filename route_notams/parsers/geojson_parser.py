"""
Parser for FAA NOTAM API GeoJSON pages.

Turns one page document into NotamRecord objects, skipping items that lack
required fields and geocoding records from their text when the geometry has
no usable point.
"""

import json
import logging
import math
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple, Union

from dateutil import parser as date_parser

from route_notams.exceptions import UpstreamError, ValidationError
from route_notams.models.coordinate import Coordinate
from route_notams.models.notam import (
    NotamRecord,
    NotamCategory,
    CoordinateSource,
    EffectiveWindow,
)

logger = logging.getLogger(__name__)


@dataclass
class PageParseResult:
    """
    Outcome of parsing one page.

    Attributes:
        records: Records parsed from the page, in item order
        page_num: Page number declared by the envelope
        total_pages: Total pages declared by the envelope (1 if absent)
        skipped: Number of items skipped for missing or invalid fields
        coordinate_sources: How many records got their coordinate from each source
    """
    records: List[NotamRecord] = field(default_factory=list)
    page_num: int = 1
    total_pages: int = 1
    skipped: int = 0
    coordinate_sources: Counter = field(default_factory=Counter)


class ResponseParser:
    """
    Parser for FAA NOTAM API responses in geoJson format.

    Each item is a GeoJSON feature shaped like:
        {
            "type": "Feature",
            "properties": {"coreNOTAMData": {"notam": {...}}},
            "geometry": {"type": "Point", "coordinates": [lon, lat]}
        }

    The parser holds no per-call state and can be shared between threads.

    Example:
        parser = ResponseParser()
        result = parser.parse_page(parser.parse_document(response.text))
        for record in result.records:
            print(record.id, record.coordinate_source)
    """

    # Position token in free text: DDMM[SS][.s]N/S DDDMM[SS][.s]E/W
    COORD_PATTERN = re.compile(
        r'(?<!\d)(\d{2})(\d{2})(\d{2}(?:\.\d+)?)?\s*([NS])\s*'
        r'(\d{3})(\d{2})(\d{2}(?:\.\d+)?)?\s*([EW])\b',
        re.IGNORECASE
    )

    PERMANENT_TOKENS = ('PERM', 'UFN')

    ICAO_PATTERN = re.compile(r'^[A-Z]{4}$')

    def parse_document(self, body: Union[str, bytes, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Decode and validate a page document.

        Args:
            body: Raw response text/bytes or an already decoded document

        Returns:
            The decoded top-level object

        Raises:
            UpstreamError: If the body is not a JSON object with an items list
        """
        if isinstance(body, dict):
            document = body
        else:
            if isinstance(body, bytes):
                body = body.decode('utf-8', errors='replace')
            if body is None or not body.strip():
                raise UpstreamError("Empty page document")
            try:
                document = json.loads(body)
            except json.JSONDecodeError as e:
                raise UpstreamError(f"Invalid page document: {e}") from e

        if not isinstance(document, dict):
            raise UpstreamError(f"Page document is a {type(document).__name__}, expected an object")
        if not isinstance(document.get('items'), list):
            raise UpstreamError("Page document has no 'items' array")
        return document

    def parse_page(self, document: Dict[str, Any]) -> PageParseResult:
        """
        Parse every item of a validated page document.

        Args:
            document: Document returned by parse_document

        Returns:
            PageParseResult with records and counters
        """
        result = PageParseResult(
            page_num=self._as_int(document.get('pageNum'), 1),
            total_pages=max(1, self._as_int(document.get('totalPages'), 1)),
        )

        items = document.get('items') or []
        for i, item in enumerate(items):
            try:
                record = self.parse_item(item)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Item {i + 1}/{len(items)} on page {result.page_num} is malformed: {e}")
                record = None
            if record is None:
                result.skipped += 1
                logger.debug(f"Skipped item {i + 1}/{len(items)} on page {result.page_num}")
                continue
            result.records.append(record)
            result.coordinate_sources[record.coordinate_source] += 1

        if result.skipped:
            logger.warning(
                f"Page {result.page_num}/{result.total_pages}: parsed {len(result.records)} NOTAMs, "
                f"skipped {result.skipped}"
            )
        else:
            logger.debug(f"Page {result.page_num}/{result.total_pages}: parsed {len(result.records)} NOTAMs")
        return result

    def parse_item(self, item: Any) -> Optional[NotamRecord]:
        """
        Parse one feature into a NotamRecord.

        Returns:
            The record, or None if a required field is missing or invalid
        """
        notam = self._notam_node(item)
        if notam is None:
            logger.debug("Item has no properties.coreNOTAMData.notam node")
            return None

        notam_id = self._text(notam, 'id')
        number = self._text(notam, 'number')
        issued_raw = self._text(notam, 'issued')
        if not notam_id or not number or not issued_raw:
            logger.debug(f"Item missing required fields - id: {notam_id}, number: {number}, issued: {issued_raw}")
            return None

        issued_at = self.parse_timestamp(issued_raw)
        if issued_at is None:
            logger.warning(f"NOTAM {notam_id}: unparsable issued timestamp {issued_raw!r}")
            return None

        text = self._text(notam, 'text') or ""
        raw_type = self._text(notam, 'type')
        coordinate, source = self.extract_coordinate(item, text)

        return NotamRecord(
            id=notam_id,
            number=number,
            category=NotamCategory.from_type_token(raw_type),
            location=self._location(notam),
            issued_at=issued_at,
            effective_window=self._effective_window(notam),
            coordinate=coordinate,
            radius_nm=self.extract_radius(item, notam_id),
            text=text,
            raw_type=raw_type,
            classification=self._text(notam, 'classification'),
            coordinate_source=source,
        )

    @classmethod
    def parse_timestamp(cls, value: Optional[str]) -> Optional[datetime]:
        """
        Parse an ISO 8601 timestamp; naive values are taken as UTC.

        Returns:
            Timezone-aware datetime or None
        """
        if not value:
            return None
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def extract_coordinate(self, item: Any, text: str) -> Tuple[Optional[Coordinate], CoordinateSource]:
        """
        Find a position for an item.

        Order: Point geometry (or first Point of a GeometryCollection), then a
        position token in the text. Never falls back to (0, 0).

        Returns:
            Tuple of (coordinate or None, where it came from)
        """
        geometry = item.get('geometry') if isinstance(item, dict) else None
        coordinate = self._point_from_geometry(geometry)
        if coordinate is not None:
            return coordinate, CoordinateSource.GEOMETRY

        coordinate = self.parse_text_position(text)
        if coordinate is not None:
            return coordinate, CoordinateSource.TEXT

        return None, CoordinateSource.NONE

    @classmethod
    def parse_text_position(cls, text: Optional[str]) -> Optional[Coordinate]:
        """
        Decode the first DDMM[SS]N DDDMM[SS]W position found in text.

        Example: "OBST TOWER 352130N0973612W" -> (35.3583, -97.6033)
        """
        if not text:
            return None

        for match in cls.COORD_PATTERN.finditer(text):
            lat_deg, lat_min, lat_sec, lat_dir, lon_deg, lon_min, lon_sec, lon_dir = match.groups()
            if int(lat_min) >= 60 or int(lon_min) >= 60:
                continue
            if (lat_sec and float(lat_sec) >= 60) or (lon_sec and float(lon_sec) >= 60):
                continue

            lat = int(lat_deg) + int(lat_min) / 60.0 + (float(lat_sec) / 3600.0 if lat_sec else 0.0)
            lon = int(lon_deg) + int(lon_min) / 60.0 + (float(lon_sec) / 3600.0 if lon_sec else 0.0)
            if lat_dir.upper() == 'S':
                lat = -lat
            if lon_dir.upper() == 'W':
                lon = -lon

            try:
                return Coordinate(lat, lon)
            except ValidationError:
                continue
        return None

    def extract_radius(self, item: Any, notam_id: Optional[str] = None) -> Optional[float]:
        """
        Radius in nautical miles.

        A radius on the geometry wins over one on the NOTAM data; a mismatch
        is logged.
        """
        geometry = item.get('geometry') if isinstance(item, dict) else None
        geometry_radius = self._as_float(geometry.get('radius')) if isinstance(geometry, dict) else None

        notam = self._notam_node(item)
        record_radius = self._as_float(notam.get('radius')) if notam is not None else None

        if geometry_radius is not None:
            if record_radius is not None and not math.isclose(geometry_radius, record_radius):
                logger.warning(
                    f"NOTAM {notam_id}: geometry radius {geometry_radius} nm differs from "
                    f"record radius {record_radius} nm, using geometry"
                )
            return geometry_radius
        return record_radius

    # --- helpers ---

    @staticmethod
    def _notam_node(item: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(item, dict):
            return None
        properties = item.get('properties')
        if not isinstance(properties, dict):
            return None
        core = properties.get('coreNOTAMData')
        if not isinstance(core, dict):
            return None
        notam = core.get('notam')
        return notam if isinstance(notam, dict) else None

    def _point_from_geometry(self, geometry: Any) -> Optional[Coordinate]:
        if not isinstance(geometry, dict):
            return None

        geometry_type = geometry.get('type')
        if geometry_type == 'Point':
            return self._point(geometry.get('coordinates'))

        if geometry_type == 'GeometryCollection':
            members = geometry.get('geometries')
            if not isinstance(members, list):
                return None
            for member in members:
                if isinstance(member, dict) and member.get('type') == 'Point':
                    point = self._point(member.get('coordinates'))
                    if point is not None:
                        return point
        return None

    @staticmethod
    def _point(coordinates: Any) -> Optional[Coordinate]:
        # GeoJSON order is [longitude, latitude]
        if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
            return None
        try:
            lon = float(coordinates[0])
            lat = float(coordinates[1])
            return Coordinate(lat, lon)
        except (TypeError, ValueError):
            return None

    def _location(self, notam: Dict[str, Any]) -> Optional[str]:
        for key in ('icaoLocation', 'location'):
            value = self._text(notam, key)
            if value and self.ICAO_PATTERN.match(value.upper()):
                return value.upper()
        return None

    def _effective_window(self, notam: Dict[str, Any]) -> EffectiveWindow:
        start = self.parse_timestamp(self._text(notam, 'effectiveStart'))
        end_raw = self._text(notam, 'effectiveEnd')
        if end_raw and end_raw.strip().upper() in self.PERMANENT_TOKENS:
            return EffectiveWindow(start=start, end=None, is_permanent=True)
        return EffectiveWindow(start=start, end=self.parse_timestamp(end_raw))

    @staticmethod
    def _text(node: Dict[str, Any], key: str) -> Optional[str]:
        value = node.get(key)
        if value is None:
            return None
        value = str(value)
        return value if value.strip() else None

    @staticmethod
    def _as_float(value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            result = float(value)
        except (TypeError, ValueError):
            return None
        return result if math.isfinite(result) else None

    @staticmethod
    def _as_int(value: Any, default: int) -> int:
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return default
