"""NOTAM data model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from route_notams.models.coordinate import Coordinate


class NotamCategory(Enum):
    """
    Coarse NOTAM category used for scoring.

    Derived from the upstream type token; anything unrecognised is UNKNOWN.
    """
    RUNWAY = "runway"
    TAXIWAY = "taxiway"
    AIRSPACE = "airspace"
    OBSTACLE = "obstacle"
    UNKNOWN = "unknown"

    @classmethod
    def from_type_token(cls, token: Optional[str]) -> 'NotamCategory':
        """
        Map a raw upstream type token to a category.

        Args:
            token: Type token such as "RWY", "RUNWAY", "TWY", "AIRSPACE"

        Returns:
            Matching category, UNKNOWN when absent or unrecognised
        """
        if not token:
            return cls.UNKNOWN
        return _TYPE_TOKENS.get(token.strip().upper(), cls.UNKNOWN)


_TYPE_TOKENS: Dict[str, NotamCategory] = {
    'RWY': NotamCategory.RUNWAY,
    'RUNWAY': NotamCategory.RUNWAY,
    'TWY': NotamCategory.TAXIWAY,
    'TAXIWAY': NotamCategory.TAXIWAY,
    'AIRSPACE': NotamCategory.AIRSPACE,
    'SUA': NotamCategory.AIRSPACE,
    'TFR': NotamCategory.AIRSPACE,
    'OBST': NotamCategory.OBSTACLE,
    'OBSTACLE': NotamCategory.OBSTACLE,
}


class CoordinateSource(Enum):
    """Where a record's coordinate came from."""
    GEOMETRY = "geometry"
    TEXT = "text"
    NONE = "none"


@dataclass(frozen=True)
class EffectiveWindow:
    """
    Period during which a NOTAM applies.

    Attributes:
        start: Start of validity, if known
        end: End of validity; None when open-ended or unknown
        is_permanent: True when the upstream end was PERM/UFN
    """
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    is_permanent: bool = False

    def is_active_at(self, instant: datetime) -> bool:
        """Check whether the window covers an instant. Unknown bounds are open."""
        if self.start and instant < self.start:
            return False
        if self.end and instant > self.end:
            return False
        return True

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat() if self.start else None,
            'end': self.end.isoformat() if self.end else None,
            'is_permanent': self.is_permanent,
        }


@dataclass(frozen=True)
class NotamRecord:
    """
    One normalized NOTAM as returned by the advisory API.

    Equality for deduplication is not field equality: see
    route_notams.collections.deduplicator.dedup_key.

    Attributes:
        id: Upstream identifier, normally present
        number: Human NOTAM number (e.g., "05/123")
        category: Coarse category derived from the type token
        location: 4-letter ICAO code, if known
        issued_at: Issue timestamp (timezone aware)
        effective_window: Validity period
        coordinate: Position; never defaulted to (0, 0)
        radius_nm: Declared radius of effect in nautical miles
        text: Free-form NOTAM text

    Example:
        record = NotamRecord(
            id="N123",
            number="05/123",
            category=NotamCategory.RUNWAY,
            location="KOKC",
            text="RWY 17L/35R CLSD"
        )
    """

    id: Optional[str]
    number: Optional[str]
    category: NotamCategory = NotamCategory.UNKNOWN
    location: Optional[str] = None
    issued_at: Optional[datetime] = None
    effective_window: EffectiveWindow = field(default_factory=EffectiveWindow)
    coordinate: Optional[Coordinate] = None
    radius_nm: Optional[float] = None
    text: str = ""

    # Parsing metadata
    raw_type: Optional[str] = None
    classification: Optional[str] = None
    coordinate_source: CoordinateSource = CoordinateSource.NONE

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to dictionary for JSON export or rendering.

        Returns:
            Dictionary representation suitable for JSON serialization.
        """
        return {
            'id': self.id,
            'number': self.number,
            'category': self.category.value,
            'location': self.location,
            'issued_at': self.issued_at.isoformat() if self.issued_at else None,
            'effective_window': self.effective_window.to_dict(),
            'coordinates': list(self.coordinate.to_tuple()) if self.coordinate else None,
            'radius_nm': self.radius_nm,
            'text': self.text,
            'raw_type': self.raw_type,
            'classification': self.classification,
            'coordinate_source': self.coordinate_source.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'NotamRecord':
        """
        Create NotamRecord from dictionary produced by to_dict.

        Args:
            data: Dictionary with record fields

        Returns:
            NotamRecord instance
        """
        issued_at = None
        if data.get('issued_at'):
            issued_at = datetime.fromisoformat(data['issued_at'])

        window_data = data.get('effective_window') or {}
        window = EffectiveWindow(
            start=datetime.fromisoformat(window_data['start']) if window_data.get('start') else None,
            end=datetime.fromisoformat(window_data['end']) if window_data.get('end') else None,
            is_permanent=window_data.get('is_permanent', False),
        )

        coordinate = None
        if data.get('coordinates'):
            lat, lon = data['coordinates']
            coordinate = Coordinate(lat, lon)

        category = NotamCategory.UNKNOWN
        if data.get('category'):
            try:
                category = NotamCategory(data['category'])
            except ValueError:
                pass

        coordinate_source = CoordinateSource.NONE
        if data.get('coordinate_source'):
            try:
                coordinate_source = CoordinateSource(data['coordinate_source'])
            except ValueError:
                pass

        return cls(
            id=data.get('id'),
            number=data.get('number'),
            category=category,
            location=data.get('location'),
            issued_at=issued_at,
            effective_window=window,
            coordinate=coordinate,
            radius_nm=data.get('radius_nm'),
            text=data.get('text') or "",
            raw_type=data.get('raw_type'),
            classification=data.get('classification'),
            coordinate_source=coordinate_source,
        )

    def __str__(self) -> str:
        label = self.number or self.id or "?"
        message = self.text if len(self.text) <= 50 else f"{self.text[:50]}..."
        return f"{label} ({self.location or '----'}): {message}"


@dataclass(frozen=True)
class ScoredNotam:
    """
    A NOTAM with its priority score.

    Attributes:
        record: The scored NOTAM
        score: Sum of all rule contributions
        breakdown: Contribution of each rule, keyed by rule name
    """
    record: NotamRecord
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)

    @property
    def display_score(self) -> float:
        """Score rounded to two decimals for display."""
        return round(self.score, 2)

    def to_dict(self) -> Dict[str, Any]:
        data = self.record.to_dict()
        data['score'] = self.display_score
        data['breakdown'] = {name: round(value, 2) for name, value in self.breakdown.items()}
        return data

    def __repr__(self) -> str:
        return f"ScoredNotam(id={self.record.id!r}, score={self.display_score})"
