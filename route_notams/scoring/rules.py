"""
Scoring rules.

Every rule is a pure function of (record, now, endpoints) returning a
contribution in points. Rules with tunable weights come with a make_*
factory; the module-level rule is the factory called with defaults.
"""

import re
from datetime import datetime
from typing import Dict, List, Optional, Pattern, Tuple

from route_notams.models.notam import NotamRecord, NotamCategory
from route_notams.models.route import RouteEndpoints
from route_notams.scoring.base import ScoringRule, NamedRule, as_utc

# ---- Category weights ----
CATEGORY_WEIGHTS: Dict[NotamCategory, float] = {
    NotamCategory.RUNWAY: 50.0,
    NotamCategory.AIRSPACE: 40.0,
    NotamCategory.OBSTACLE: 30.0,
    NotamCategory.TAXIWAY: 25.0,
    NotamCategory.UNKNOWN: 0.0,
}

# ---- Keyword classes ----
# Format: (name, pattern, weight). Classes are independent and all add up.
KEYWORD_CLASSES: List[Tuple[str, str, float]] = [
    ('closed', r'\b(CLOSED|CLSD)\b', 40.0),
    ('unserviceable', r'\b(UNSERVICEABLE|U/S)(?![\w/])', 30.0),
    ('navaid', r'\b(NAVAID|VOR/DME|VOR|NDB|ILS|LOC|GPS|GLS)\b', 35.0),
    ('fuel_unavailable', r'\bFUEL\b.*\b(NOT\s+AV(AIL(ABLE)?|BL)|UNAVBL|UNAVAIL(ABLE)?)\b', 35.0),
    ('maintenance', r'\b(MAINT|MAINTENANCE)\b', 10.0),
    ('unmanned', r'\b(UAS|UNMANNED|DRONES?)\b', 25.0),
    ('glider', r'\b(GLD|GLIDERS?)\b', 20.0),
    ('high_speed', r'\b(HIGH\s*SPEED|HIGHSPD|HI-SPD)\b', 25.0),
]

# ---- Recency knobs ----
RECENCY_MAX = 20.0
RECENCY_FULL_CREDIT_HOURS = 24.0
RECENCY_HALF_LIFE_HOURS = 72.0

# ---- Proximity knobs ----
RADIUS_NEAR_MAX = 15.0
RADIUS_NEAR_NM = 5.0
RADIUS_FADE_NM = 50.0
REGION_WIDE_RADIUS_NM = 100.0
REGION_WIDE_PENALTY = -10.0
ENDPOINT_BONUS = 20.0

# ---- Serious fuel outage ----
SERIOUS_FUEL_BONUS = 65.0
SERIOUS_FUEL_PHRASES = (
    'ALL FUEL',
    'NO FUEL',
    'SELF SERVE 100LL FUEL NOT AVBL',
    'SELF SERVE JET A FUEL NOT AVBL',
)


def make_category_rule(weights: Optional[Dict[NotamCategory, float]] = None) -> ScoringRule:
    """Fixed points per category: runway > airspace > obstacle > taxiway > unknown."""
    table = dict(CATEGORY_WEIGHTS if weights is None else weights)

    def category_rule(record: NotamRecord, now: datetime, endpoints: RouteEndpoints) -> float:
        return table.get(record.category, 0.0)

    return category_rule


def make_keyword_rule(classes: Optional[List[Tuple[str, str, float]]] = None) -> ScoringRule:
    """
    Points for each keyword class found in the text.

    Args:
        classes: (name, regex, weight) triples, matched case-insensitively
    """
    compiled: List[Tuple[str, Pattern, float]] = [
        (name, re.compile(pattern, re.IGNORECASE | re.DOTALL), weight)
        for name, pattern, weight in (KEYWORD_CLASSES if classes is None else classes)
    ]

    def keyword_rule(record: NotamRecord, now: datetime, endpoints: RouteEndpoints) -> float:
        text = record.text
        if not text:
            return 0.0
        return sum(weight for _, pattern, weight in compiled if pattern.search(text))

    return keyword_rule


def matched_keyword_classes(text: str, classes: Optional[List[Tuple[str, str, float]]] = None) -> List[str]:
    """Names of the keyword classes present in text, for display and debugging."""
    if not text:
        return []
    return [
        name for name, pattern, _ in (KEYWORD_CLASSES if classes is None else classes)
        if re.search(pattern, text, re.IGNORECASE | re.DOTALL)
    ]


def make_recency_rule(
    max_points: float = RECENCY_MAX,
    full_credit_hours: float = RECENCY_FULL_CREDIT_HOURS,
    half_life_hours: float = RECENCY_HALF_LIFE_HOURS,
) -> ScoringRule:
    """
    Full credit for recently issued NOTAMs, exponential decay afterwards.

    Issue times in the future count as age zero.
    """

    def recency_rule(record: NotamRecord, now: datetime, endpoints: RouteEndpoints) -> float:
        issued = as_utc(record.issued_at)
        if issued is None:
            return 0.0
        age_hours = max(0.0, (as_utc(now) - issued).total_seconds() / 3600.0)
        if age_hours <= full_credit_hours:
            return max_points
        return max_points * 0.5 ** ((age_hours - full_credit_hours) / half_life_hours)

    return recency_rule


def make_proximity_rule(
    near_points: float = RADIUS_NEAR_MAX,
    near_radius_nm: float = RADIUS_NEAR_NM,
    fade_radius_nm: float = RADIUS_FADE_NM,
    region_radius_nm: float = REGION_WIDE_RADIUS_NM,
    region_penalty: float = REGION_WIDE_PENALTY,
    endpoint_bonus: float = ENDPOINT_BONUS,
) -> ScoringRule:
    """
    Favour local NOTAMs and those at the departure or destination airport.

    - radius <= near_radius_nm: full near_points
    - linear fade to zero at fade_radius_nm
    - radius >= region_radius_nm: region_penalty on top
    - endpoint_bonus for each endpoint code equal to the location
    """

    def proximity_rule(record: NotamRecord, now: datetime, endpoints: RouteEndpoints) -> float:
        score = 0.0

        radius = record.radius_nm
        if radius is not None:
            if radius <= near_radius_nm:
                score += near_points
            else:
                capped = min(fade_radius_nm, radius)
                score += near_points * (fade_radius_nm - capped) / (fade_radius_nm - near_radius_nm)
            if radius >= region_radius_nm:
                score += region_penalty

        if record.location and endpoints is not None:
            location = record.location.upper()
            score += endpoint_bonus * sum(1 for code in endpoints.codes if code == location)

        return score

    return proximity_rule


def serious_fuel_rule(record: NotamRecord, now: datetime, endpoints: RouteEndpoints) -> float:
    """Extra points when all fuel, or all self-serve fuel, is out."""
    if not record.text:
        return 0.0
    text = record.text.upper()
    if any(phrase in text for phrase in SERIOUS_FUEL_PHRASES):
        return SERIOUS_FUEL_BONUS
    return 0.0


category_rule = make_category_rule()
keyword_rule = make_keyword_rule()
recency_rule = make_recency_rule()
proximity_rule = make_proximity_rule()


def default_rules() -> List[NamedRule]:
    """The standard rule set: category, keywords, recency, proximity."""
    return [
        ('category', category_rule),
        ('keywords', keyword_rule),
        ('recency', recency_rule),
        ('proximity', proximity_rule),
    ]
