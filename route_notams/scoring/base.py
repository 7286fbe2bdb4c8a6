"""Base types for NOTAM scoring rules."""

from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from route_notams.models.notam import NotamRecord
from route_notams.models.route import RouteEndpoints

# A rule scores one record at an evaluation instant for a given route.
#
# Example:
#     def night_rule(record: NotamRecord, now: datetime, endpoints: RouteEndpoints) -> float:
#         return 5.0 if 'NIGHT' in record.text.upper() else 0.0
ScoringRule = Callable[[NotamRecord, datetime, RouteEndpoints], float]

# A rule registered under a name, used for score breakdowns
NamedRule = Tuple[str, ScoringRule]


def as_utc(instant: Optional[datetime]) -> Optional[datetime]:
    """Make a datetime timezone aware; naive values are taken as UTC."""
    if instant is None:
        return None
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
