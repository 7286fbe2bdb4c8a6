"""
Configuration for the FAA NOTAM API client.
"""

import os
from dataclasses import dataclass
from typing import Optional

from route_notams.exceptions import ConfigurationError

# API endpoint
DEFAULT_API_URL = "https://external-api.faa.gov/notamapi/v1/notams"
RESPONSE_FORMAT = "geoJson"
SORT_BY = "effectiveStartDate"
SORT_ORDER = "Desc"
DEFAULT_CLASSIFICATION = "DOM"

# Request limits
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_PAGE_SIZE = 50
DEFAULT_MAX_PAGES_PER_WAYPOINT = 5
DEFAULT_WORKERS_PER_CREDENTIAL = 2

# Route sampling (nautical miles)
DEFAULT_WAYPOINT_SPACING_NM = 50.0
DEFAULT_QUERY_RADIUS_NM = 50

USER_AGENT = "route-notams/0.1 (flight briefing tool)"


@dataclass(frozen=True)
class NotamApiConfig:
    """
    Settings for one pipeline instance.

    Attributes:
        base_url: NOTAM API endpoint
        timeout_seconds: Per-request timeout
        page_size: Items requested per page
        max_pages_per_waypoint: Upper bound on pages followed for one query
        waypoint_spacing_nm: Distance between route query centers
        query_radius_nm: Radius of each route query circle
        classification: Classification filter, None to omit it
        workers_per_credential: Worker threads per credential in the pool
        user_agent: User-Agent header sent with every request
    """
    base_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages_per_waypoint: int = DEFAULT_MAX_PAGES_PER_WAYPOINT
    waypoint_spacing_nm: float = DEFAULT_WAYPOINT_SPACING_NM
    query_radius_nm: int = DEFAULT_QUERY_RADIUS_NM
    classification: Optional[str] = DEFAULT_CLASSIFICATION
    workers_per_credential: int = DEFAULT_WORKERS_PER_CREDENTIAL
    user_agent: str = USER_AGENT

    def __post_init__(self):
        for name in ('timeout_seconds', 'page_size', 'max_pages_per_waypoint',
                     'waypoint_spacing_nm', 'query_radius_nm', 'workers_per_credential'):
            value = getattr(self, name)
            if value is None or not value > 0:
                raise ConfigurationError(f"{name} must be positive, got {value!r}")
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")

    @classmethod
    def from_env(cls) -> 'NotamApiConfig':
        """
        Build configuration from environment variables, falling back to defaults.

        Recognised variables: NOTAM_API_URL, NOTAM_HTTP_TIMEOUT_SECONDS,
        NOTAM_PAGE_SIZE, NOTAM_MAX_PAGES, NOTAM_WAYPOINT_SPACING_NM,
        NOTAM_QUERY_RADIUS_NM, NOTAM_CLASSIFICATION.
        """
        classification = os.getenv("NOTAM_CLASSIFICATION", DEFAULT_CLASSIFICATION)
        return cls(
            base_url=os.getenv("NOTAM_API_URL", DEFAULT_API_URL),
            timeout_seconds=_env_number("NOTAM_HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, float),
            page_size=_env_number("NOTAM_PAGE_SIZE", DEFAULT_PAGE_SIZE, int),
            max_pages_per_waypoint=_env_number("NOTAM_MAX_PAGES", DEFAULT_MAX_PAGES_PER_WAYPOINT, int),
            waypoint_spacing_nm=_env_number("NOTAM_WAYPOINT_SPACING_NM", DEFAULT_WAYPOINT_SPACING_NM, float),
            query_radius_nm=_env_number("NOTAM_QUERY_RADIUS_NM", DEFAULT_QUERY_RADIUS_NM, int),
            classification=classification or None,
        )


def _env_number(name: str, default, kind):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
