"""
Route NOTAM briefing library.

Fetches NOTAMs from the FAA NOTAM API along the great circle between two
airports, removes duplicates returned by overlapping queries and ranks
them by operational importance.

The main public API includes:
- RouteNotamPipeline: fetch_route, fetch_airport, fetch_route_between, prioritize
- CredentialPool: API credentials striped over concurrent requests
- NotamApiConfig: API and route settings
- NotamRecord / ScoredNotam: Normalized and ranked NOTAMs
- ScoringEngine: Composable scoring rules
"""

from route_notams.airports import AirportDirectory, StaticAirportDirectory
from route_notams.api.credentials import Credential, CredentialPool
from route_notams.config import NotamApiConfig
from route_notams.exceptions import (
    NotamError,
    ConfigurationError,
    ValidationError,
    UpstreamError,
    RateLimitError,
)
from route_notams.models import Coordinate, NotamRecord, NotamCategory, ScoredNotam, RouteEndpoints
from route_notams.pipeline import RouteNotamPipeline
from route_notams.scoring import ScoringEngine, Prioritizer

__version__ = '0.1.0'
__all__ = [
    'RouteNotamPipeline',
    'AirportDirectory',
    'StaticAirportDirectory',
    'Credential',
    'CredentialPool',
    'NotamApiConfig',
    'NotamError',
    'ConfigurationError',
    'ValidationError',
    'UpstreamError',
    'RateLimitError',
    'Coordinate',
    'NotamRecord',
    'NotamCategory',
    'ScoredNotam',
    'RouteEndpoints',
    'ScoringEngine',
    'Prioritizer',
]
