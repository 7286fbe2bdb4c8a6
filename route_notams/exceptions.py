"""Exceptions raised by the route NOTAM pipeline."""

from typing import Optional


class NotamError(Exception):
    """Base class for all route NOTAM errors."""


class ConfigurationError(NotamError):
    """Missing or invalid credentials or configuration.

    Always raised before any network call is made.
    """


class ValidationError(NotamError, ValueError):
    """Invalid input such as out-of-range coordinates or a bad airport code."""


class UpstreamError(NotamError):
    """
    The advisory API answered with something other than a usable page.

    Covers non-200/non-429 responses, network failures and malformed page
    documents. The orchestrator absorbs these per waypoint or per page.

    Attributes:
        status_code: HTTP status if a response was received
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(NotamError):
    """
    The advisory API answered HTTP 429.

    Fatal for a whole route fetch: no partial result is returned, the
    caller decides when to try again.

    Attributes:
        waypoint_index: Waypoint whose request was rejected, if known
        retry_after: Raw Retry-After header value, if the API sent one
    """

    def __init__(
        self,
        message: str,
        waypoint_index: Optional[int] = None,
        retry_after: Optional[str] = None,
    ):
        super().__init__(message)
        self.waypoint_index = waypoint_index
        self.retry_after = retry_after
