import pytest
from datetime import datetime, timezone

from route_notams.api.credentials import Credential, CredentialPool
from route_notams.config import NotamApiConfig
from route_notams.models.coordinate import Coordinate


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant for scoring tests."""
    return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def kokc() -> Coordinate:
    """Will Rogers World Airport, Oklahoma City."""
    return Coordinate(35.3931, -97.6007)


@pytest.fixture
def kdfw() -> Coordinate:
    """Dallas/Fort Worth International Airport."""
    return Coordinate(32.8998, -97.0403)


@pytest.fixture
def single_pool() -> CredentialPool:
    return CredentialPool([Credential("alpha-client", "alpha-secret")])


@pytest.fixture
def striped_pool() -> CredentialPool:
    return CredentialPool([
        Credential("alpha-client", "alpha-secret"),
        Credential("bravo-client", "bravo-secret"),
    ])


@pytest.fixture
def api_config() -> NotamApiConfig:
    return NotamApiConfig(base_url="https://notams.test/v1/notams", timeout_seconds=5)
