"""Tests for NotamApiConfig."""

import pytest

from route_notams.config import NotamApiConfig, DEFAULT_API_URL
from route_notams.exceptions import ConfigurationError

ENV_VARS = (
    "NOTAM_API_URL",
    "NOTAM_HTTP_TIMEOUT_SECONDS",
    "NOTAM_PAGE_SIZE",
    "NOTAM_MAX_PAGES",
    "NOTAM_WAYPOINT_SPACING_NM",
    "NOTAM_QUERY_RADIUS_NM",
    "NOTAM_CLASSIFICATION",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestNotamApiConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = NotamApiConfig()
        assert config.base_url == DEFAULT_API_URL
        assert config.timeout_seconds == 30
        assert config.page_size == 50
        assert config.max_pages_per_waypoint == 5
        assert config.waypoint_spacing_nm == 50.0
        assert config.query_radius_nm == 50
        assert config.classification == "DOM"

    @pytest.mark.parametrize("field_name", [
        "timeout_seconds",
        "page_size",
        "max_pages_per_waypoint",
        "waypoint_spacing_nm",
        "query_radius_nm",
        "workers_per_credential",
    ])
    def test_must_be_positive(self, field_name):
        with pytest.raises(ConfigurationError):
            NotamApiConfig(**{field_name: 0})

    def test_empty_url_rejected(self):
        with pytest.raises(ConfigurationError):
            NotamApiConfig(base_url="")


class TestConfigFromEnv:
    """Environment overrides."""

    def test_defaults_without_env(self, clean_env):
        assert NotamApiConfig.from_env() == NotamApiConfig()

    def test_overrides(self, clean_env):
        clean_env.setenv("NOTAM_API_URL", "https://notams.test/api")
        clean_env.setenv("NOTAM_PAGE_SIZE", "100")
        clean_env.setenv("NOTAM_MAX_PAGES", "2")
        clean_env.setenv("NOTAM_WAYPOINT_SPACING_NM", "25.5")
        clean_env.setenv("NOTAM_HTTP_TIMEOUT_SECONDS", "10")

        config = NotamApiConfig.from_env()

        assert config.base_url == "https://notams.test/api"
        assert config.page_size == 100
        assert config.max_pages_per_waypoint == 2
        assert config.waypoint_spacing_nm == 25.5
        assert config.timeout_seconds == 10.0

    def test_blank_classification_disables_filter(self, clean_env):
        clean_env.setenv("NOTAM_CLASSIFICATION", "")
        assert NotamApiConfig.from_env().classification is None

    def test_bad_number(self, clean_env):
        clean_env.setenv("NOTAM_PAGE_SIZE", "lots")
        with pytest.raises(ConfigurationError):
            NotamApiConfig.from_env()
