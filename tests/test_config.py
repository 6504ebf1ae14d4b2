"""
Tests for client configuration.
"""

import pytest
from pydantic import ValidationError

from nwps.config import DEFAULT_BASE_URL, ClientConfig
from nwps.exceptions import NWPSValidationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in (
        "NWPS_BASE_URL",
        "NWPS_TIMEOUT",
        "NWPS_MAX_RETRIES",
        "NWPS_BACKOFF_FACTOR",
        "NWPS_MAX_BACKOFF",
        "NWPS_USER_AGENT",
    ):
        monkeypatch.delenv(var, raising=False)


class TestClientConfig:
    """Test ClientConfig construction and environment overrides."""

    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout == 30.0
        assert config.max_retries == 3
        assert config.backoff_factor == 2.0

    def test_immutable(self):
        config = ClientConfig()
        with pytest.raises(ValidationError):
            config.timeout = 5

    def test_url_for(self):
        assert ClientConfig(base_url="https://x.test/v1/").url_for("/gauges") == (
            "https://x.test/v1/gauges"
        )
        assert ClientConfig(base_url="https://x.test/v1").url_for("monitor") == (
            "https://x.test/v1/monitor"
        )

    def test_with_overrides_returns_copy(self):
        config = ClientConfig()
        changed = config.with_overrides(max_retries=5)
        assert changed.max_retries == 5
        assert config.max_retries == 3

    def test_with_overrides_validates(self):
        with pytest.raises(NWPSValidationError) as exc:
            ClientConfig().with_overrides(timeout=-1)
        assert exc.value.parameter == "timeout"

    @pytest.mark.parametrize(
        "kwargs, parameter",
        [
            ({"base_url": ""}, "base_url"),
            ({"timeout": 0}, "timeout"),
            ({"max_retries": 0}, "max_retries"),
            ({"backoff_factor": -1}, "backoff_factor"),
            ({"max_backoff": -0.5}, "max_backoff"),
        ],
    )
    def test_invalid_values(self, kwargs, parameter):
        with pytest.raises(NWPSValidationError) as exc:
            ClientConfig(**kwargs)
        assert exc.value.parameter == parameter
        assert isinstance(exc.value, ValueError)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("NWPS_BASE_URL", "https://mirror.test/nwps/v1")
        monkeypatch.setenv("NWPS_TIMEOUT", "12.5")
        monkeypatch.setenv("NWPS_MAX_RETRIES", "5")
        monkeypatch.setenv("NWPS_BACKOFF_FACTOR", "")

        config = ClientConfig()

        assert config.base_url == "https://mirror.test/nwps/v1"
        assert config.timeout == 12.5
        assert config.max_retries == 5
        assert config.backoff_factor == 2.0

    def test_explicit_values_beat_environment(self, monkeypatch):
        monkeypatch.setenv("NWPS_TIMEOUT", "12")
        assert ClientConfig(timeout=3.0).timeout == 3.0

    def test_malformed_environment_value(self, monkeypatch):
        monkeypatch.setenv("NWPS_MAX_RETRIES", "lots")
        with pytest.raises(NWPSValidationError, match="NWPS_MAX_RETRIES") as exc:
            ClientConfig()
        assert exc.value.parameter == "max_retries"

    def test_out_of_range_environment_value(self, monkeypatch):
        monkeypatch.setenv("NWPS_TIMEOUT", "0")
        with pytest.raises(NWPSValidationError, match="NWPS_TIMEOUT"):
            ClientConfig()
