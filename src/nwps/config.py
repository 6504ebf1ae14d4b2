"""
Client configuration for the NWPS API.

Every setting can be overridden with an ``NWPS_``-prefixed environment
variable (``NWPS_BASE_URL``, ``NWPS_TIMEOUT``, ``NWPS_MAX_RETRIES``, ...).
Keyword arguments take precedence over the environment.
"""

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import NWPSValidationError

DEFAULT_BASE_URL = "https://api.water.noaa.gov/nwps/v1"

ENV_PREFIX = "NWPS_"


class ClientConfig(BaseSettings):
    """
    Immutable settings shared by every request a client makes.

    Attributes:
        base_url: Root of the NWPS REST API, endpoints are appended to it
        timeout: Per-request timeout in seconds
        max_retries: Total attempts for retryable failures (1 disables retry)
        backoff_factor: Multiplier for exponential backoff between attempts
        max_backoff: Upper bound in seconds for a single backoff wait
        user_agent: Value of the User-Agent header

    Raises:
        NWPSValidationError: If a value (passed or read from the environment)
            is malformed or out of range
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        case_sensitive=False,
        frozen=True,
    )

    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=1)
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1)
    backoff_factor: float = Field(default=2.0, ge=0)
    max_backoff: float = Field(default=30.0, ge=0)
    user_agent: str = "nwps-python-client/0.1.0"

    def __init__(self, **values: Any) -> None:
        try:
            super().__init__(**values)
        except ValidationError as e:
            raise _config_error(e) from e

    def url_for(self, endpoint: str) -> str:
        """Join the base URL and an endpoint path."""
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def with_overrides(self, **changes: Any) -> "ClientConfig":
        """Return a validated copy with the given fields replaced."""
        values = self.model_dump()
        values.update(changes)
        return type(self)(**values)


def _config_error(error: ValidationError) -> NWPSValidationError:
    first = error.errors()[0]
    name = str(first["loc"][0]) if first["loc"] else "config"
    return NWPSValidationError(
        f"Invalid {name} ({ENV_PREFIX}{name.upper()}): {first['msg']}", name
    )
