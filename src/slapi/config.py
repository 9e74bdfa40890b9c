"""Configuration models for SoftLayer API requests."""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.softlayer.com/rest/v3.1/"
DEFAULT_SERVICE = "SoftLayer_Hardware_Server"
DEFAULT_FUNCTION = "getObject"
DEFAULT_LIMIT = 25
DEFAULT_OFFSET = 0
DEFAULT_METHOD = "get"
DEFAULT_PAGE_DELAY = 0.3

ENV_PREFIX = "SLAPI_"


def _normalize_endpoint(v: str) -> str:
    if not v:
        raise ValueError("Endpoint cannot be empty")
    return v if v.endswith("/") else f"{v}/"


class RequestConfig(BaseModel):
    """Where a request is sent and who it is sent as."""

    model_config = ConfigDict(validate_assignment=True)

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT, description="Base URL of the REST API"
    )
    service: Optional[str] = Field(
        default=DEFAULT_SERVICE, description="SoftLayer service name"
    )
    function: Optional[str] = Field(
        default=DEFAULT_FUNCTION, description="Function to call on the service"
    )
    username: Optional[str] = Field(default=None, description="API username")
    password: Optional[str] = Field(default=None, description="API key or hash")

    @field_validator("endpoint")
    @classmethod
    def endpoint_must_end_with_slash(cls, v: str) -> str:
        return _normalize_endpoint(v)

    @field_validator("username", "password", mode="before")
    @classmethod
    def coerce_credential(cls, v: Any) -> Optional[str]:
        """Session logins return numeric user ids; store them as text."""
        if v is None:
            return None
        return str(v)


class RequestOptions(BaseModel):
    """Query options applied to a single request."""

    model_config = ConfigDict(validate_assignment=True)

    offset: int = Field(default=DEFAULT_OFFSET, ge=0, description="Result offset")
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, description="Results per page")
    filter: Any = Field(
        default_factory=dict,
        description="JSON-serializable objectFilter sent with the request",
    )
    method: str = Field(default=DEFAULT_METHOD, description="HTTP method")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Extra request headers"
    )
    body: Dict[str, Any] = Field(
        default_factory=dict, description="Form fields sent with POST requests"
    )

    @field_validator("method")
    @classmethod
    def method_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("HTTP method cannot be empty")
        return v.strip()


class ClientSettings(BaseSettings):
    """Client-wide settings shared by every request a builder issues.

    Read from ``SLAPI_*`` environment variables:
    - SLAPI_ENDPOINT, SLAPI_USERNAME, SLAPI_PASSWORD
    - SLAPI_TIMEOUT: request timeout in seconds
    - SLAPI_PAGE_DELAY: pause between page requests in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
    )

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT, description="Base URL of the REST API"
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    page_delay: float = Field(
        default=DEFAULT_PAGE_DELAY,
        ge=0,
        description="Pause between sequential page requests in seconds",
    )
    username: Optional[str] = Field(default=None, description="API username")
    password: Optional[str] = Field(default=None, description="API key")

    @field_validator("endpoint")
    @classmethod
    def endpoint_must_end_with_slash(cls, v: str) -> str:
        return _normalize_endpoint(v)

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Load settings from the environment.

        Raises:
            ValueError: If a ``SLAPI_*`` variable holds an invalid value
        """
        try:
            settings = cls()
        except ValidationError as e:
            names = ", ".join(
                f"{ENV_PREFIX}{str(err['loc'][0]).upper()}" for err in e.errors()
            )
            raise ValueError(f"Invalid environment configuration ({names}): {e}") from e

        logger.debug(f"Loaded client settings for endpoint {settings.endpoint}")
        return settings
