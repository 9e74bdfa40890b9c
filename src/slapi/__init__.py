"""
SLAPI - chainable request builder for the SoftLayer REST API.

Builds object masks, object filters and result limits into request URLs,
executes authenticated requests over httpx and pages through results.
"""

from .api_clients import (
    SLAPIRequest,
    APIClientError,
    MissingConfigurationError,
    AuthenticationError,
    AuthenticationUnavailableError,
    MissingCredentialsError,
    NetworkError,
    RemoteAPIError,
)
from .config import ClientSettings, RequestConfig, RequestOptions
from .object_mask import (
    ObjectMask,
    ObjectMaskError,
    MaskSyntaxError,
    MaskPathNotFoundError,
    InvalidMaskPropertyError,
)

__version__ = "1.0.0"

__all__ = [
    "SLAPIRequest",
    "ObjectMask",
    "ClientSettings",
    "RequestConfig",
    "RequestOptions",
    "APIClientError",
    "MissingConfigurationError",
    "AuthenticationError",
    "AuthenticationUnavailableError",
    "MissingCredentialsError",
    "NetworkError",
    "RemoteAPIError",
    "ObjectMaskError",
    "MaskSyntaxError",
    "MaskPathNotFoundError",
    "InvalidMaskPropertyError",
]
