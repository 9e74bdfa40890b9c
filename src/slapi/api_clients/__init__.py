"""API Client Abstractions for SoftLayer REST Operations.

All HTTP functionality is contained within dedicated API client classes.
"""

from .base_client import (
    SLAPIBaseClient,
    APIClientError,
    MissingConfigurationError,
    AuthenticationError,
    AuthenticationUnavailableError,
    MissingCredentialsError,
    NetworkError,
    RemoteAPIError,
)
from .request_client import SLAPIRequest, RequestResults

__all__ = [
    # Base client
    "SLAPIBaseClient",
    "APIClientError",
    "MissingConfigurationError",
    "AuthenticationError",
    "AuthenticationUnavailableError",
    "MissingCredentialsError",
    "NetworkError",
    "RemoteAPIError",
    # Request builder
    "SLAPIRequest",
    "RequestResults",
]
