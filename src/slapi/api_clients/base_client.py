"""Base SoftLayer REST API Client.

Provides the HTTP session, Basic Authentication headers and the single
request primitive shared by all SoftLayer API operations.
"""

import base64
import logging
from typing import Any, Dict, Optional

import httpx

from ..config import ClientSettings

logger = logging.getLogger(__name__)


class APIClientError(Exception):
    """Base exception for API client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MissingConfigurationError(APIClientError):
    """Exception raised when a request URL can't be built from the configuration."""

    pass


class AuthenticationError(APIClientError):
    """Exception raised when authentication fails."""

    pass


class AuthenticationUnavailableError(AuthenticationError):
    """Exception raised when a request is executed without username and password."""

    pass


class MissingCredentialsError(AuthenticationError):
    """Exception raised when a login is attempted without all credentials."""

    pass


class NetworkError(APIClientError):
    """Exception raised when network operations fail."""

    pass


class RemoteAPIError(APIClientError):
    """Exception raised when the API answers with an explicit error document."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, status_code)
        self.remote_error = message


class SLAPIBaseClient:
    """Base API client with session management and common HTTP functionality."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize base API client.

        Args:
            settings: Client settings, loaded from the environment when omitted
            client: Existing HTTP client to send requests with; it is not
                closed by this client
            transport: Transport for the HTTP client created on first use
        """
        self.settings = settings if settings is not None else ClientSettings.from_env()
        self._session: Optional[httpx.AsyncClient] = client
        self._owns_session = client is None
        self._transport = transport

    @property
    def session(self) -> httpx.AsyncClient:
        """Get or create the HTTP session."""
        if self._session is None or self._session.is_closed:
            self._session = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
            self._owns_session = True
        return self._session

    @staticmethod
    def _basic_auth_header(username: str, password: str) -> Dict[str, str]:
        """Build the Authorization header for HTTP Basic Authentication."""
        token = base64.b64encode(f"{username}:{password}".encode("utf-8"))
        return {"Authorization": f"Basic {token.decode('ascii')}"}

    async def _send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send one HTTP request.

        Error statuses are returned, not raised: the API describes failures
        in the JSON body.

        Raises:
            NetworkError: If the transport fails
        """
        logger.debug(f"{method.upper()} {url}")
        try:
            response = await self.session.request(
                method.upper(), url, headers=headers, data=data
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                f"{method.upper()} {url} returned HTTP {response.status_code}"
            )

        return response

    @staticmethod
    def _parse_json(response: httpx.Response) -> Any:
        """Parse a response body as JSON.

        Raises:
            APIClientError: If the body is not valid JSON
        """
        try:
            return response.json()
        except ValueError as e:
            raise APIClientError(
                f"Invalid JSON in response (HTTP {response.status_code}): {e}",
                response.status_code,
            ) from e

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.is_closed:
            await self._session.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def __del__(self):
        """Cleanup when object is destroyed."""
        session = getattr(self, "_session", None)
        if getattr(self, "_owns_session", False) and session and not session.is_closed:
            # Cannot use await in __del__, so we'll just log a warning
            logger.warning(f"{type(self).__name__} was not properly closed")
