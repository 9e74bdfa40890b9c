"""SoftLayer REST request builder.

Collects service, function, object mask, object filter, pagination and
credentials through chainable calls, then executes the request:

    request = SLAPIRequest(username="user", password="apikey")
    request.service("SoftLayer_Account").function("getHardware").limit(50)
    request.mask.push(["id", "hostname"])
    hardware = await request.get_num_of_pages(3)
"""

import asyncio
import json
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import httpx

from ..config import (
    DEFAULT_ENDPOINT,
    DEFAULT_FUNCTION,
    DEFAULT_LIMIT,
    DEFAULT_METHOD,
    DEFAULT_OFFSET,
    DEFAULT_SERVICE,
    ClientSettings,
    RequestConfig,
    RequestOptions,
)
from ..object_mask import EMPTY_MASK, ObjectMask
from .base_client import (
    APIClientError,
    AuthenticationUnavailableError,
    MissingConfigurationError,
    MissingCredentialsError,
    RemoteAPIError,
    SLAPIBaseClient,
)

logger = logging.getLogger(__name__)

TOTAL_ITEMS_HEADER = "SoftLayer-Total-Items"
EMPLOYEE_LOGIN_SERVICE = "SoftLayer_User_Employee"
EMPLOYEE_LOGIN_FUNCTION = "getEncryptedSessionToken"


@dataclass
class RequestResults:
    """Response and timing of the most recent exec() call."""

    response: Optional[httpx.Response] = None
    start: Optional[float] = None
    end: Optional[float] = None


class SLAPIRequest(SLAPIBaseClient):
    """Chainable request builder for the SoftLayer REST API.

    Each instance issues one request at a time; results and timings of the
    last request are kept on the instance.
    """

    def __init__(
        self,
        service: str = DEFAULT_SERVICE,
        function: str = DEFAULT_FUNCTION,
        mask: Optional[ObjectMask] = None,
        filter: Any = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        endpoint: Optional[str] = None,
        settings: Optional[ClientSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the request builder.

        Args:
            service: Service to use
            function: Function to call on the service
            mask: objectMask to send to the API
            filter: objectFilter to filter results
            username: API username, defaults to the settings' username
            password: API key, defaults to the settings' password
            endpoint: Base URL, defaults to the settings' endpoint
            settings: Client settings, loaded from the environment when omitted
            client: Existing HTTP client to send requests with
            transport: Transport for the HTTP client created on first use
        """
        super().__init__(settings=settings, client=client, transport=transport)

        self.config = RequestConfig(
            endpoint=endpoint or self.settings.endpoint,
            service=service,
            function=function,
            username=username if username is not None else self.settings.username,
            password=password if password is not None else self.settings.password,
        )
        self.options = RequestOptions(filter=filter if filter is not None else {})
        self.mask = mask if mask is not None else ObjectMask()
        self.results = RequestResults()
        self.pages_result: List[Any] = []

    @property
    def url(self) -> str:
        """Bare request URL without the query string.

        Raises:
            MissingConfigurationError: If service or function is unset
        """
        self._check_target()
        return f"{self.config.endpoint}{self.config.service}/{self.config.function}"

    @property
    def url_query(self) -> str:
        """Request URL with objectMask, objectFilter and resultLimit."""
        self._check_target()

        mask = self.mask.mask_string
        object_filter = json.dumps(self.options.filter, separators=(",", ":"))

        params = []
        if mask != EMPTY_MASK:
            params.append(("objectMask", mask))
        if object_filter != "{}":
            params.append(("objectFilter", object_filter))
        params.append(("resultLimit", f"{self.options.offset},{self.options.limit}"))

        return f"{self.url}?{httpx.QueryParams(params)}"

    @property
    def total_items(self) -> Union[int, float]:
        """Total number of items reported by the last request.

        Returns ``nan`` if no request has been executed yet.
        """
        if self.results.response is None:
            return math.nan

        value = self.results.response.headers.get(TOTAL_ITEMS_HEADER)
        if not value:
            return 0
        try:
            return int(value)
        except ValueError:
            logger.warning(
                f"Ignoring non-numeric {TOTAL_ITEMS_HEADER} header: {value!r}"
            )
            return 0

    @property
    def duration(self) -> str:
        """How long the last request took, e.g. ``"182ms"``."""
        if self.results.start is None or self.results.end is None:
            return "0ms"
        return f"{round((self.results.end - self.results.start) * 1000)}ms"

    @property
    def username(self) -> Optional[str]:
        return self.config.username

    @username.setter
    def username(self, username: Optional[str]) -> None:
        self.config.username = username

    @property
    def password(self) -> Optional[str]:
        return self.config.password

    @password.setter
    def password(self, password: Optional[str]) -> None:
        self.config.password = password

    def endpoint(self, endpoint: str = DEFAULT_ENDPOINT) -> "SLAPIRequest":
        """Chainable function to change or reset the endpoint."""
        self.config.endpoint = endpoint
        return self

    def function(self, func: str = DEFAULT_FUNCTION) -> "SLAPIRequest":
        """Chainable function to change or reset the function."""
        self.config.function = func
        return self

    def service(self, service: str = DEFAULT_SERVICE) -> "SLAPIRequest":
        """Chainable function to change or reset the service."""
        self.config.service = service
        return self

    def filter(self, object_filter: Any = None) -> "SLAPIRequest":
        """Chainable function to change or reset the filter."""
        self.options.filter = object_filter if object_filter is not None else {}
        return self

    def search(self, object_filter: Any = None) -> "SLAPIRequest":
        """Convenience alias for filter()."""
        return self.filter(object_filter)

    def limit(self, limit: int = DEFAULT_LIMIT) -> "SLAPIRequest":
        self.options.limit = limit
        return self

    def offset(self, offset: int = DEFAULT_OFFSET) -> "SLAPIRequest":
        self.options.offset = offset
        return self

    def page(self, page: int = 1) -> "SLAPIRequest":
        """Chainable function to move the offset to a 1-based page."""
        self.options.offset = (page - 1) * self.options.limit
        return self

    def method(self, method: str = DEFAULT_METHOD) -> "SLAPIRequest":
        self.options.method = method
        return self

    def body(self, body: Optional[Dict[str, Any]] = None) -> "SLAPIRequest":
        """Chainable function to change or reset the POST form fields."""
        self.options.body = body if body is not None else {}
        return self

    def _check_target(self) -> None:
        if not self.config.service:
            raise MissingConfigurationError("Invalid service")
        if not self.config.function:
            raise MissingConfigurationError("Invalid function")

    async def exec(self) -> Any:
        """Execute the configured request and return the parsed JSON body.

        POST requests go to the bare URL with the form body; every other
        method goes to the URL with the query string and no body.

        Returns:
            Decoded JSON response

        Raises:
            AuthenticationUnavailableError: If username or password is unset
            MissingConfigurationError: If service or function is unset
            NetworkError: If the transport fails
            APIClientError: If the response is not JSON
        """
        if not self.config.username or not self.config.password:
            raise AuthenticationUnavailableError("Invalid API token")

        method = self.options.method or DEFAULT_METHOD
        if method.lower() == "post":
            url = self.url
            data: Optional[Dict[str, Any]] = dict(self.options.body)
        else:
            url = self.url_query
            data = None

        headers = dict(self.options.headers)
        headers.update(
            self._basic_auth_header(self.config.username, self.config.password)
        )

        self.results.start = time.time()
        self.results.response = await self._send(
            method, url, headers=headers, data=data
        )
        self.results.end = time.time()

        return self._parse_json(self.results.response)

    async def get_num_of_pages(
        self,
        pages: int = 1,
        delay: Optional[float] = None,
        progress_callback: Optional[Callable[[str, int, int], None]] = None,
    ) -> List[Any]:
        """Retrieve several pages of results, one request after another.

        Args:
            pages: Number of pages to get, starting from page 1
            delay: Pause after each page in seconds, defaults to the
                settings' page_delay
            progress_callback: Called with (message, page, pages) after each page

        Returns:
            Results of all pages concatenated into one list
        """
        delay = self.settings.page_delay if delay is None else delay
        results: List[Any] = []

        for i in range(1, pages + 1):
            self.page(i)
            res = await self.exec()
            if isinstance(res, list):
                results.extend(res)
            else:
                results.append(res)

            message = f"Retrieved page {i} of {pages} in {self.duration}"
            logger.info(message)
            if progress_callback:
                progress_callback(message, i, pages)

            await asyncio.sleep(delay)

        self.pages_result = results
        return results

    async def employee_login(
        self, username: str, password: str, token: str
    ) -> "SLAPIRequest":
        """Exchange employee credentials for a temporary API session.

        On success the returned user id and hash become this request's
        username and password.

        Args:
            username: Employee username
            password: Employee password
            token: VIP access token

        Returns:
            This request, authenticated with the session credentials

        Raises:
            MissingCredentialsError: If any argument is missing
            RemoteAPIError: If the API rejects the login
        """
        if not username or not password or not token:
            raise MissingCredentialsError("Missing login credentials")

        api_call = SLAPIRequest(
            service=EMPLOYEE_LOGIN_SERVICE,
            function=EMPLOYEE_LOGIN_FUNCTION,
            username=username,
            password=password,
            endpoint=self.config.endpoint,
            settings=self.settings,
            client=self.session,
        )
        api_call.method("post").body({"remoteToken": token})

        res = await api_call.exec()
        status_code = api_call.results.response.status_code

        if isinstance(res, dict) and res.get("error"):
            raise RemoteAPIError(str(res["error"]), status_code)
        if not isinstance(res, dict) or "userId" not in res or "hash" not in res:
            raise APIClientError(
                "Login response did not include userId and hash", status_code
            )

        self.username = res["userId"]
        self.password = res["hash"]
        logger.info(f"Employee login succeeded for {username}")

        return self
