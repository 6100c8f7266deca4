"""Base farmOS API Client.

Provides the authenticated request pipeline shared by every resource:
access token, then CSRF token, then the HTTP call. Also walks paginated list
responses and splits large id lists into batched requests.
"""

import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
from urllib.parse import parse_qs, urlparse

import httpx

from ..config import DEFAULT_BATCH_SIZE, DEFAULT_MAX_PAGES, FarmOSConfig
from .csrf_token import CSRFTokenFetcher
from .exceptions import (
    APIClientError,
    AuthenticationError,
    AuthorizationServerError,
    NetworkError,
    PaginationError,
)
from .network_error_handler import NetworkErrorHandler
from .query_builder import append_array_of_params, append_param
from .token_manager import OAuth2TokenManager

logger = logging.getLogger(__name__)

__all__ = [
    "APIClientError",
    "AuthenticationError",
    "AuthorizationServerError",
    "FarmOSAPIClient",
    "NetworkError",
    "PaginationError",
    "last_page_number",
    "list_items",
]

BODY_METHODS = ("POST", "PUT", "PATCH")


def last_page_number(response: Dict[str, Any]) -> Optional[int]:
    """Read the zero-based final page index from a list response's ``last`` URL.

    Returns None when the response carries no usable ``last`` link.
    """
    last = response.get("last") if isinstance(response, dict) else None
    if not last:
        return None
    values = parse_qs(urlparse(str(last)).query).get("page")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


def list_items(response: Any, endpoint: str) -> List[Any]:
    """Return the ``list`` entries of a list response.

    An empty body yields no entries.

    Raises:
        APIClientError: If the body is not a list response object
    """
    if response is None:
        return []
    if not isinstance(response, dict):
        raise APIClientError(
            f"Expected a list response object from {endpoint}, "
            f"got {type(response).__name__}"
        )
    return response.get("list") or []


class FarmOSAPIClient:
    """Base API client with OAuth2/CSRF authentication and list helpers."""

    def __init__(
        self,
        config: FarmOSConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize base API client.

        Args:
            config: Server and credential settings
            transport: Optional httpx transport, e.g. an ASGI app in tests
        """
        self.config = config
        self.host = config.host
        self._transport = transport
        self._session: Optional[httpx.AsyncClient] = None
        self._network_error_handler = NetworkErrorHandler()
        self.token_manager = OAuth2TokenManager(
            host=self.host,
            session_provider=lambda: self.session,
            client_id=config.client_id,
            client_secret=config.client_secret,
            network_error_handler=self._network_error_handler,
        )
        self.csrf = CSRFTokenFetcher(
            host=self.host,
            session_provider=lambda: self.session,
            network_error_handler=self._network_error_handler,
        )

    @property
    def session(self) -> httpx.AsyncClient:
        """Get or create the HTTP session."""
        if self._session is None or self._session.is_closed:
            self._session = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
                verify=self.config.verify_ssl,
                transport=self._transport,
            )
        return self._session

    @property
    def batch_size(self) -> int:
        return self.config.batch_size or DEFAULT_BATCH_SIZE

    @property
    def max_pages(self) -> int:
        return self.config.max_pages or DEFAULT_MAX_PAGES

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        payload: Any = None,
    ) -> Any:
        """Make an authenticated request and return the parsed JSON body.

        Args:
            endpoint: Path and query relative to the host, e.g. ``/log.json?type[0]=farm_seeding``
            method: HTTP method
            payload: Body for POST and PUT requests, serialized as JSON

        Returns:
            Parsed JSON response, or None for an empty body

        Raises:
            AuthenticationError: If the client was never authorized
            AuthorizationServerError: If the token refresh fails
            NetworkError: If the transport fails or the server answers non-2xx
        """
        method = method.upper()
        access_token = await self.token_manager.get_access_token()
        csrf_token = await self.csrf.get_csrf_token(access_token)

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {access_token}",
            "X-CSRF-Token": csrf_token,
        }
        content: Optional[bytes] = None
        if method in BODY_METHODS:
            content = json.dumps(payload if payload is not None else "").encode(
                "utf-8"
            )

        url = f"{self.host}{endpoint}"
        logger.debug(f"{method} {url}")
        try:
            response = await self.session.request(
                method, url, headers=headers, content=content
            )
        except httpx.HTTPError as e:
            self._network_error_handler.classify_network_error(e)

        self._network_error_handler.raise_for_status(response)
        return self._parse_body(response)

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIClientError(
                f"Invalid JSON response from {response.request.url}: {e}",
                response.status_code,
            ) from e

    async def iter_pages(
        self, endpoint: str, start_page: int = 0
    ) -> AsyncIterator[Dict[str, Any]]:
        """Yield each page of a paginated list endpoint, one request per page.

        The walk ends on the page the server reports as ``last``. A response
        without a ``last`` link is treated as the final page.

        Raises:
            PaginationError: If more than ``max_pages`` pages would be fetched
        """
        page = start_page
        fetched = 0
        while True:
            if fetched >= self.max_pages:
                raise PaginationError(
                    f"Pagination of {endpoint} exceeded {self.max_pages} pages"
                )
            response = await self.request(append_param(endpoint, "page", page))
            fetched += 1
            yield response

            last_page = last_page_number(response)
            logger.debug(f"Fetched page {page} of {last_page} for {endpoint}")
            if last_page is None or page >= last_page:
                return
            page += 1

    async def request_all(self, endpoint: str) -> Dict[str, List[Any]]:
        """Fetch every page of ``endpoint`` and concatenate the ``list`` values."""
        items: List[Any] = []
        async for response in self.iter_pages(endpoint):
            items.extend(list_items(response, endpoint))
        return {"list": items}

    async def batch_request(
        self, name: str, items: Sequence[Any], endpoint: str
    ) -> Dict[str, List[Any]]:
        """Request ``items`` as ``name[i]`` params in sequential chunks.

        Each chunk holds at most ``batch_size`` values so the URL stays short.
        """
        results: List[Any] = []
        size = self.batch_size
        for start in range(0, len(items), size):
            chunk = items[start : start + size]
            logger.debug(
                f"Batch request for {len(chunk)} {name} values "
                f"({start + len(chunk)}/{len(items)})"
            )
            response = await self.request(append_array_of_params(endpoint, name, chunk))
            results.extend(list_items(response, endpoint))
        return {"list": results}

    async def close(self) -> None:
        """Close HTTP session and forget both tokens."""
        if self._session and not self._session.is_closed:
            await self._session.aclose()
        self.token_manager.clear()
        self.csrf.clear()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
