"""CSRF token retrieval for farmOS RESTWS sessions."""

import logging
from typing import Callable, Optional

import httpx

from .network_error_handler import NetworkErrorHandler

logger = logging.getLogger(__name__)

CSRF_TOKEN_PATH = "/restws/session/token"


class CSRFTokenFetcher:
    """Fetches the session CSRF token once and caches it for the client's lifetime."""

    def __init__(
        self,
        host: str,
        session_provider: Callable[[], httpx.AsyncClient],
        network_error_handler: Optional[NetworkErrorHandler] = None,
    ):
        self.host = host
        self._session_provider = session_provider
        self._network_error_handler = network_error_handler or NetworkErrorHandler()
        self._csrf_token: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        return self._csrf_token

    async def get_csrf_token(self, access_token: str) -> str:
        """Return the cached CSRF token, fetching it with ``access_token`` if needed.

        Raises:
            NetworkError: If the session token endpoint fails
        """
        if self._csrf_token is not None:
            return self._csrf_token

        logger.debug("Fetching CSRF token")
        try:
            response = await self._session_provider().get(
                f"{self.host}{CSRF_TOKEN_PATH}",
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            self._network_error_handler.classify_network_error(e)

        self._network_error_handler.raise_for_status(response)
        self._csrf_token = response.text.strip()
        return self._csrf_token

    def clear(self) -> None:
        self._csrf_token = None
