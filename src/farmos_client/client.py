"""High-level farmOS client tying the resource facades to one session."""

import logging
from typing import Any, Dict, Optional

import httpx

from .api_clients.base_client import FarmOSAPIClient
from .config import FarmOSConfig
from .resources import AreaClient, AssetClient, LogClient, TermClient, VocabularyClient

logger = logging.getLogger(__name__)


class FarmOSClient(FarmOSAPIClient):
    """farmOS client exposing ``area``, ``asset``, ``log``, ``term`` and ``vocabulary``.

    Usage::

        async with farmOS("https://farm.example.com") as farm:
            await farm.authorize("user", "password")
            logs = await farm.log.list(LogFilter(type=["farm_seeding"]))
    """

    def __init__(
        self,
        config: FarmOSConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config, transport=transport)
        self.area = AreaClient(self)
        self.asset = AssetClient(self)
        self.log = LogClient(self)
        self.term = TermClient(self)
        self.vocabulary = VocabularyClient(self)

    @classmethod
    def from_config(
        cls,
        config: FarmOSConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FarmOSClient":
        return cls(config, transport=transport)

    @property
    def token(self) -> Optional[Dict[str, Any]]:
        """The raw token dict currently held, or None."""
        token = self.token_manager.token
        return token.raw if token else None

    @property
    def csrf_token(self) -> Optional[str]:
        return self.csrf.token

    async def authorize(
        self, username: str, password: str, scope: Optional[str] = None
    ) -> Dict[str, Any]:
        """Authorize with the password grant and return the token dict."""
        return await self.token_manager.authorize(
            username, password, scope or self.config.scope
        )

    def use_token(self, token: Dict[str, Any]) -> Dict[str, Any]:
        """Adopt a previously issued token, e.g. one saved from :attr:`token`."""
        return self.token_manager.use_token(token)

    def authorization_url(self, redirect_uri: str, state: Optional[str] = None) -> str:
        return self.token_manager.authorization_url(
            redirect_uri, scope=self.config.scope, state=state
        )

    async def logout(self) -> None:
        """Revoke the tokens at the server and forget them locally."""
        await self.token_manager.revoke()
        self.csrf.clear()

    async def info(self) -> Dict[str, Any]:
        """Return ``{name, url, user: {uid, name, mail}}`` for the farm."""
        return await self.request("/farm.json")


def farmOS(
    host: str,
    client_id: str = "farmos_development",
    client_secret: str = "",
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **options: Any,
) -> FarmOSClient:
    """Create a client for the farmOS server at ``host``.

    Extra keyword options are passed to :class:`FarmOSConfig`.
    """
    config = FarmOSConfig(
        host=host, client_id=client_id, client_secret=client_secret, **options
    )
    return FarmOSClient(config, transport=transport)
