"""OAuth2 Token Manager for farmOS authentication.

Holds the single access token of a client instance, acquires it with the
resource-owner-password grant and refreshes it transparently once expired.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

import httpx

from .exceptions import AuthenticationError, AuthorizationServerError
from .network_error_handler import NetworkErrorHandler

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth2/token"
REVOKE_PATH = "/oauth2/revoke"
AUTHORIZE_PATH = "/oauth2/authorize"


def _parse_expires_at(value: Any) -> Optional[datetime]:
    """Parse an ``expires_at`` value given as epoch seconds, ISO string or datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (TypeError, ValueError):
        pass
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise AuthenticationError(f"Invalid token expiration value: {value}")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


@dataclass
class AccessToken:
    """OAuth2 bearer credential with its expiry."""

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expires_at: Optional[datetime] = None
    scope: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessToken":
        """Create from a token endpoint response or a previously stored token."""
        access_token = data.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise AuthorizationServerError("No valid access token in response")

        expires_at = _parse_expires_at(data.get("expires_at"))
        if expires_at is None and data.get("expires_in") is not None:
            try:
                expires_in = float(data["expires_in"])
            except (TypeError, ValueError):
                raise AuthorizationServerError(
                    f"Invalid expires_in value: {data['expires_in']}"
                )
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

        raw = dict(data)
        if expires_at is not None:
            raw["expires_at"] = expires_at.isoformat()

        return cls(
            access_token=access_token,
            refresh_token=data.get("refresh_token"),
            token_type=data.get("token_type") or "Bearer",
            expires_at=expires_at,
            scope=data.get("scope"),
            raw=raw,
        )

    def expired(self, threshold_seconds: float = 0) -> bool:
        """Check whether the token expires within ``threshold_seconds``.

        Tokens without an expiry never expire.
        """
        if self.expires_at is None:
            return False
        threshold_time = datetime.now(timezone.utc) + timedelta(
            seconds=threshold_seconds
        )
        return threshold_time >= self.expires_at


class OAuth2TokenManager:
    """Manages the OAuth2 access token of one farmOS client instance."""

    def __init__(
        self,
        host: str,
        session_provider: Callable[[], httpx.AsyncClient],
        client_id: str,
        client_secret: str = "",
        network_error_handler: Optional[NetworkErrorHandler] = None,
    ):
        """Initialize the token manager.

        Args:
            host: farmOS base URL, without trailing slash
            session_provider: Returns the HTTP session to send token requests on
            client_id: OAuth2 client id
            client_secret: OAuth2 client secret; must be a string, never None
        """
        self.host = host
        self.client_id = client_id
        self.client_secret = client_secret if client_secret is not None else ""
        self._session_provider = session_provider
        self._network_error_handler = network_error_handler or NetworkErrorHandler()
        self._token: Optional[AccessToken] = None
        self._refresh_lock = asyncio.Lock()

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    @property
    def _client_auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(self.client_id, self.client_secret)

    def use_token(self, token: Dict[str, Any]) -> Dict[str, Any]:
        """Adopt an existing token dict and return the stored raw token."""
        self._token = AccessToken.from_dict(token)
        return self._token.raw

    def authorization_url(
        self,
        redirect_uri: str,
        scope: str = "user_access",
        state: Optional[str] = None,
    ) -> str:
        """Build the authorization-code URL for browser based flows."""
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": scope,
        }
        if state is not None:
            params["state"] = state
        return f"{self.host}{AUTHORIZE_PATH}?{urlencode(params)}"

    async def authorize(
        self, username: str, password: str, scope: str = "user_access"
    ) -> Dict[str, Any]:
        """Exchange user credentials for an access token.

        Returns:
            The raw token dict as stored by the manager

        Raises:
            AuthorizationServerError: If the token endpoint rejects the grant
            NetworkError: If the token endpoint cannot be reached
        """
        logger.debug(f"Requesting password grant token for {username}")
        data = await self._token_request(
            {
                "grant_type": "password",
                "username": username,
                "password": password,
                "scope": scope,
            }
        )
        return self.use_token(data)

    async def get_access_token(self) -> str:
        """Return a valid bearer token, refreshing it if it has expired.

        Raises:
            AuthenticationError: If the client was never authorized
            AuthorizationServerError: If the refresh is rejected
        """
        if self._token is None:
            raise AuthenticationError(
                "client must be authorized before making requests."
            )
        if not self._token.expired():
            return self._token.access_token

        async with self._refresh_lock:
            # Another coroutine may have refreshed while we waited
            if self._token is None:
                raise AuthenticationError(
                    "client must be authorized before making requests."
                )
            if self._token.expired():
                await self._refresh()
            return self._token.access_token

    async def _refresh(self) -> None:
        if self._token is None:
            raise AuthenticationError(
                "client must be authorized before making requests."
            )
        if not self._token.refresh_token:
            raise AuthorizationServerError(
                "Access token expired and no refresh token is available"
            )
        logger.debug("Access token expired, refreshing")
        data = await self._token_request(
            {
                "grant_type": "refresh_token",
                "refresh_token": self._token.refresh_token,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            }
        )
        # Servers may omit the refresh token when it is unchanged
        if not data.get("refresh_token"):
            data = {**data, "refresh_token": self._token.refresh_token}
        self.use_token(data)
        logger.debug("Access token refreshed")

    async def revoke(self) -> None:
        """Revoke the access and refresh tokens and forget the token.

        Does nothing if no token is held.
        """
        if self._token is None:
            return
        token = self._token
        await self._revoke_request(token.access_token, "access_token")
        if token.refresh_token:
            await self._revoke_request(token.refresh_token, "refresh_token")
        self._token = None
        logger.debug("Tokens revoked")

    def clear(self) -> None:
        self._token = None

    async def _token_request(self, form: Dict[str, str]) -> Dict[str, Any]:
        response = await self._post(TOKEN_PATH, form)
        if not response.is_success:
            raise self._authorization_error("Token request failed", response)
        try:
            data = response.json()
        except ValueError as e:
            raise AuthorizationServerError(
                f"Invalid JSON from token endpoint: {e}", response.status_code
            ) from e
        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthorizationServerError(
                "No valid access token in response", response.status_code
            )
        return data

    async def _revoke_request(self, token: str, token_type_hint: str) -> None:
        response = await self._post(
            REVOKE_PATH, {"token": token, "token_type_hint": token_type_hint}
        )
        if not response.is_success:
            raise self._authorization_error("Token revocation failed", response)

    async def _post(self, path: str, form: Dict[str, str]) -> httpx.Response:
        try:
            return await self._session_provider().post(
                f"{self.host}{path}",
                data=form,
                auth=self._client_auth,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            self._network_error_handler.classify_network_error(e)

    @staticmethod
    def _authorization_error(
        prefix: str, response: httpx.Response
    ) -> AuthorizationServerError:
        error_code: Optional[str] = None
        detail = f"HTTP {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error_code = body.get("error")
            detail = body.get("error_description") or error_code or detail
        return AuthorizationServerError(
            f"{prefix}: {detail}",
            status_code=response.status_code,
            error_code=error_code,
        )
