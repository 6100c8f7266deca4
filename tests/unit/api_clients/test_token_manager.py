"""Tests for OAuth2 token acquisition, reuse, refresh and revocation."""

import asyncio
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs

import pytest

from farmos_client import AuthenticationError, AuthorizationServerError
from farmos_client.api_clients.token_manager import AccessToken


class TestAccessToken:
    def test_expires_in_sets_expiry(self):
        token = AccessToken.from_dict({"access_token": "abc", "expires_in": 3600})
        assert token.expires_at is not None
        assert not token.expired()
        assert token.expired(threshold_seconds=7200)

    def test_expires_at_epoch_and_iso(self):
        past = datetime.now(timezone.utc) - timedelta(minutes=5)
        assert AccessToken.from_dict(
            {"access_token": "abc", "expires_at": past.timestamp()}
        ).expired()
        assert AccessToken.from_dict(
            {"access_token": "abc", "expires_at": past.isoformat()}
        ).expired()

    def test_token_without_expiry_never_expires(self):
        assert not AccessToken.from_dict({"access_token": "abc"}).expired()

    def test_missing_access_token_rejected(self):
        with pytest.raises(AuthorizationServerError):
            AccessToken.from_dict({"refresh_token": "r"})


class TestAuthorize:
    async def test_authorize_returns_token(self, farm, farm_server):
        token = await farm.authorize("farmer", "farmpass")

        assert token["access_token"] in farm_server.tokens
        assert token["refresh_token"]
        assert farm.token == token

    async def test_password_grant_form(self, farm, farm_server):
        await farm.authorize("farmer", "farmpass", scope="farm_manager")

        request = farm_server.requests_to("/oauth2/token")[0]
        form = {k: v[0] for k, v in parse_qs(request.body.decode(), keep_blank_values=True).items()}
        assert form == {
            "grant_type": "password",
            "username": "farmer",
            "password": "farmpass",
            "scope": "farm_manager",
        }
        assert request.headers["authorization"].startswith("Basic ")

    async def test_invalid_credentials(self, farm):
        with pytest.raises(AuthorizationServerError) as exc_info:
            await farm.authorize("farmer", "wrong")

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "invalid_grant"
        assert farm.token is None

    async def test_request_before_authorize_fails(self, farm, farm_server):
        with pytest.raises(AuthenticationError, match="must be authorized"):
            await farm.info()
        assert farm_server.requests == []


class TestGetAccessToken:
    async def test_same_token_reused_without_network(self, authorized_farm, farm_server):
        first = await authorized_farm.token_manager.get_access_token()
        count = len(farm_server.requests)
        second = await authorized_farm.token_manager.get_access_token()

        assert first == second
        assert len(farm_server.requests) == count

    async def test_expired_token_is_refreshed(self, farm, farm_server):
        farm_server.token_lifetime = 0
        old = await farm.authorize("farmer", "farmpass")
        farm_server.token_lifetime = 3600

        info = await farm.info()

        assert info["user"]["name"] == "farmer"
        refresh = farm_server.requests_to("/oauth2/token")[1]
        form = {k: v[0] for k, v in parse_qs(refresh.body.decode(), keep_blank_values=True).items()}
        assert form["grant_type"] == "refresh_token"
        assert form["refresh_token"] == old["refresh_token"]
        assert form["client_id"] == "farmos_development"
        assert form["client_secret"] == ""
        assert farm.token["access_token"] != old["access_token"]
        assert not farm.token_manager.token.expired()

    async def test_concurrent_requests_refresh_once(self, farm, farm_server):
        farm_server.token_lifetime = 0
        await farm.authorize("farmer", "farmpass")
        farm_server.token_lifetime = 3600

        results = await asyncio.gather(*(farm.info() for _ in range(5)))

        assert all(info["name"] == "Test Farm" for info in results)
        grants = [
            parse_qs(r.body.decode())["grant_type"][0]
            for r in farm_server.requests_to("/oauth2/token")
        ]
        assert grants == ["password", "refresh_token"]

    async def test_refresh_without_token_fails(self, farm):
        with pytest.raises(AuthenticationError, match="must be authorized"):
            await farm.token_manager._refresh()

    async def test_refresh_failure_propagates(self, farm, farm_server):
        farm_server.token_lifetime = 0
        token = await farm.authorize("farmer", "farmpass")
        farm_server.refresh_tokens.pop(token["refresh_token"])

        with pytest.raises(AuthorizationServerError, match="Invalid refresh token"):
            await farm.info()

    async def test_use_token_adopts_existing_token(self, farm, farm_server):
        issued = await farm.authorize("farmer", "farmpass")
        farm.token_manager.clear()

        stored = farm.use_token(issued)

        assert stored["access_token"] == issued["access_token"]
        assert "expires_at" in stored
        assert (await farm.info())["name"] == "Test Farm"


class TestLogout:
    async def test_logout_revokes_and_clears(self, authorized_farm, farm_server):
        await authorized_farm.info()
        access_token = authorized_farm.token["access_token"]

        await authorized_farm.logout()

        assert authorized_farm.token is None
        assert authorized_farm.csrf_token is None
        assert farm_server.tokens[access_token].revoked
        assert len(farm_server.requests_to("/oauth2/revoke")) == 2
        with pytest.raises(AuthenticationError):
            await authorized_farm.info()

    async def test_failed_revocation_keeps_tokens(self, authorized_farm, farm_server):
        await authorized_farm.info()
        access_token = authorized_farm.token["access_token"]
        farm_server.fail("/oauth2/revoke", 503)

        with pytest.raises(AuthorizationServerError) as exc_info:
            await authorized_farm.logout()

        assert exc_info.value.status_code == 503
        assert authorized_farm.token["access_token"] == access_token
        assert authorized_farm.csrf_token == farm_server.csrf_token
        assert not farm_server.tokens[access_token].revoked
        assert (await authorized_farm.info())["name"] == "Test Farm"

    async def test_logout_without_token_is_noop(self, farm, farm_server):
        await farm.logout()
        assert farm_server.requests == []


async def test_authorization_url(farm):
    url = farm.authorization_url("https://app.example.com/callback", state="xyz")

    assert url.startswith("http://testserver/oauth2/authorize?")
    assert "client_id=farmos_development" in url
    assert "response_type=code" in url
    assert "state=xyz" in url
