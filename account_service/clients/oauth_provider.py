"""Client for the upstream OAuth provider's token and identity endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import httpx
from loguru import logger

from account_service.core.config import settings
from account_service.core.errors import (
    UpstreamExchangeFailedError,
    UpstreamIdentityFailedError,
    UpstreamTimeoutError,
)


@dataclass(frozen=True, slots=True)
class UpstreamTokens:
    access_token: str
    refresh_token: str | None = None


class OAuthProviderClient:
    """Exchange authorization codes and resolve account ids against the upstream provider."""

    TOKEN_PATH = "/oauth/token"
    ME_PATH = "/oauth/me"

    def __init__(
        self,
        *,
        base_url: str,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        )

    async def exchange_code_for_token(self, code: str, redirect_uri: str) -> UpstreamTokens:
        """Exchange an authorization code for the provider's access and refresh tokens.

        Raises:
            UpstreamTimeoutError: If the provider does not answer within the timeout.
            UpstreamExchangeFailedError: On transport errors, non-200 responses or a
                response without an access token.
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": self._client_id,
        }

        try:
            async with self._client() as client:
                resp = await client.post(
                    self.TOKEN_PATH,
                    data=data,
                    auth=httpx.BasicAuth(self._client_id, self._client_secret),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.TimeoutException as e:
            logger.error(f"OAuth token exchange timed out: {e!r}")
            raise UpstreamTimeoutError(str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"OAuth token exchange transport error: {e!r}")
            raise UpstreamExchangeFailedError(str(e)) from e

        if resp.status_code != 200:
            logger.error(f"OAuth token exchange failed: {resp.status_code} {resp.text}")
            raise UpstreamExchangeFailedError(f"{resp.status_code} {resp.text}")

        try:
            payload: dict[str, Any] = resp.json()
        except ValueError as e:
            raise UpstreamExchangeFailedError("token response is not JSON") from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            logger.error(f"OAuth provider returned no access token: {resp.text}")
            raise UpstreamExchangeFailedError("no access token returned")

        return UpstreamTokens(access_token=access_token, refresh_token=payload.get("refresh_token"))

    async def get_account_id(self, access_token: str) -> str:
        """Resolve the account id owning ``access_token``.

        The identity endpoint answers either with a bare JSON string or with an object
        carrying the id under ``account_id``, ``accountId`` or ``id``.
        """
        try:
            async with self._client() as client:
                resp = await client.get(
                    self.ME_PATH,
                    params={"access_token": access_token},
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.TimeoutException as e:
            logger.error(f"OAuth identity lookup timed out: {e!r}")
            raise UpstreamTimeoutError(str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"OAuth identity lookup transport error: {e!r}")
            raise UpstreamIdentityFailedError(str(e)) from e

        if resp.status_code != 200:
            logger.error(f"OAuth identity lookup failed: {resp.status_code} {resp.text}")
            raise UpstreamIdentityFailedError(f"{resp.status_code} {resp.text}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamIdentityFailedError("identity response is not JSON") from e

        if isinstance(payload, dict):
            payload = next(
                (
                    payload[key]
                    for key in ("account_id", "accountId", "id")
                    if payload.get(key) is not None
                ),
                None,
            )

        # bool is an int subclass but never an account id
        if isinstance(payload, bool) or not isinstance(payload, str | int):
            payload = None
        account_id = str(payload) if payload is not None else ""
        if not account_id:
            logger.error(f"OAuth provider returned no account id: {resp.text}")
            raise UpstreamIdentityFailedError("no account id returned")
        return account_id


@lru_cache
def get_oauth_client() -> OAuthProviderClient:
    return OAuthProviderClient(
        base_url=settings.oauth_base_url,
        client_id=settings.oauth_client_id,
        client_secret=settings.oauth_client_secret,
        timeout=settings.oauth_timeout_seconds,
    )
