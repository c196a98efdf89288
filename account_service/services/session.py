from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_service.clients.oauth_provider import OAuthProviderClient, get_oauth_client
from account_service.core.config import settings
from account_service.core.db import get_db, read_committed, storage_errors
from account_service.core.errors import (
    InvalidStateError,
    SessionLoggedOutError,
    SessionNotFoundError,
)
from account_service.core.security import create_access_token, generate_opaque_token, hash_token
from account_service.models.oauth_state import OAuthState
from account_service.models.oauth_tokens import OAuthTokens
from account_service.models.refresh_token import RefreshToken
from account_service.models.user_token import UserToken
from account_service.schemas.auth import OAuthJumpResponse, TokenResponse
from account_service.utils.misc import ensure_utc_aware, get_utc_now


class SessionService:
    """OAuth login, refresh-token rotation and logout.

    Each account owns at most one RefreshToken row. Logging in again or refreshing
    overwrites the stored token hash, which invalidates the previous refresh token.
    """

    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db)],
        oauth: Annotated[OAuthProviderClient, Depends(get_oauth_client)],
    ) -> None:
        self.db = db
        self.oauth = oauth

    async def begin_login(self, query_string: str = "") -> str:
        """Create a single-use OAuth state and return it for the provider redirect."""
        state = generate_opaque_token()
        oauth_state = OAuthState(
            state=state,
            used=False,
            query_string=query_string,
            expires_at=get_utc_now() + timedelta(seconds=settings.oauth_state_ttl_seconds),
        )
        with storage_errors("begin_login"):
            self.db.add(oauth_state)
            await self.db.commit()
        logger.debug(f"Created OAuth state: {state}")
        return state

    async def complete_login(
        self,
        *,
        authorization_code: str,
        state: str,
        redirect_uri: str | None = None,
        user_agent: str | None = None,
    ) -> OAuthJumpResponse:
        """Turn a provider callback into a session.

        The steps run in a fixed order and any failure stops the ones after it. Rows
        committed before a failure (the upstream token audit row, the access token log)
        are kept. Marking the state as used comes last and never fails the login.

        Raises:
            InvalidStateError: Unknown, used or expired state.
            UpstreamExchangeFailedError, UpstreamIdentityFailedError, UpstreamTimeoutError:
                The provider rejected the code, did not identify the account or timed out.
            StorageUnavailableError: Any database failure.
        """
        with storage_errors("complete_login"):
            oauth_state = await self._get_valid_state(state)
            state_id, query_string = oauth_state.id, oauth_state.query_string
            # Release the connection before the upstream round trips
            await self.db.commit()

        upstream = await self.oauth.exchange_code_for_token(
            authorization_code, redirect_uri or settings.oauth_redirect_uri
        )
        account_id = await self.oauth.get_account_id(upstream.access_token)

        with storage_errors("complete_login"):
            self.db.add(
                OAuthTokens(
                    account_id=account_id,
                    authorization_code=authorization_code,
                    access_token=upstream.access_token,
                    refresh_token=upstream.refresh_token,
                )
            )
            await self.db.commit()

            access_token = await self._issue_access_token(account_id)
            refresh_token = await self._rotate_refresh_token(account_id, user_agent=user_agent)

        await self._mark_state_used(state_id, state)
        logger.info(f"Account {account_id} logged in")

        return OAuthJumpResponse(
            account_id=account_id,
            token=TokenResponse(access_token=access_token, refresh_token=refresh_token),
            query_string=query_string,
        )

    async def refresh(self, refresh_token: str) -> TokenResponse:
        """Issue a new access token and rotate the refresh token.

        Raises:
            SessionNotFoundError: The value is unknown, already rotated or expired.
            SessionLoggedOutError: The session was logged out.
            StorageUnavailableError: Any database failure.
        """
        with storage_errors("refresh"):
            session = await self._get_refresh_token(refresh_token)
            if session is None or ensure_utc_aware(session.expires_at) <= get_utc_now():
                raise SessionNotFoundError
            if session.is_logged_out:
                raise SessionLoggedOutError

            account_id = session.account_id
            access_token = await self._issue_access_token(account_id)
            new_refresh_token = await self._rotate_refresh_token(
                account_id, expected_hash=session.token_hash
            )

        logger.debug(f"Rotated refresh token for account {account_id}")
        return TokenResponse(access_token=access_token, refresh_token=new_refresh_token)

    async def logout(self, access_token: str | None, refresh_token: str) -> None:
        """Terminate the session owning ``refresh_token``. Unknown tokens are a no-op.

        ``access_token`` is accepted but not checked; issued access tokens stay valid until
        they expire.
        """
        with storage_errors("logout"):
            session = await self._get_refresh_token(refresh_token)
            if session is None:
                logger.debug("Logout with unknown refresh token, nothing to do")
                return
            if session.is_logged_out:
                return

            session.is_logged_out = True
            session.logout_at = get_utc_now()
            self.db.add(session)
            await self.db.commit()

        logger.info(f"Account {session.account_id} logged out")

    async def _get_valid_state(self, state: str) -> OAuthState:
        result = await self.db.exec(select(OAuthState).where(OAuthState.state == state))
        oauth_state = result.first()

        if oauth_state is None:
            logger.warning(f"Unknown OAuth state: {state}")
            raise InvalidStateError
        if oauth_state.used:
            logger.warning(f"Reused OAuth state: {state}")
            raise InvalidStateError
        if ensure_utc_aware(oauth_state.expires_at) <= get_utc_now():
            logger.warning(f"Expired OAuth state: {state}")
            raise InvalidStateError
        return oauth_state

    async def _get_refresh_token(self, refresh_token: str) -> RefreshToken | None:
        result = await self.db.exec(
            select(RefreshToken).where(RefreshToken.token_hash == hash_token(refresh_token))
        )
        return result.first()

    async def _issue_access_token(self, account_id: str) -> str:
        access_token, expires_at = create_access_token(sub=account_id)
        self.db.add(UserToken(account_id=account_id, token=access_token, expires_at=expires_at))
        await self.db.commit()
        return access_token

    async def _rotate_refresh_token(
        self,
        account_id: str,
        *,
        expected_hash: str | None = None,
        user_agent: str | None = None,
    ) -> str:
        """Store a new refresh token for ``account_id`` and return its plain value.

        The lookup and the insert-or-update share one transaction. If a concurrent login
        inserted the account's row first, the unique constraint on ``account_id`` fails
        our insert and the upsert is retried once, now as an update.
        """
        refresh_token = generate_opaque_token()
        token_hash = hash_token(refresh_token)

        try:
            async with read_committed(self.db):
                await self._upsert_refresh_token(
                    account_id, token_hash, expected_hash=expected_hash, user_agent=user_agent
                )
        except IntegrityError:
            logger.info(f"Concurrent login for account {account_id}, retrying as update")
            async with read_committed(self.db):
                await self._upsert_refresh_token(
                    account_id, token_hash, expected_hash=expected_hash, user_agent=user_agent
                )

        return refresh_token

    async def _upsert_refresh_token(
        self,
        account_id: str,
        token_hash: str,
        *,
        expected_hash: str | None,
        user_agent: str | None,
    ) -> None:
        result = await self.db.exec(
            select(RefreshToken)
            .where(RefreshToken.account_id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        session = result.first()
        expires_at = get_utc_now() + timedelta(seconds=settings.refresh_token_ttl_seconds)

        if session is None:
            if expected_hash is not None:
                raise SessionNotFoundError
            self.db.add(
                RefreshToken(
                    account_id=account_id,
                    token_hash=token_hash,
                    expires_at=expires_at,
                    user_agent=user_agent,
                )
            )
            return

        # A refresh racing another refresh of the same token loses here
        if expected_hash is not None and (
            session.token_hash != expected_hash or session.is_logged_out
        ):
            raise SessionNotFoundError

        session.token_hash = token_hash
        session.expires_at = expires_at
        session.is_logged_out = False
        session.logout_at = None
        if user_agent:
            session.user_agent = user_agent
        self.db.add(session)

    async def _mark_state_used(self, state_id: int, state: str) -> None:
        try:
            oauth_state = await self.db.get(OAuthState, state_id)
            if oauth_state is None:
                return
            oauth_state.used = True
            self.db.add(oauth_state)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(f"Failed to mark OAuth state {state} as used: {e!r}")
