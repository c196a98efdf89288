from typing import Annotated

from fastapi import APIRouter, Depends, Header

from account_service.schemas.auth import (
    LogoutRequest,
    OAuthJumpResponse,
    OAuthStateResponse,
    RefreshTokenRequest,
    TokenResponse,
)
from account_service.schemas.common import APIResponse
from account_service.services.session import SessionService

router = APIRouter(tags=["auth"])


@router.api_route("/oauth/state", methods=["GET", "POST"])
async def oauth_state(
    service: Annotated[SessionService, Depends()], query_string: str = ""
) -> APIResponse[OAuthStateResponse]:
    """Start a login and return the state to pass to the OAuth provider."""
    state = await service.begin_login(query_string)
    return APIResponse(data=OAuthStateResponse(state=state))


@router.post("/oauth/jump")
async def oauth_jump(
    authorization_code: str,
    state: str,
    service: Annotated[SessionService, Depends()],
    redirect_uri: str | None = None,
    user_agent: Annotated[str | None, Header()] = None,
) -> APIResponse[OAuthJumpResponse]:
    """Complete a login with the code and state the provider redirected back with."""
    result = await service.complete_login(
        authorization_code=authorization_code,
        state=state,
        redirect_uri=redirect_uri,
        user_agent=user_agent,
    )
    return APIResponse(data=result)


@router.post("/refresh-token")
async def refresh_token(
    body: RefreshTokenRequest, service: Annotated[SessionService, Depends()]
) -> APIResponse[TokenResponse]:
    tokens = await service.refresh(body.refresh_token)
    return APIResponse(data=tokens)


@router.post("/logout")
async def logout(
    body: LogoutRequest, service: Annotated[SessionService, Depends()]
) -> APIResponse[None]:
    await service.logout(body.token, body.refresh_token)
    return APIResponse(message="Logged out")
