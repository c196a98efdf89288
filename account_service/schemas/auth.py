from __future__ import annotations

from pydantic import BaseModel


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str


class OAuthStateResponse(BaseModel):
    state: str


class OAuthJumpResponse(BaseModel):
    account_id: str
    token: TokenResponse
    query_string: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class LogoutRequest(BaseModel):
    token: str | None = None
    """Access token of the session; accepted but not checked"""
    refresh_token: str
