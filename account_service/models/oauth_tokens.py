import sqlmodel

from ._base import BaseModel


class OAuthTokens(BaseModel, table=True):
    """Tokens returned by the upstream provider, kept for traceability."""

    __tablename__: str = "oauth_tokens"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    account_id: str = sqlmodel.Field(max_length=128, index=True)
    authorization_code: str = sqlmodel.Field(max_length=1024)
    access_token: str = sqlmodel.Field(max_length=1024)
    refresh_token: str | None = sqlmodel.Field(default=None, max_length=1024, nullable=True)
