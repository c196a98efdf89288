from __future__ import annotations

from datetime import datetime

import sqlmodel

from ._base import BaseModel


class UserToken(BaseModel, table=True):
    """Append-only log of every access token handed out."""

    __tablename__: str = "user_tokens"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    account_id: str = sqlmodel.Field(max_length=128, index=True)
    token: str = sqlmodel.Field(max_length=1024)
    expires_at: datetime = sqlmodel.Field(sa_type=sqlmodel.DateTime(timezone=True))
