from __future__ import annotations

from datetime import datetime

import sqlmodel

from ._base import BaseModel


class RefreshToken(BaseModel, table=True):
    """The current session of an account. One row per account, rotated in place."""

    __tablename__: str = "refresh_tokens"

    id: int | None = sqlmodel.Field(default=None, primary_key=True)
    account_id: str = sqlmodel.Field(max_length=128, index=True, unique=True)
    token_hash: str = sqlmodel.Field(max_length=64, index=True)
    is_logged_out: bool = False
    logout_at: datetime | None = sqlmodel.Field(
        default=None, nullable=True, sa_type=sqlmodel.DateTime(timezone=True)
    )
    expires_at: datetime = sqlmodel.Field(sa_type=sqlmodel.DateTime(timezone=True))
    user_agent: str | None = sqlmodel.Field(default=None, max_length=256, nullable=True)
