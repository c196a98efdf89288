from __future__ import annotations

from datetime import datetime

import sqlmodel

from ._base import BaseModel


class OAuthState(BaseModel, table=True):
    """OAuth state tokens correlating a login attempt with its provider callback."""

    __tablename__: str = "oauth_states"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    state: str = sqlmodel.Field(max_length=128, index=True, unique=True)
    used: bool = sqlmodel.Field(default=False, index=True)
    query_string: str = sqlmodel.Field(default="", max_length=1024)
    """Opaque passthrough value handed back on login completion"""
    expires_at: datetime = sqlmodel.Field(index=True, sa_type=sqlmodel.DateTime(timezone=True))
