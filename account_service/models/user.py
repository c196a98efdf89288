import sqlmodel

from ._base import BaseModel


class User(BaseModel, table=True):
    __tablename__: str = "users"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    user_id: str = sqlmodel.Field(max_length=128, index=True, unique=True)
    """Account ID issued by the upstream provider"""
    name: str | None = sqlmodel.Field(default=None, max_length=64, nullable=True)
    icon: str | None = sqlmodel.Field(default=None, max_length=256, nullable=True)
