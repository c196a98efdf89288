from typing import Annotated

from fastapi import Depends
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_service.core.db import get_db, storage_errors
from account_service.core.errors import UserNotFoundError
from account_service.models.user import User
from account_service.schemas.user import UserInfo


class UserService:
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db)]) -> None:
        self.db = db

    async def get_user(self, user_id: str) -> User | None:
        with storage_errors("get_user"):
            result = await self.db.exec(select(User).where(User.user_id == user_id))
            return result.first()

    async def get_user_info(self, user_id: str) -> UserInfo:
        user = await self.get_user(user_id)
        if not user:
            raise UserNotFoundError
        return UserInfo(user_id=user.user_id, name=user.name, icon=user.icon)
