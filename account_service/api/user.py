from typing import Annotated

from fastapi import APIRouter, Depends

from account_service.core.security import get_current_account_id
from account_service.schemas.common import APIResponse
from account_service.schemas.user import UserInfo
from account_service.services.user import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
async def get_me(
    account_id: Annotated[str, Depends(get_current_account_id)],
    service: Annotated[UserService, Depends()],
) -> APIResponse[UserInfo]:
    user_info = await service.get_user_info(account_id)
    return APIResponse(data=user_info)
