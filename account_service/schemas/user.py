from pydantic import BaseModel


class UserInfo(BaseModel):
    user_id: str
    name: str | None = None
    icon: str | None = None
