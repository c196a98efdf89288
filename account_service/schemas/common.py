from typing import Literal

from pydantic import BaseModel, Field

from account_service.utils.misc import get_utc_iso_now


class APIResponse[T](BaseModel):
    status: Literal["success", "error"] = "success"
    data: T | None = None
    message: str | None = None
    code: str | None = None
    """Machine-readable error code, only set on errors"""
    timestamp: str = Field(default_factory=get_utc_iso_now)
