from typing import cast

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from account_service.core.errors import AccountServiceError, UpstreamError
from account_service.schemas.common import APIResponse


def account_service_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    exc = cast(AccountServiceError, exc)
    if isinstance(exc, UpstreamError):
        logger.error(
            f"{request.method} {request.url.path} upstream failure [{exc.code}]: {exc.detail}"
        )
    else:
        logger.info(f"{request.method} {request.url.path} failed [{exc.code}]: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=APIResponse(status="error", code=exc.code, message=exc.message).model_dump(),
    )


def http_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(HTTPException, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=APIResponse(status="error", message=exc.detail).model_dump(),
    )


def validation_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(RequestValidationError, exc)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=APIResponse(
            status="error",
            code="validation_error",
            message="Validation error",
            data=[
                {"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in exc.errors()
            ],
        ).model_dump(),
    )


def general_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=APIResponse(status="error", code="internal_error", message=str(exc)).model_dump(),
    )
