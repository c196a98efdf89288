from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from account_service.core.db import engine
from account_service.core.errors import AccountServiceError
from account_service.utils.exception_handlers import (
    account_service_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from account_service.utils.router_discovery import register_routers


@asynccontextmanager
async def app_lifespan(_: FastAPI) -> AsyncGenerator[None, FastAPI]:
    yield

    await engine.dispose()


app = FastAPI(
    title="Account Session API",
    lifespan=app_lifespan,
    servers=[{"url": "http://localhost:8085", "description": "Local server"}],
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


register_routers(app)

app.add_exception_handler(AccountServiceError, account_service_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.get("/")
async def healthz() -> str:
    return "OK"
