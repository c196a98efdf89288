"""Errors raised by the account service.

Every failure a caller can observe is one of the subclasses below. The transport layer maps
them to an HTTP status and a ``{status, code, message}`` body in
``account_service.utils.exception_handlers``.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_STATE = "invalid_state"
    UPSTREAM_EXCHANGE_FAILED = "upstream_exchange_failed"
    UPSTREAM_IDENTITY_FAILED = "upstream_identity_failed"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_LOGGED_OUT = "session_logged_out"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    USER_NOT_FOUND = "user_not_found"
    UNAUTHENTICATED = "unauthenticated"


class AccountServiceError(Exception):
    code: ErrorCode
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidStateError(AccountServiceError):
    """The OAuth state is unknown, expired, or was already used. The login must restart."""

    code = ErrorCode.INVALID_STATE
    status_code = 400
    default_message = "Invalid or expired OAuth state"


class UpstreamError(AccountServiceError):
    """Base for failures talking to the upstream OAuth provider.

    The message shown to the caller is always generic; ``detail`` carries the provider
    response and is only logged.
    """

    status_code = 502
    default_message = "Login failed, please retry"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__()


class UpstreamExchangeFailedError(UpstreamError):
    code = ErrorCode.UPSTREAM_EXCHANGE_FAILED


class UpstreamIdentityFailedError(UpstreamError):
    code = ErrorCode.UPSTREAM_IDENTITY_FAILED


class UpstreamTimeoutError(UpstreamError):
    code = ErrorCode.UPSTREAM_TIMEOUT
    status_code = 504


class SessionNotFoundError(AccountServiceError):
    code = ErrorCode.SESSION_NOT_FOUND
    status_code = 401
    default_message = "Refresh token not found or expired"


class SessionLoggedOutError(AccountServiceError):
    code = ErrorCode.SESSION_LOGGED_OUT
    status_code = 401
    default_message = "Session has been logged out"


class StorageUnavailableError(AccountServiceError):
    code = ErrorCode.STORAGE_UNAVAILABLE
    status_code = 503
    default_message = "Storage unavailable"

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Storage unavailable during {operation}")


class UserNotFoundError(AccountServiceError):
    code = ErrorCode.USER_NOT_FOUND
    status_code = 404
    default_message = "User not found"


class UnauthenticatedError(AccountServiceError):
    code = ErrorCode.UNAUTHENTICATED
    status_code = 401
    default_message = "Not authenticated"
