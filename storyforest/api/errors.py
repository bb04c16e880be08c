"""Callable-style errors and their HTTP rendering."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Error code -> HTTP status
ERROR_STATUS = {
    "invalid-argument": 400,
    "unauthenticated": 401,
    "permission-denied": 403,
    "not-found": 404,
    "failed-precondition": 412,
    "internal": 500,
}


class CallableError(Exception):
    """
    An error reported to the client as {"error": {"status", "message"}}.

    Args:
        code: One of the keys in ERROR_STATUS
        message: Human-readable message
    """

    def __init__(self, code: str, message: str):
        if code not in ERROR_STATUS:
            raise ValueError(f"Unknown error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def http_status(self) -> int:
        return ERROR_STATUS[self.code]

    @property
    def status(self) -> str:
        return self.code.upper().replace("-", "_")

    def to_dict(self) -> dict:
        return {"error": {"status": self.status, "message": self.message}}


def invalid_argument(message: str) -> CallableError:
    return CallableError("invalid-argument", message)


def failed_precondition(message: str) -> CallableError:
    return CallableError("failed-precondition", message)


def unauthenticated(message: str = "Authentication required") -> CallableError:
    return CallableError("unauthenticated", message)


def permission_denied(message: str) -> CallableError:
    return CallableError("permission-denied", message)


def not_found(message: str) -> CallableError:
    return CallableError("not-found", message)


def internal(message: str) -> CallableError:
    return CallableError("internal", message)


def wrap_internal(e: Exception, action: str) -> CallableError:
    """Pass CallableErrors through untouched; wrap anything else as internal."""
    if isinstance(e, CallableError):
        return e
    logger.error(f"{action} failed: {type(e).__name__}: {e}")
    return internal(f"{action} failed: {e}")


async def callable_error_handler(request: Request, exc: CallableError) -> JSONResponse:
    """Render a CallableError as JSON."""
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())
