"""Error types and the two terminal responders (404 and 500)."""

from fastapi.responses import JSONResponse
from starlette.types import Receive, Scope, Send

NOT_FOUND_MESSAGE = "Endpoint not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class YatraError(Exception):
    """Base exception for errors raised by the API process itself."""


class BodyParseError(YatraError):
    """Raised when a request body cannot be decoded or parsed."""


class PayloadTooLargeError(BodyParseError):
    """Raised when a request body exceeds the configured limit."""

    def __init__(self, length: int, limit: int):
        super().__init__(f"Request body of {length} bytes exceeds limit of {limit} bytes")
        self.length = length
        self.limit = limit


class TooManyParametersError(BodyParseError):
    """Raised when a form body carries more fields than allowed."""

    def __init__(self, limit: int):
        super().__init__(f"Too many parameters (limit {limit})")
        self.limit = limit


class FormDepthError(BodyParseError):
    """Raised when a form key nests deeper than allowed."""

    def __init__(self, depth: int):
        super().__init__(f"Form key nesting exceeds depth of {depth}")
        self.depth = depth


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


def not_found_response() -> JSONResponse:
    """Response for any request the mounted router did not match."""
    return JSONResponse(status_code=404, content=error_body(NOT_FOUND_MESSAGE))


def internal_error_response() -> JSONResponse:
    """Generic 500; the error detail stays in the server log."""
    return JSONResponse(status_code=500, content=error_body(INTERNAL_ERROR_MESSAGE))


class NotFoundEndpoint:
    """ASGI endpoint answering every method with the 404 body.

    Being a plain ASGI callable rather than a function, a route built on it
    matches any HTTP method.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await not_found_response()(scope, receive, send)
