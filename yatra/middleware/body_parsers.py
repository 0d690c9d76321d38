"""ASGI body-parsing stages: JSON and URL-encoded forms.

Each stage inspects the request's content type. A matching body is read in
full (up to ``limit`` bytes), parsed into ``request.state.body`` and then
replayed so that downstream handlers can still read the raw bytes. Any
other request passes through untouched with ``request.state.body == {}``.
"""

import json
from typing import Any

from fastapi import Request
from starlette.datastructures import Headers
from starlette.requests import ClientDisconnect
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from yatra.errors import BodyParseError, PayloadTooLargeError
from yatra.middleware.forms import parse_form

DEFAULT_LIMIT = 100 * 1024


def parse_content_type(value: str) -> tuple[str, dict[str, str]]:
    """Split a Content-Type header into its media type and parameters."""
    media_type, _, rest = value.partition(";")
    params = {}
    for item in rest.split(";"):
        key, sep, param = item.strip().partition("=")
        if sep:
            params[key.strip().lower()] = param.strip().strip('"')
    return media_type.strip().lower(), params


def get_body(request: Request) -> Any:
    """Dependency returning the body parsed by the middleware stages."""
    return getattr(request.state, "body", {})


class BodyParserMiddleware:
    """Base stage; subclasses set ``media_types`` and implement ``parse``."""

    media_types: tuple[str, ...] = ()

    def __init__(self, app: ASGIApp, limit: int = DEFAULT_LIMIT):
        self.app = app
        self.limit = limit

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        state.setdefault("body", {})

        headers = Headers(scope=scope)
        media_type, params = parse_content_type(headers.get("content-type", ""))
        if media_type not in self.media_types:
            await self.app(scope, receive, send)
            return

        raw = await self._read_body(receive, headers)
        state["body"] = self.parse(raw, params.get("charset", "utf-8"))
        await self.app(scope, _replay(raw, receive), send)

    def parse(self, raw: bytes, charset: str) -> Any:
        raise NotImplementedError

    def decode(self, raw: bytes, charset: str) -> str:
        try:
            return raw.decode(charset)
        except LookupError as e:
            raise BodyParseError(f"Unsupported charset: {charset}") from e
        except UnicodeDecodeError as e:
            raise BodyParseError(f"Body is not valid {charset}") from e

    async def _read_body(self, receive: Receive, headers: Headers) -> bytes:
        declared = headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.limit:
            raise PayloadTooLargeError(int(declared), self.limit)

        body = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnect()
            body += message.get("body", b"")
            if len(body) > self.limit:
                raise PayloadTooLargeError(len(body), self.limit)
            more_body = message.get("more_body", False)
        return bytes(body)


class JSONBodyParserMiddleware(BodyParserMiddleware):
    """Parses ``application/json`` bodies."""

    media_types = ("application/json",)

    def __init__(self, app: ASGIApp, limit: int = DEFAULT_LIMIT, strict: bool = True):
        super().__init__(app, limit=limit)
        self.strict = strict

    def parse(self, raw: bytes, charset: str) -> Any:
        text = self.decode(raw, charset).strip()
        if not text:
            return {}
        # Strict mode only accepts objects and arrays at the top level
        if self.strict and text[0] not in "{[":
            raise BodyParseError("JSON body must be an object or an array")
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise BodyParseError(f"Malformed JSON body: {e}") from e


class URLEncodedBodyParserMiddleware(BodyParserMiddleware):
    """Parses ``application/x-www-form-urlencoded`` bodies."""

    media_types = ("application/x-www-form-urlencoded",)

    def __init__(
        self,
        app: ASGIApp,
        limit: int = DEFAULT_LIMIT,
        extended: bool = True,
        parameter_limit: int = 1000,
    ):
        super().__init__(app, limit=limit)
        self.extended = extended
        self.parameter_limit = parameter_limit

    def parse(self, raw: bytes, charset: str) -> dict:
        return parse_form(
            self.decode(raw, charset),
            extended=self.extended,
            parameter_limit=self.parameter_limit,
            encoding=charset,
        )


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise BodyParseError(f"Malformed JSON body: unexpected token {name}")


def _replay(body: bytes, receive: Receive) -> Receive:
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay
