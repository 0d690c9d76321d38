"""Outermost pipeline stage turning unhandled exceptions into a 500."""

import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from yatra.errors import internal_error_response

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware:
    """Catch any exception raised further down the pipeline.

    The error is logged on a single line and answered with the generic 500
    body. It is not re-raised, so the server does not log a traceback too.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            logger.error(f"Unhandled error: {e}")
            # Headers already went out; nothing more can be sent
            if response_started:
                return
            await internal_error_response()(scope, receive, send)
