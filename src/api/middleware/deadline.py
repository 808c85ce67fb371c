"""Caller-supplied request deadline middleware."""

import asyncio

import structlog
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from core.exceptions import ErrorCode

logger = structlog.get_logger()

DEADLINE_HEADER = "X-Request-Timeout"


class RequestDeadlineMiddleware:
    """Cancel the request once the caller's ``X-Request-Timeout`` (seconds) elapses.

    Plain ASGI middleware: the downstream app runs in this task, so the
    timeout cancels the route handler together with any in-flight store or
    cache call. Requests without the header run without an internal deadline.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        raw = Headers(scope=scope).get(DEADLINE_HEADER)
        if raw is None:
            await self.app(scope, receive, send)
            return

        try:
            timeout = float(raw)
        except ValueError:
            timeout = -1.0
        if timeout <= 0:
            response = JSONResponse(
                status_code=400,
                content={
                    "error_code": ErrorCode.VALIDATION_ERROR.value,
                    "message": f"{DEADLINE_HEADER} must be a positive number of seconds",
                    "details": None,
                },
            )
            await response(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            async with asyncio.timeout(timeout) as deadline:
                await self.app(scope, receive, send_wrapper)
        except TimeoutError:
            if not deadline.expired():
                raise
            logger.warning(
                "request_deadline_exceeded",
                path=scope.get("path"),
                timeout_seconds=timeout,
                response_started=response_started,
            )
            if response_started:
                # Headers are already on the wire; the body is cut short.
                return
            response = JSONResponse(
                status_code=504,
                content={
                    "error_code": ErrorCode.DEADLINE_EXCEEDED.value,
                    "message": "Request deadline exceeded",
                    "details": {"timeout_seconds": timeout},
                },
            )
            await response(scope, receive, send)
