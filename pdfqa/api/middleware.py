"""Request body size limit."""

from fastapi import HTTPException, status
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pdfqa.api.errors import error_response

MAX_BODY_BYTES = 5 * 1024 * 1024
TOO_LARGE = "request entity too large"


class BodySizeLimitMiddleware:
    """Reject bodies over max_bytes with 413.

    Declared sizes (Content-Length) are rejected before the app runs; streamed
    bodies are counted as they are read.
    """

    def __init__(self, app: ASGIApp, max_bytes: int = MAX_BODY_BYTES) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = dict(scope.get("headers") or []).get(b"content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_bytes:
            response = error_response(TOO_LARGE, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=TOO_LARGE,
                    )
            return message

        await self.app(scope, limited_receive, send)
