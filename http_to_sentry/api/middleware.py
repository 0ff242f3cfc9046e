import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("http_to_sentry.access")

BODY_METHODS = {"POST", "PUT", "PATCH"}
ELLIPSIS = "…"


def _remote(scope: Scope) -> str:
    client = scope.get("client")
    if not client:
        return ""
    return f"{client[0]}:{client[1]}"


class RequestLogMiddleware:
    """
    One log line per request: method, path, status, duration, remote address,
    plus a preview of the body for write methods.
    The body is copied as it streams past; the app still reads all of it.
    """

    def __init__(self, app: ASGIApp, max_log_bytes: int = 4096):
        self.app = app
        self.max_log_bytes = max_log_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        method = scope.get("method", "")
        capture = method in BODY_METHODS and self.max_log_bytes > 0
        preview = bytearray()
        truncated = False
        status = 500

        async def receive_wrapper() -> Message:
            nonlocal truncated
            message = await receive()
            if capture and message["type"] == "http.request":
                chunk = message.get("body", b"")
                room = self.max_log_bytes - len(preview)
                if len(chunk) > room:
                    truncated = True
                if room > 0:
                    preview.extend(chunk[:room])
            return message

        async def send_wrapper(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            line = f"{method} {scope.get('path', '')} {status} {duration_ms}ms {_remote(scope)}"
            if preview:
                text = preview.decode("utf-8", errors="replace")
                if truncated:
                    text += ELLIPSIS
                logger.info("%s payload=%r", line, text)
            else:
                logger.info("%s", line)
