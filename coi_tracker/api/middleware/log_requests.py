# COMPONENT: API REQUEST / RESPONSE LOGGING MIDDLEWARE
# REQUIREMENTS SATISFIED: backend observability and debugging support
"""
coi_tracker/api/middleware/log_requests.py

Defines a custom ASGI middleware for HTTP request and response logging.

This middleware intercepts incoming HTTP requests and outgoing responses
to capture method, path, status code, body sizes and end-to-end latency.
Each request is tagged with a short request ID so the INFO summary line
and the DEBUG body dumps of one request can be matched up in the logs.

Key features:
    - Logs HTTP method, path, status and latency in milliseconds
    - Dumps request and response bodies at DEBUG level
    - Safely passes through non-HTTP ASGI events

It is not user-facing and does not modify request or response behavior.
"""
import time
import uuid

from starlette.types import ASGIApp, Receive, Scope, Send

from ...utils.logging import get_logger

logger = get_logger("http")

MAX_LOGGED_BODY = 2000


def _preview(body: bytes) -> str:
    text = body.decode("utf-8", errors="replace")
    if len(text) > MAX_LOGGED_BODY:
        return text[:MAX_LOGGED_BODY] + "...(truncated)"
    return text


class RequestLogger:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        rid = str(uuid.uuid4())[:8]
        method = scope.get("method")
        path = scope.get("path")

        # ------------------------------
        # Capture request body
        # ------------------------------
        body_bytes = b""

        async def recv_wrapper():
            nonlocal body_bytes
            msg = await receive()
            if msg["type"] == "http.request":
                body_bytes += msg.get("body", b"")
            return msg

        # ------------------------------
        # Prepare response capture
        # ------------------------------
        resp_body = b""
        status_code = None

        async def send_wrapper(message):
            nonlocal resp_body, status_code

            if message["type"] == "http.response.start":
                status_code = message["status"]

            if message["type"] == "http.response.body":
                resp_body += message.get("body", b"")

            await send(message)

        start = time.perf_counter()
        try:
            await self.app(scope, recv_wrapper, send_wrapper)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(
                "[RID %s] %s %s -> %s in %sms (req=%dB resp=%dB)",
                rid,
                method,
                path,
                status_code,
                duration_ms,
                len(body_bytes),
                len(resp_body),
            )
            if body_bytes:
                logger.debug("[RID %s] request body: %s", rid, _preview(body_bytes))
            if resp_body:
                logger.debug("[RID %s] response body: %s", rid, _preview(resp_body))
