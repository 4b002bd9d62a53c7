"""Request ID middleware.

Generates or forwards the request ID header and echoes it on the response.
The ID is stored on scope["state"] so error envelopes and log lines can
carry it. Client-provided values are sanitized to prevent log injection.
Raw ASGI (no BaseHTTPMiddleware).
"""

import re
import uuid
from typing import Callable

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _get_header(scope: dict, name: str) -> str | None:
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw (stripped) if it is a safe ID, otherwise a fresh UUID."""
    value = (raw or "").strip()
    if not REQUEST_ID_ALLOWED_PATTERN.match(value):
        return str(uuid.uuid4())
    return value


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request ID on each request and response. Raw ASGI."""
    header_bytes = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = [h for h in message.get("headers", []) if h[0].lower() != header_bytes]
                headers.append((header_bytes, request_id.encode()))
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
