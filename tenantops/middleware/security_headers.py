"""Security headers middleware.

Adds security-related response headers to every JSON API response.
Headers already set by the route are left alone. Raw ASGI.
"""

from typing import Callable

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def SecurityHeadersMiddleware(app: Callable, headers: dict[str, str] | None = None) -> Callable:
    """Set security headers on all responses. Raw ASGI."""
    resolved = headers if headers is not None else DEFAULT_HEADERS.copy()
    header_list = [(k.lower().encode(), v.encode()) for k, v in resolved.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                seen = {h[0].lower() for h in headers}
                headers.extend(h for h in header_list if h[0] not in seen)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
