"""Raw ASGI middleware and exception-handler envelope tests."""

import asyncio
import json
from unittest.mock import patch

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tenantops.core.exception_handlers import register_exception_handlers, status_for
from tenantops.domain.exceptions import RateLimitedException
from tenantops.middleware import RequestIDMiddleware, TimeoutMiddleware
from tenantops.middleware.request_id import sanitize_request_id


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/slow")
    async def slow() -> dict[str, str]:
        await asyncio.sleep(5)
        return {"ok": "late"}

    @app.get("/limited")
    async def limited() -> dict[str, str]:
        raise RateLimitedException("admin", {"adminRemaining": 0})

    @app.get("/boom")
    async def boom() -> dict[str, str]:
        raise RuntimeError("db password is hunter2")

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=1)
    return app


async def test_timeout_returns_504_envelope() -> None:
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/slow", headers={"X-Request-ID": "slow-1"})
    assert response.status_code == 504
    error = response.json()["error"]
    assert error["code"] == "GATEWAY_TIMEOUT"
    assert error["requestId"] == "slow-1"


async def test_domain_error_envelope_carries_request_id() -> None:
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/limited", headers={"X-Request-ID": "r-42"})
    assert response.status_code == 429
    assert response.headers["x-request-id"] == "r-42"
    assert response.json() == {
        "success": False,
        "error": {
            "code": "RATE_LIMITED",
            "message": "Too many password setup links issued (admin limit reached)",
            "requestId": "r-42",
            "details": {"reason": "admin", "rate_limit": {"adminRemaining": 0}},
        },
    }


async def test_unhandled_error_hides_detail_without_debug() -> None:
    transport = ASGITransport(app=_app(), raise_app_exceptions=False)
    with patch("tenantops.core.exception_handlers.get_settings") as m_get_settings:
        m_get_settings.return_value.debug = False
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/boom")
    assert response.status_code == 500
    body = json.loads(response.content)
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "hunter2" not in response.text


def test_sanitize_request_id() -> None:
    assert sanitize_request_id("abc-123_X") == "abc-123_X"
    assert sanitize_request_id("x" * 65) != "x" * 65
    assert len(sanitize_request_id(None)) == 36


def test_status_mapping() -> None:
    assert status_for("DUPLICATE_SLUG") == 409
    assert status_for("AUTH_USER_CREATION_FAILED") == 500
    assert status_for("SOMETHING_NEW") == 500
