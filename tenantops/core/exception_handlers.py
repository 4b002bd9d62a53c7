"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Every failure is rendered
in one envelope:

    {"success": false, "error": {"code", "message", "requestId", "details"?}}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tenantops.core.config import get_settings
from tenantops.domain.exceptions import TenantOpsException
from tenantops.infrastructure.exceptions import EmailDeliveryError, IdentityProviderError

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_SLUG": 400,
    "OWNER_EMAIL_REQUIRED": 400,
    "NO_OWNER_EMAIL": 400,
    "NO_OWNER": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "TENANT_NOT_FOUND": 404,
    "RESOURCE_NOT_FOUND": 404,
    "EMAIL_UNAVAILABLE": 409,
    "DUPLICATE_SLUG": 409,
    "DUPLICATE_REQUEST": 409,
    "INVALID_STATUS_TRANSITION": 409,
    "TENANT_NOT_ACTIVE": 409,
    "RATE_LIMITED": 429,
    "AUTH_USER_CREATION_FAILED": 500,
    "PROVISIONING_FAILED": 500,
    "LINK_GENERATION_FAILED": 500,
    "CREDENTIAL_UPDATE_FAILED": 502,
    "IDENTITY_PROVIDER_ERROR": 502,
    "EMAIL_DELIVERY_ERROR": 502,
}

_HTTP_STATUS_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMITED",
}


def status_for(error_code: str) -> int:
    """HTTP status for a domain error code (500 for unknown codes)."""
    return _ERROR_CODE_STATUS.get(error_code, 500)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build the standard error envelope."""
    error: dict[str, Any] = {
        "code": code,
        "message": message,
        "requestId": _request_id(request),
    }
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def _tenantops_exception_handler(request: Request, exc: TenantOpsException) -> JSONResponse:
    """Render TenantOpsException with the status mapped from its error_code."""
    status = status_for(exc.error_code)
    if status >= 500:
        logger.error(
            "Request failed code=%s request_id=%s: %s",
            exc.error_code,
            _request_id(request),
            exc.message,
        )
    return error_response(request, status, exc.error_code, exc.message, exc.details)


def _identity_provider_exception_handler(
    request: Request, exc: IdentityProviderError
) -> JSONResponse:
    """Identity failures that escaped a service: 502, never the provider's raw payload."""
    logger.error("Identity provider error op=%s status=%s", exc.operation, exc.status_code)
    return error_response(request, 502, exc.error_code, exc.message)


def _email_delivery_exception_handler(request: Request, exc: EmailDeliveryError) -> JSONResponse:
    return error_response(request, 502, exc.error_code, exc.message)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with the offending fields."""
    fields = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return error_response(
        request, 400, "VALIDATION_ERROR", "Request validation failed", {"fields": fields}
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return the envelope for Starlette HTTP exceptions (status + detail)."""
    code = _HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(request, exc.status_code, code, str(exc.detail))


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    message = str(exc) if settings.debug else "Internal server error"
    return error_response(request, 500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app.
    """
    app.add_exception_handler(TenantOpsException, _tenantops_exception_handler)
    app.add_exception_handler(IdentityProviderError, _identity_provider_exception_handler)
    app.add_exception_handler(EmailDeliveryError, _email_delivery_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
