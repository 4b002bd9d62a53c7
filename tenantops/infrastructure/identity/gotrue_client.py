"""Identity provider adapter for a GoTrue-compatible auth admin API (httpx).

All calls use the service key and an explicit timeout. Failures are
classified from the HTTP status and the structured ``error_code`` field
of the response body:

- timeouts, transport errors, 429 and 5xx -> IdentityProviderUnavailableError
- ``email_exists`` / ``user_already_exists`` -> IdentityConflictError
- anything else -> IdentityProviderError
"""

import logging
from typing import Any

import httpx

from tenantops.application.dtos.identity import IdentityUser
from tenantops.domain.enums import SetupLinkMode
from tenantops.infrastructure.exceptions import (
    IdentityConflictError,
    IdentityProviderError,
    IdentityProviderUnavailableError,
)

logger = logging.getLogger(__name__)

CONFLICT_ERROR_CODES = frozenset(
    {"email_exists", "user_already_exists", "identity_already_exists"}
)
NOT_FOUND_ERROR_CODES = frozenset({"user_not_found"})
USERS_PAGE_SIZE = 200


def _user_from_payload(payload: dict[str, Any]) -> IdentityUser:
    # Some endpoints wrap the user object ({"user": {...}}).
    data = payload["user"] if isinstance(payload.get("user"), dict) else payload
    return IdentityUser(
        id=str(data["id"]),
        email=(data.get("email") or None),
        user_metadata=dict(data.get("user_metadata") or {}),
    )


def _error_code(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    code = body.get("error_code")
    if code is None and isinstance(body.get("code"), str):
        code = body["code"]
    return str(code) if code else None


class GoTrueIdentityProvider:
    """IIdentityProvider implementation over the GoTrue admin REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        service_key: str,
        *,
        timeout_seconds: float = 10.0,
        lookup_max_pages: int = 50,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._timeout = httpx.Timeout(timeout_seconds)
        self._lookup_max_pages = lookup_max_pages

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._service_key,
            "Authorization": f"Bearer {bearer or self._service_key}",
        }

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        bearer: str | None = None,
    ) -> httpx.Response:
        """Send a request; raise classified errors for anything but 2xx and 404."""
        try:
            response = await self._client.request(
                method,
                f"{self._base_url}{path}",
                json=json,
                params=params,
                headers=self._headers(bearer),
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise IdentityProviderUnavailableError(operation, "request timed out") from e
        except httpx.TransportError as e:
            raise IdentityProviderUnavailableError(operation, f"transport error: {e}") from e

        if response.is_success or response.status_code == 404:
            return response
        code = _error_code(response)
        reason = f"HTTP {response.status_code}"
        if response.status_code == 429 or response.status_code >= 500:
            raise IdentityProviderUnavailableError(operation, reason, response.status_code, code)
        if code in CONFLICT_ERROR_CODES:
            raise IdentityConflictError(operation, reason, response.status_code, code)
        raise IdentityProviderError(operation, reason, response.status_code, code)

    async def create_user(
        self,
        user_id: str,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> IdentityUser:
        response = await self._request(
            "create_user",
            "POST",
            "/admin/users",
            json={
                "id": user_id,
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": metadata,
            },
        )
        if response.status_code == 404:
            raise IdentityProviderError("create_user", "admin endpoint not found", 404)
        return _user_from_payload(response.json())

    async def get_user(self, user_id: str) -> IdentityUser | None:
        response = await self._request("get_user", "GET", f"/admin/users/{user_id}")
        if response.status_code == 404:
            return None
        return _user_from_payload(response.json())

    async def find_user_by_email(self, email: str) -> IdentityUser | None:
        """Look email up in the admin user list.

        The list is narrowed with the admin API's ``filter`` parameter (a
        substring match on email), so only candidates are paged through; the
        exact, case-insensitive match is checked here. Raises
        IdentityProviderUnavailableError when more than lookup_max_pages pages
        of candidates come back; a partial scan is never reported as "not found".
        """
        wanted = email.strip().lower()
        for page in range(1, self._lookup_max_pages + 1):
            response = await self._request(
                "find_user_by_email",
                "GET",
                "/admin/users",
                params={"page": page, "per_page": USERS_PAGE_SIZE, "filter": wanted},
            )
            if response.status_code == 404:
                raise IdentityProviderError("find_user_by_email", "admin endpoint not found", 404)
            users = response.json().get("users") or []
            for data in users:
                if (data.get("email") or "").strip().lower() == wanted:
                    return _user_from_payload(data)
            if len(users) < USERS_PAGE_SIZE:
                return None
        raise IdentityProviderUnavailableError(
            "find_user_by_email",
            f"more than {self._lookup_max_pages} pages of users match the email filter",
        )

    async def update_user(
        self,
        user_id: str,
        *,
        email: str | None = None,
        password: str | None = None,
    ) -> IdentityUser:
        body: dict[str, Any] = {}
        if email is not None:
            body["email"] = email
            body["email_confirm"] = True
        if password is not None:
            body["password"] = password
        response = await self._request(
            "update_user", "PUT", f"/admin/users/{user_id}", json=body
        )
        if response.status_code == 404:
            raise IdentityProviderError("update_user", "user not found", 404, "user_not_found")
        return _user_from_payload(response.json())

    async def generate_link(
        self, mode: SetupLinkMode, email: str, redirect_to: str
    ) -> str:
        response = await self._request(
            "generate_link",
            "POST",
            "/admin/generate_link",
            json={"type": mode.value, "email": email, "redirect_to": redirect_to},
        )
        if response.status_code == 404:
            raise IdentityProviderError("generate_link", "user not found", 404)
        body = response.json()
        link = body.get("action_link") or (body.get("properties") or {}).get("action_link")
        if not link:
            raise IdentityProviderError("generate_link", "response has no action_link")
        return str(link)

    async def get_user_for_token(self, access_token: str) -> IdentityUser | None:
        try:
            response = await self._request("get_user_for_token", "GET", "/user", bearer=access_token)
        except IdentityProviderError as e:
            if e.status_code in (401, 403):
                return None
            raise
        if response.status_code == 404:
            return None
        return _user_from_payload(response.json())
