"""Transactional email over an HTTP email API (Resend-compatible) using httpx."""

import html
import logging
from datetime import datetime

import httpx

from tenantops.domain.enums import SetupLinkMode
from tenantops.infrastructure.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

_SUBJECTS = {
    SetupLinkMode.INVITE: "Set up your {tenant} account",
    SetupLinkMode.RECOVERY: "Reset your {tenant} password",
}


def render_setup_link_email(
    tenant_name: str, link: str, mode: SetupLinkMode, expires_at: datetime
) -> tuple[str, str]:
    """Return (subject, html body) for a password-setup link email."""
    safe_name = html.escape(tenant_name)
    safe_link = html.escape(link, quote=True)
    action = "set up your password" if mode is SetupLinkMode.INVITE else "choose a new password"
    body = (
        f"<p>Hello,</p>"
        f"<p>Use the link below to {action} for <strong>{safe_name}</strong>.</p>"
        f'<p><a href="{safe_link}">Open password setup</a></p>'
        f"<p>This link expires on {expires_at:%Y-%m-%d %H:%M} UTC and can be used once.</p>"
    )
    return _SUBJECTS[mode].format(tenant=tenant_name), body


class ResendEmailSender:
    """IEmailSender posting to the email API with a bearer key and explicit timeout."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        api_key: str,
        from_address: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._client = client
        self._api_url = api_url
        self._api_key = api_key
        self._from_address = from_address
        self._timeout = httpx.Timeout(timeout_seconds)

    async def send_setup_link(
        self,
        *,
        to: str,
        tenant_name: str,
        link: str,
        mode: SetupLinkMode,
        expires_at: datetime,
    ) -> None:
        subject, body = render_setup_link_email(tenant_name, link, mode, expires_at)
        try:
            response = await self._client.post(
                self._api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={"from": self._from_address, "to": [to], "subject": subject, "html": body},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmailDeliveryError(to, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise EmailDeliveryError(to, str(e) or e.__class__.__name__) from e
        logger.info("Setup link email sent (mode=%s)", mode.value)


class DisabledEmailSender:
    """IEmailSender used when no email API key is configured."""

    async def send_setup_link(
        self,
        *,
        to: str,
        tenant_name: str,
        link: str,
        mode: SetupLinkMode,
        expires_at: datetime,
    ) -> None:
        raise EmailDeliveryError(to, "email delivery is not configured")
