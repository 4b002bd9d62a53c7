"""Outbound email adapters."""

from tenantops.infrastructure.email.resend_sender import (
    DisabledEmailSender,
    ResendEmailSender,
)

__all__ = ["DisabledEmailSender", "ResendEmailSender"]
