"""Infrastructure exceptions for the identity provider and email delivery.

They extend TenantOpsException so presentation can map them to HTTP
responses consistently; services usually translate them to domain errors
before they reach the API.
"""

from tenantops.domain.exceptions import TenantOpsException


class IdentityProviderError(TenantOpsException):
    """Identity provider call failed.

    Attributes:
        operation: Provider operation that failed (e.g. create_user).
        status_code: HTTP status returned by the provider, if any.
        provider_code: Structured error code from the provider body, if any.
        transient: True when a retry may succeed (timeouts, 5xx, 429).
    """

    transient = False

    def __init__(
        self,
        operation: str,
        reason: str,
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        self.operation = operation
        self.reason = reason
        self.status_code = status_code
        self.provider_code = provider_code
        super().__init__(
            f"Identity provider {operation} failed: {reason}",
            "IDENTITY_PROVIDER_ERROR",
            {
                "operation": operation,
                "status_code": status_code,
                "provider_code": provider_code,
            },
        )


class IdentityProviderUnavailableError(IdentityProviderError):
    """Timeout, network error, rate limit or 5xx from the identity provider."""

    transient = True


class IdentityConflictError(IdentityProviderError):
    """The provider already has an identity with this email (or id)."""


class EmailDeliveryError(TenantOpsException):
    """Email API call failed."""

    def __init__(self, recipient: str, reason: str) -> None:
        super().__init__(
            f"Failed to send email to {recipient}: {reason}",
            "EMAIL_DELIVERY_ERROR",
            {"reason": reason},
        )
