"""Domain exceptions for tenantops.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers (error_code -> status).
"""

from typing import Any


class TenantOpsException(Exception):
    """Base exception for all tenantops application errors.

    All custom exceptions inherit from this class so the presentation layer
    can render one error envelope for every failure.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, tenant_id, retryable).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        """True when the same request (same idempotency key) may be retried."""
        return bool(self.details.get("retryable", False))

    def to_dict(self) -> dict[str, Any]:
        """Return code, message and (when present) details for API responses."""
        payload: dict[str, Any] = {"code": self.error_code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationException(TenantOpsException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidSlugException(TenantOpsException):
    """Raised when a tenant slug fails validation.

    The rule is one of: too_short, too_long, bad_charset, reserved.
    """

    def __init__(self, slug: str, rule: str, message: str) -> None:
        """Initialize with the offending (sanitized) slug and the violated rule.

        Args:
            slug: Slug after sanitization.
            rule: Name of the violated rule.
            message: Human-readable description.
        """
        self.slug = slug
        self.rule = rule
        super().__init__(message, "INVALID_SLUG", {"slug": slug, "rule": rule})


class OwnerEmailRequiredException(TenantOpsException):
    """Raised when a provisioning request has no owner email."""

    def __init__(self) -> None:
        super().__init__(
            "Owner email is required to provision a tenant",
            "OWNER_EMAIL_REQUIRED",
            {"field": "owner.email"},
        )


class EmailUnavailableException(TenantOpsException):
    """Raised when an owner email is already bound to a tenant or an identity."""

    def __init__(
        self,
        email: str,
        reason: str,
        tenant_id: str | None = None,
    ) -> None:
        """Initialize with the normalized email and a reason.

        Args:
            email: Normalized email address.
            reason: Human-readable reason (e.g. already assigned to tenant "X").
            tenant_id: Conflicting tenant, when the conflict is a tenant binding.
        """
        details: dict[str, Any] = {"email": email, "reason": reason}
        if tenant_id:
            details["tenant_id"] = tenant_id
        super().__init__(f"Email is not available: {reason}", "EMAIL_UNAVAILABLE", details)


class DuplicateSlugException(TenantOpsException):
    """Raised when a live tenant already uses the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            f"Tenant with slug '{slug}' already exists",
            "DUPLICATE_SLUG",
            {"slug": slug},
        )


class DuplicateRequestException(TenantOpsException):
    """Raised when an idempotency key is in flight elsewhere or reused for a different request."""

    def __init__(self, idempotency_key: str, reason: str) -> None:
        super().__init__(
            f"Duplicate provisioning request: {reason}",
            "DUPLICATE_REQUEST",
            {"idempotency_key": idempotency_key, "reason": reason},
        )


class AuthenticationException(TenantOpsException):
    """Raised when the bearer credential is missing or invalid."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "UNAUTHORIZED")


class AuthorizationException(TenantOpsException):
    """Raised when the caller is authenticated but is not an active tenant administrator."""

    def __init__(self, message: str = "Administrator privileges required") -> None:
        super().__init__(message, "FORBIDDEN")


class ProvisioningFailedException(TenantOpsException):
    """Raised when provisioning fails for a reason other than the identity step."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        merged["retryable"] = retryable
        super().__init__(message, "PROVISIONING_FAILED", merged)


class EmailCheckFailedException(ProvisioningFailedException):
    """Raised when email availability could not be determined. Always retryable."""

    def __init__(self, email: str, cause: str) -> None:
        super().__init__(
            "Could not verify owner email availability; retry the request",
            retryable=True,
            details={"email": email, "cause": cause},
        )


class AuthUserCreationFailedException(TenantOpsException):
    """Raised when the owner identity could not be created after the tenant was reserved.

    The ledger entry stays pending; retrying with the same idempotency key
    resumes at the identity step.
    """

    def __init__(self, idempotency_key: str, tenant_id: str, cause: str) -> None:
        super().__init__(
            "Tenant was reserved but the owner account could not be created; "
            "retry with the same idempotency key",
            "AUTH_USER_CREATION_FAILED",
            {
                "idempotency_key": idempotency_key,
                "tenant_id": tenant_id,
                "cause": cause,
                "retryable": True,
            },
        )


class TenantNotFoundException(TenantOpsException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class ResourceNotFoundException(TenantOpsException):
    """Raised when a requested resource (other than a tenant) does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class NoOwnerEmailException(TenantOpsException):
    """Raised when a tenant has no stored owner email to send credentials to."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            "Tenant has no owner email configured",
            "NO_OWNER_EMAIL",
            {"tenant_id": tenant_id},
        )


class NoOwnerException(TenantOpsException):
    """Raised when a credential action needs an owner identity the tenant does not have."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            "Tenant has no owner account; finish provisioning first",
            "NO_OWNER",
            {"tenant_id": tenant_id},
        )


class LinkGenerationFailedException(TenantOpsException):
    """Raised when the identity provider could not generate a password-setup link."""

    def __init__(self, tenant_id: str, cause: str) -> None:
        super().__init__(
            "Failed to generate password setup link",
            "LINK_GENERATION_FAILED",
            {"tenant_id": tenant_id, "cause": cause},
        )


class RateLimitedException(TenantOpsException):
    """Raised when setup-link issuance exceeds the per-tenant or per-admin limit."""

    def __init__(self, reason: str, rate_limit: dict[str, Any]) -> None:
        """Initialize with the limiting reason and current counters.

        Args:
            reason: "tenant" or "admin".
            rate_limit: Counter snapshot (counts, limits, remaining, windows).
        """
        self.reason = reason
        super().__init__(
            f"Too many password setup links issued ({reason} limit reached)",
            "RATE_LIMITED",
            {"reason": reason, "rate_limit": rate_limit},
        )


class CredentialUpdateFailedException(TenantOpsException):
    """Raised when the identity provider rejects or fails a credential change."""

    def __init__(self, action: str, cause: str) -> None:
        super().__init__(
            f"Credential update failed: {action}",
            "CREDENTIAL_UPDATE_FAILED",
            {"action": action, "cause": cause},
        )


class InvalidStatusTransitionException(TenantOpsException):
    """Raised when a tenant status change is not allowed from its current status."""

    def __init__(self, tenant_id: str, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot change tenant status from '{current}' to '{requested}'",
            "INVALID_STATUS_TRANSITION",
            {"tenant_id": tenant_id, "current": current, "requested": requested},
        )


class TenantNotActiveException(TenantOpsException):
    """Raised when a setup link is requested for a pending or archived tenant."""

    def __init__(self, tenant_id: str, status: str) -> None:
        super().__init__(
            f"Tenant is {status}; setup links are only issued for active or suspended tenants",
            "TENANT_NOT_ACTIVE",
            {"tenant_id": tenant_id, "status": status},
        )
