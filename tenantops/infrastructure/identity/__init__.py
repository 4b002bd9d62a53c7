"""Identity provider adapters."""

from tenantops.infrastructure.identity.gotrue_client import GoTrueIdentityProvider

__all__ = ["GoTrueIdentityProvider"]
