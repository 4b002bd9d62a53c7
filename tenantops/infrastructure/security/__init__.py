"""Security helpers: access-token verification."""

from tenantops.infrastructure.security.jwt import create_access_token, verify_access_token

__all__ = ["create_access_token", "verify_access_token"]
