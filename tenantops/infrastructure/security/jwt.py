"""Local verification of identity-provider access tokens (HS256 JWT).

Used when AUTH_JWT_SECRET is configured so admin requests do not need a
round trip to the identity provider.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from tenantops.core.config import get_settings


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token with the given claims (tooling and tests).

    Args:
        data: Claims to encode (sub, email, ...).
        expires_delta: Optional TTL; defaults to one hour.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    if settings.auth_jwt_secret is None:
        raise ValueError("AUTH_JWT_SECRET is not configured")
    to_encode = data.copy()
    to_encode.setdefault("aud", settings.auth_jwt_audience)
    to_encode["exp"] = datetime.now(UTC) + (expires_delta or timedelta(hours=1))
    encoded = jwt.encode(
        to_encode,
        settings.auth_jwt_secret.get_secret_value(),
        algorithm=settings.auth_jwt_algorithm,
    )
    return cast(str, encoded)


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify and decode an access token. Returns the payload.

    Enforces signature, audience, exp and sub.

    Raises:
        ValueError: If the secret is not configured or the token is invalid,
            expired, or missing required claims.
    """
    settings = get_settings()
    if settings.auth_jwt_secret is None:
        raise ValueError("AUTH_JWT_SECRET is not configured")
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret.get_secret_value(),
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
