"""JWT token creation and validation."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import jwt, JWTError

import config
from auth.schemas import TokenPayload


def create_access_token(
    user_id: UUID,
    tenant_id: UUID | None,
    role: str,
    expires_in_hours: int | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: User UUID
        tenant_id: Tenant UUID (None while the account has no tenant)
        role: User role in the tenant
        expires_in_hours: Token expiration in hours, defaults to settings

    Returns:
        Encoded JWT token string
    """
    if expires_in_hours is None:
        expires_in_hours = config.settings.ACCESS_TOKEN_EXPIRES_HOURS
    exp = datetime.now(UTC) + timedelta(hours=expires_in_hours)

    payload = {
        "sub": str(user_id),
        "tenant_id": str(tenant_id) if tenant_id else None,
        "role": role,
        "exp": int(exp.timestamp()),  # JWT expects Unix timestamp
    }

    return jwt.encode(
        payload,
        config.settings.JWT_SECRET,
        algorithm=config.settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        TokenPayload with decoded claims

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            config.settings.JWT_SECRET,
            algorithms=[config.settings.JWT_ALGORITHM],
        )

        return TokenPayload(
            sub=payload["sub"],
            tenant_id=payload.get("tenant_id"),
            role=payload["role"],
            exp=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except (JWTError, KeyError) as e:
        raise JWTError(f"Invalid token: {str(e)}") from e
