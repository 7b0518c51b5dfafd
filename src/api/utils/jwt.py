from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig

ACCESS_TOKEN_TTL = timedelta(minutes=15)


def generate_jwt(
    user_id: UUID, company_id: UUID, role: str, expires_delta: timedelta = ACCESS_TOKEN_TTL
) -> str:
    """
    Generate JWT access token

    Args:
        user_id: User UUID
        company_id: Company UUID the user acts for
        role: App role (super_admin, admin, supervisor, auditor, gestor, vendedor, financiero)
        expires_delta: Token lifetime

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "company_id": str(company_id),
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        return jwt.decode(token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"])
    except JWTError:
        return None
