"""Bearer token verification for tokens issued by the auth provider."""
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.core.config import get_settings


def create_access_token(subject: str, extra: dict[str, Any] | None = None) -> str:
    """Sign a token the same way the auth provider does (used by scripts and tests)."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": str(subject), "exp": expire, "role": "authenticated"}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict | None:
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"verify_aud": False},
        )
    except JWTError:
        return None


def user_id_from_authorization(header: str | None) -> str | None:
    """Return the user id (``sub``) from an ``Authorization: Bearer`` header; None if invalid."""
    if not header or not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    if not token:
        return None
    claims = decode_access_token(token)
    if not claims:
        return None
    return claims.get("sub") or None
