from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from shared.config import settings

ALGORITHM = "HS256"

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ADMIN_SUBJECT = "admin"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Creates a JWT access token with a UTC expiration."""
    to_encode = data.copy()
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(timezone.utc) + lifetime
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user_id: int) -> str:
    return create_access_token({"sub": str(user_id), "role": ROLE_USER})


def create_admin_token() -> str:
    # The admin is not a row in the users table, so it gets a fixed subject
    return create_access_token({"sub": ADMIN_SUBJECT, "role": ROLE_ADMIN})


def verify_access_token(token: str) -> Optional[dict]:
    """Decodes and verifies the JWT. Returns payload if valid, None if invalid/expired."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def is_admin_claims(payload: dict) -> bool:
    return payload.get("role") == ROLE_ADMIN and payload.get("sub") == ADMIN_SUBJECT
