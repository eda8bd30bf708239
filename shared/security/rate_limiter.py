from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from shared.config import settings

from .jwt_handler import is_admin_claims, verify_access_token


def caller_key(request: Request) -> str:
    """
    Key function for SlowAPI.
    Signed-in shoppers are limited per account and the admin on one shared
    bucket, so checkout limits follow the account across devices.
    Anonymous callers (login, guest checkout) fall back to the client IP.
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")

    if scheme.lower() == "bearer" and token:
        payload = verify_access_token(token)
        if payload and is_admin_claims(payload):
            return "admin"
        if payload and payload.get("sub"):
            return f"user:{payload['sub']}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=caller_key, enabled=settings.RATE_LIMIT_ENABLED)
