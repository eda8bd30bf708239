from .jwt_handler import (
    ADMIN_SUBJECT,
    create_access_token,
    create_admin_token,
    create_user_token,
    verify_access_token,
)
from .dependencies import (
    Principal,
    get_current_principal,
    get_current_user,
    get_optional_principal,
    require_admin,
)
from .rate_limiter import caller_key, limiter

__all__ = [
    "ADMIN_SUBJECT",
    "create_access_token",
    "create_admin_token",
    "create_user_token",
    "verify_access_token",
    "Principal",
    "get_current_principal",
    "get_current_user",
    "get_optional_principal",
    "require_admin",
    "caller_key",
    "limiter",
]
