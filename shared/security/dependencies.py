from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from .jwt_handler import ADMIN_SUBJECT, is_admin_claims, verify_access_token

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/user/login", auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller: a storefront user or the admin."""

    user_id: Optional[int]
    is_admin: bool = False

    @property
    def recipient(self) -> str:
        """Key under which this caller's notifications are stored."""
        return ADMIN_SUBJECT if self.is_admin else str(self.user_id)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(request: Request, token: str = Depends(oauth2_scheme)) -> Principal:
    """Dependency to validate the JWT and return who is calling."""
    if not token:
        raise _credentials_exception()

    payload = verify_access_token(token)
    if payload is None:
        raise _credentials_exception()

    subject = payload.get("sub")
    if subject is None:
        raise _credentials_exception()

    if is_admin_claims(payload):
        principal = Principal(user_id=None, is_admin=True)
    else:
        try:
            principal = Principal(user_id=int(subject))
        except ValueError:
            raise _credentials_exception()

    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = principal.recipient
    return principal


async def get_current_user(principal: Principal = Depends(get_current_principal)) -> int:
    """Dependency for storefront-user endpoints. Returns the user's id."""
    if principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This action requires a customer account",
        )
    return principal.user_id


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Dependency for admin panel endpoints."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal


async def get_optional_principal(request: Request, token: str = Depends(oauth2_scheme)) -> Optional[Principal]:
    """Like get_current_principal, but a request without a token is a guest (None).

    A token that is present but invalid is still rejected.
    """
    if not token:
        return None
    return await get_current_principal(request, token)
