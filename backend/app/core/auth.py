from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends, HTTPException, Request

from app.core.config import settings
from app.models.user import UserRole


@dataclass(frozen=True)
class Principal:
    """Authenticated caller resolved from the bearer token."""

    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def create_access_token(
    user_id: int,
    role: str = UserRole.CUSTOMER.value,
    expires_in: timedelta | None = None,
) -> str:
    """Issue a signed token for a user id and role."""
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + (expires_in or timedelta(minutes=settings.JWT_EXPIRES_MINUTES)),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal:
    claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    return Principal(id=int(claims["sub"]), role=str(claims.get("role", UserRole.CUSTOMER.value)))


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")
    token = auth_header[7:]
    if not token:
        raise HTTPException(status_code=401, detail="Authorization token missing")
    return token


def get_current_principal(request: Request) -> Principal:
    """Require a valid bearer token and return the caller."""
    token = _bearer_token(request)
    if token is None:
        raise HTTPException(status_code=401, detail="Authorization token missing")
    try:
        return decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired") from None
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token") from None


def get_optional_principal(request: Request) -> Principal | None:
    """Like get_current_principal, but anonymous callers get None."""
    if not request.headers.get("Authorization"):
        return None
    return get_current_principal(request)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal


STAFF_ROLES = {UserRole.SALON_OWNER.value, UserRole.ADMIN.value}


def ensure_can_act_for(principal: Principal, customer_id: int) -> None:
    """Customers act for themselves; salon staff and admins may act for anyone."""
    if principal.id != customer_id and principal.role not in STAFF_ROLES:
        raise HTTPException(status_code=403, detail="Not allowed to act for this customer")
