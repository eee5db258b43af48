from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from contentkosh_api.core.settings import get_app_settings
from contentkosh_api.db.models.enums import UserRole

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password using bcrypt."""
    return _pwd_context.verify(plain_password, hashed_password)


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return _pwd_context.hash(password)


def _create_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta],
    token_type: str,
) -> str:
    settings = get_app_settings()
    to_encode = data.copy()
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire, "iat": now, "type": token_type})
    encoded_jwt = jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt


# PUBLIC_INTERFACE
def create_access_token(
    user_id: int,
    business_id: Optional[int],
    role: str,
    email: str,
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Create a signed access token carrying the caller identity.

    Claims: id, businessId, role, email. The token is trusted for its lifetime;
    account status is re-checked only when the refresh token is exchanged.
    """
    settings = get_app_settings()
    exp = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: Dict[str, Any] = {
        "id": user_id,
        "businessId": business_id,
        "role": role,
        "email": email,
    }
    return _create_token(payload, exp, token_type="access")


# PUBLIC_INTERFACE
def generate_refresh_token() -> str:
    """Return an opaque random refresh token (128 hex characters)."""
    return secrets.token_hex(64)


# PUBLIC_INTERFACE
def refresh_token_expiry() -> datetime:
    settings = get_app_settings()
    return datetime.now(tz=timezone.utc) + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)


# PUBLIC_INTERFACE
def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT; raises JWTError if invalid/expired."""
    settings = get_app_settings()
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


# PUBLIC_INTERFACE
def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return access token claims, or None when the token is invalid, expired or of another type."""
    try:
        payload = decode_token(token)
    except JWTError:
        return None
    if payload.get("type") != "access" or payload.get("id") is None:
        return None
    return payload


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller, built from verified access token claims."""
    id: int
    business_id: Optional[int]
    role: UserRole
    email: str

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN

    @property
    def is_admin(self) -> bool:
        """ADMIN or SUPERADMIN."""
        return self.role in (UserRole.ADMIN, UserRole.SUPERADMIN)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "CurrentUser":
        business_id = claims.get("businessId")
        return cls(
            id=int(claims["id"]),
            business_id=int(business_id) if business_id is not None else None,
            role=UserRole(claims.get("role")),
            email=claims.get("email") or "",
        )
