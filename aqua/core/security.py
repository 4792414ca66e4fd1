# aqua/core/security.py

import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import jwt
from passlib.context import CryptContext

from aqua.core.config import settings
from aqua.core.roles import UserRole, parse_role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
ALGORITHM = "HS256"

# bcrypt ignores everything past this many bytes
BCRYPT_MAX_BYTES = 72


# ============================================================================
# PASSWORDS
# ============================================================================
def _pre_hash_password(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) <= BCRYPT_MAX_BYTES:
        return password
    return hashlib.sha256(raw).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(_pre_hash_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_pre_hash_password(plain_password), hashed_password)


def password_needs_rehash(hashed_password: str) -> bool:
    """True when the stored hash was made with outdated bcrypt settings."""
    return pwd_context.needs_update(hashed_password)


# ============================================================================
# ACCESS TOKENS
# ============================================================================
@dataclass(frozen=True)
class TokenClaims:
    """
    Decoded access token. `role` is the role at issue time and only
    informs clients; authorisation always re-reads the user's stored role.
    """
    subject: str
    role: Optional[UserRole]
    expires_at: datetime

    @property
    def user_id(self) -> Optional[UUID]:
        try:
            return UUID(self.subject)
        except ValueError:
            return None


def create_access_token(
    subject: Any,
    role: Any = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(subject),
        "exp": now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)),
        "iat": now,
        "nbf": now,
    }

    parsed = parse_role(role)
    if parsed is not None:
        claims["role"] = parsed.value

    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenClaims:
    # Raises jwt.PyJWTError (expired, bad signature, missing sub/exp)
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    return TokenClaims(
        subject=payload["sub"],
        role=parse_role(payload.get("role")),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
