# aqua/api/deps.py

from typing import AsyncGenerator, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from aqua.core.security import decode_token
from aqua.core.database import get_session
from aqua.core.guard import Principal, PrincipalState
from aqua.core.roles import parse_role
from aqua.services.auth_service import get_user_by_id
from aqua.models.user import User


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


async def _resolve_user(token: str, session: AsyncSession) -> Optional[User]:
    try:
        claims = decode_token(token)
    except jwt.PyJWTError:
        return None

    user_id = claims.user_id
    if user_id is None:
        return None

    user = await get_user_by_id(session, user_id)
    if not user or not user.is_active:
        return None
    return user


# ------------------------------------------------------------
# Current logged-in user from JWT (401 when missing or invalid)
# ------------------------------------------------------------
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    user = await _resolve_user(credentials.credentials, session)
    if not user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Could not validate credentials")

    return user


# ------------------------------------------------------------
# Optional user: pages that render differently for anonymous callers
# ------------------------------------------------------------
async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    if credentials is None:
        return None
    return await _resolve_user(credentials.credentials, session)


def to_principal(user: User) -> Principal:
    return Principal(id=user.id, role=parse_role(user.role), name=user.full_name)


async def get_principal_state(
    user: Optional[User] = Depends(get_optional_user),
) -> PrincipalState:
    # Resolution has finished by the time a handler runs, so never "loading"
    return PrincipalState(principal=to_principal(user) if user else None)
