# aqua/api/endpoints/auth.py

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session, get_current_user
from aqua.core.config import settings
from aqua.core.rate_limiter import limiter
from aqua.models.user import User
from aqua.schemas.auth import LoginRequest, SignupRequest, TokenWithUser
from aqua.schemas.user import UserRead
from aqua.services.auth_service import (
    authenticate_user,
    create_login_response,
    signup_customer,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# -------------------------------------------------------------------
# LOGIN (every role)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session)
):
    user = await authenticate_user(session, payload.email, payload.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return create_login_response(user)


# -------------------------------------------------------------------
# CUSTOMER SIGN-UP (public; staff accounts come from /api/users)
# -------------------------------------------------------------------
@router.post("/signup", response_model=TokenWithUser, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    session: AsyncSession = Depends(get_db_session)
):
    try:
        user = await signup_customer(
            session,
            full_name=payload.full_name,
            email=payload.email,
            password=payload.password,
            phone=payload.phone,
            address=payload.address,
            business_name=payload.business_name,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return create_login_response(user)


# -------------------------------------------------------------------
# CURRENT USER
# -------------------------------------------------------------------
@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
