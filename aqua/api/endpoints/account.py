# aqua/api/endpoints/account.py
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_current_user, get_db_session
from aqua.models.user import User
from aqua.schemas.auth import ChangePasswordRequest
from aqua.schemas.user import ProfileUpdate, UserRead
from aqua.services.auth_service import change_password, update_profile

router = APIRouter(prefix="/api/account", tags=["Account"])


@router.post("/change-password")
async def change_password_endpoint(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        await change_password(session, current_user, payload.old_password, payload.new_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"detail": "Password changed successfully"}


@router.patch("/profile", response_model=UserRead)
async def update_own_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    # ProfileUpdate carries no role or is_active
    return await update_profile(session, current_user, payload.model_dump(exclude_unset=True))
