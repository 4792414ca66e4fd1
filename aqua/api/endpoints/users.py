# aqua/api/endpoints/users.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session
from aqua.core.rbac import require_user_manager
from aqua.core.roles import UserRole
from aqua.models.user import User
from aqua.schemas.user import UserCreate, UserRead, UserUpdate
from aqua.services.audit_service import actor_snapshot, log_activity
from aqua.services.auth_service import create_user, get_user_by_email, get_user_by_id
from aqua.services.user_service import (
    delete_user,
    ensure_can_administer,
    list_users,
    toggle_user_status,
    update_user,
)

router = APIRouter(prefix="/api/users", tags=["Users"])


async def _load_target(session: AsyncSession, user_id: UUID) -> User:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# -------------------------------------------------------------------
# List users (admin / dept head)
# -------------------------------------------------------------------
@router.get("/", response_model=List[UserRead])
async def list_users_endpoint(
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_user_manager),
):
    return await list_users(session, role=role, is_active=is_active)


# -------------------------------------------------------------------
# Create user
# -------------------------------------------------------------------
@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(
    data: UserCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_user_manager),
):
    try:
        ensure_can_administer(current_user, new_role=data.role)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))

    if await get_user_by_email(session, data.email):
        raise HTTPException(status_code=400, detail="A user with this email already exists")

    try:
        user = await create_user(
            session,
            full_name=data.full_name,
            email=data.email,
            password=data.password,
            role=data.role,
            phone=data.phone,
            department=data.department,
            employee_id=data.employee_id,
            address=data.address,
            is_active=data.is_active,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    background_tasks.add_task(
        log_activity,
        action="USER_CREATED",
        resource_type="User",
        resource_id=str(user.id),
        details={"email": user.email, "role": user.role.value},
        **actor_snapshot(current_user),
    )
    return user


# -------------------------------------------------------------------
# Get one user
# -------------------------------------------------------------------
@router.get("/{user_id}", response_model=UserRead)
async def get_user_endpoint(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_user_manager),
):
    return await _load_target(session, user_id)


# -------------------------------------------------------------------
# Update user (role changes are audited)
# -------------------------------------------------------------------
@router.patch("/{user_id}", response_model=UserRead)
async def update_user_endpoint(
    user_id: UUID,
    data: UserUpdate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_user_manager),
):
    target = await _load_target(session, user_id)

    try:
        user, previous_role = await update_user(
            session, current_user, target, data.model_dump(exclude_unset=True)
        )
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if previous_role is not None:
        background_tasks.add_task(
            log_activity,
            action="USER_ROLE_CHANGED",
            resource_type="User",
            resource_id=str(user.id),
            details={"old_role": previous_role.value, "new_role": user.role.value},
            **actor_snapshot(current_user),
        )
    return user


# -------------------------------------------------------------------
# Toggle active
# -------------------------------------------------------------------
@router.post("/{user_id}/toggle-status", response_model=UserRead)
async def toggle_status_endpoint(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_user_manager),
):
    target = await _load_target(session, user_id)

    try:
        return await toggle_user_status(session, current_user, target)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


# -------------------------------------------------------------------
# Delete user
# -------------------------------------------------------------------
@router.delete("/{user_id}")
async def delete_user_endpoint(
    user_id: UUID,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_user_manager),
):
    target = await _load_target(session, user_id)
    snapshot = {"email": target.email, "role": target.role.value}

    try:
        await delete_user(session, current_user, target)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    background_tasks.add_task(
        log_activity,
        action="USER_DELETED",
        resource_type="User",
        resource_id=str(user_id),
        details=snapshot,
        **actor_snapshot(current_user),
    )
    return {"detail": "User deleted successfully"}
