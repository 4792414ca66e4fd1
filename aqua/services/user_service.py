# aqua/services/user_service.py

from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.core.roles import UserRole, has_capability
from aqua.models.notification import Notification
from aqua.models.user import User
from aqua.services.auth_service import get_user_by_email


# ============================================================================
# ROLE-CHANGE RULES
# ============================================================================
def ensure_can_administer(actor: User, target: Optional[User] = None, new_role: Optional[UserRole] = None) -> None:
    """
    Role and account mutations belong to admins and department heads.
    Nobody edits their own role, and a department head can neither touch an
    admin account nor hand out the admin role.
    """
    if not has_capability(actor.role, "can_manage_users"):
        raise PermissionError("Only admins and department heads can manage users")

    actor_is_admin = actor.role == UserRole.Admin

    if new_role == UserRole.Admin and not actor_is_admin:
        raise PermissionError("Only an admin can grant the admin role")

    if target is None:
        return

    if target.role == UserRole.Admin and not actor_is_admin:
        raise PermissionError("Only an admin can modify an admin account")

    if target.id == actor.id and new_role is not None and new_role != target.role:
        raise PermissionError("You cannot change your own role")


# ============================================================================
# LIST USERS
# ============================================================================
async def list_users(
    session: AsyncSession,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
) -> list[User]:
    query = select(User).order_by(User.created_at.desc())

    if role is not None:
        query = query.where(User.role == role)
    if is_active is not None:
        query = query.where(User.is_active == is_active)

    result = await session.execute(query)
    return result.scalars().all()


# ============================================================================
# UPDATE USER (role included)
# ============================================================================
async def update_user(session: AsyncSession, actor: User, target: User, changes: dict) -> tuple[User, Optional[UserRole]]:
    """
    Apply admin edits. Returns the user and the previous role when the role
    actually changed (None otherwise) so the caller can audit it.
    """
    new_role = changes.get("role")
    ensure_can_administer(actor, target, new_role)

    if changes.get("is_active") is False and target.id == actor.id:
        raise PermissionError("You cannot deactivate your own account")

    email = changes.get("email")
    if email and email.lower() != target.email:
        if await get_user_by_email(session, email):
            raise ValueError("Email already in use")
        target.email = email.lower()

    for field in ("full_name", "phone", "department", "employee_id", "address", "is_active"):
        if changes.get(field) is not None:
            setattr(target, field, changes[field])

    previous_role = None
    if new_role is not None and new_role != target.role:
        previous_role = target.role
        target.role = new_role

    target.updated_at = datetime.utcnow()

    try:
        await session.commit()
        await session.refresh(target)
    except IntegrityError:
        await session.rollback()
        raise ValueError("Failed to update user")

    if previous_role is not None:
        logger.info(f"Role of {target.email} changed {previous_role.value} -> {target.role.value} by {actor.email}")

    return target, previous_role


# ============================================================================
# TOGGLE ACTIVE
# ============================================================================
async def toggle_user_status(session: AsyncSession, actor: User, target: User) -> User:
    ensure_can_administer(actor, target)

    if target.id == actor.id:
        raise PermissionError("You cannot deactivate your own account")

    target.is_active = not target.is_active
    target.updated_at = datetime.utcnow()
    session.add(target)
    await session.commit()
    await session.refresh(target)
    return target


# ============================================================================
# DELETE USER
# ============================================================================
async def delete_user(session: AsyncSession, actor: User, target: User) -> None:
    ensure_can_administer(actor, target)

    if target.id == actor.id:
        raise PermissionError("You cannot delete your own account")

    await session.execute(delete(Notification).where(Notification.user_id == target.id))
    await session.delete(target)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("User is referenced by existing records; deactivate the account instead")
