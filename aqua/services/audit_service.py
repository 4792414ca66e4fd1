# aqua/services/audit_service.py

from typing import Optional, Dict, Any
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.core.database import AsyncSessionLocal
from aqua.models.audit import AuditLog
from aqua.models.user import User


def actor_snapshot(user: User) -> Dict[str, Any]:
    return {
        "actor_id": user.id,
        "actor_role": user.role.value if hasattr(user.role, "value") else str(user.role),
        "actor_name": user.full_name,
    }


async def log_activity(
    action: str,
    actor_id: Optional[UUID] = None,
    actor_role: Optional[str] = None,
    actor_name: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    remarks: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
):
    """
    Writes an audit entry in its own session, so it is safe to queue on
    BackgroundTasks after the request session has closed. A failed write is
    logged and dropped; it never fails the request that triggered it.
    """
    async with AsyncSessionLocal() as session:
        try:
            session.add(AuditLog(
                actor_id=actor_id,
                actor_role=actor_role,
                actor_name=actor_name,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                remarks=remarks,
                details=details or {},
            ))
            await session.commit()

        except Exception:
            logger.exception(f"Audit log write failed for action {action}")
            await session.rollback()


async def list_audit_logs(
    session: AsyncSession,
    action: Optional[str] = None,
    actor_role: Optional[str] = None,
    limit: int = 100,
) -> list[AuditLog]:
    query = select(AuditLog).order_by(AuditLog.timestamp.desc()).limit(limit)

    if action:
        query = query.where(AuditLog.action == action)
    if actor_role:
        query = query.where(AuditLog.actor_role == actor_role)

    result = await session.execute(query)
    return result.scalars().all()
