# aqua/api/endpoints/logs.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session
from aqua.core.rbac import RequireCapability
from aqua.models.user import User
from aqua.schemas.audit import AuditLogRead
from aqua.services.audit_service import list_audit_logs

router = APIRouter(prefix="/api/audit-logs", tags=["Audit & Logs"])


# -------------------------------------------------------------------
# VIEW ADMINISTRATIVE AUDIT TRAIL (role changes, deletions, assignments)
# -------------------------------------------------------------------
@router.get("/", response_model=List[AuditLogRead])
async def get_audit_logs(
    action: Optional[str] = Query(None),
    actor_role: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(RequireCapability("can_view_admin")),
):
    return await list_audit_logs(session, action=action, actor_role=actor_role, limit=limit)
