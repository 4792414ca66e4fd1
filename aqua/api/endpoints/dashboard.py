# aqua/api/endpoints/dashboard.py

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session
from aqua.core.rbac import RequireCapability
from aqua.models.user import User
from aqua.services.dashboard_service import stats_for

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def dashboard_stats(
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(RequireCapability("can_view_dashboard")),
):
    """
    Stat cards for the caller's dashboard. The client re-polls every
    `refresh_interval_seconds`.
    """
    return await stats_for(session, current_user)
