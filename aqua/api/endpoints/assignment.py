# aqua/api/endpoints/assignment.py

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session
from aqua.core.config import settings
from aqua.core.rbac import require_service_desk
from aqua.models.user import User
from aqua.schemas.service import (
    AssignRequest,
    AvailabilityUpdate,
    ReassignRequest,
    ServiceRead,
    TechnicianList,
    TechnicianWorkload,
)
from aqua.schemas.user import UserRead
from aqua.services.audit_service import actor_snapshot, log_activity
from aqua.services.service_request_service import (
    assign_service,
    get_active_technician,
    get_service,
    list_technicians,
    reassign_service,
    set_availability,
    technician_workload,
)

router = APIRouter(prefix="/api", tags=["Service Assignment"])


async def _load_pair(session: AsyncSession, service_id: UUID, technician_id: UUID):
    service = await get_service(session, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")

    try:
        technician = await get_active_technician(session, technician_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return service, technician


# -------------------------------------------------------------------
# ASSIGN
# -------------------------------------------------------------------
@router.post("/services/assign", response_model=ServiceRead)
async def assign_endpoint(
    payload: AssignRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_service_desk),
):
    service, technician = await _load_pair(session, payload.service_id, payload.technician_id)
    service = await assign_service(session, service, technician)

    background_tasks.add_task(
        log_activity,
        action="SERVICE_ASSIGNED",
        resource_type="Service",
        resource_id=str(service.id),
        details={"technician_id": str(technician.id), "service_number": service.service_number},
        **actor_snapshot(current_user),
    )
    return service


# -------------------------------------------------------------------
# REASSIGN (reason is appended to the service notes)
# -------------------------------------------------------------------
@router.put("/services/assign", response_model=ServiceRead)
async def reassign_endpoint(
    payload: ReassignRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_service_desk),
):
    service, technician = await _load_pair(session, payload.service_id, payload.new_technician_id)
    previous = service.assigned_technician

    service = await reassign_service(session, service, technician, reason=payload.reason)

    background_tasks.add_task(
        log_activity,
        action="SERVICE_REASSIGNED",
        resource_type="Service",
        resource_id=str(service.id),
        remarks=payload.reason,
        details={
            "previous_technician_id": str(previous) if previous else None,
            "technician_id": str(technician.id),
        },
        **actor_snapshot(current_user),
    )
    return service


# -------------------------------------------------------------------
# TECHNICIANS WITH WORKLOAD FOR A DAY
# -------------------------------------------------------------------
@router.get("/services/assign/technicians", response_model=TechnicianList)
async def technicians_endpoint(
    day: Optional[date] = Query(None, alias="date"),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_service_desk),
):
    if day is None:
        technicians = await list_technicians(session)
        return {
            "technicians": [
                TechnicianWorkload.model_validate(t, from_attributes=True) for t in technicians
            ]
        }

    workload = await technician_workload(session, day, settings.TECHNICIAN_WORKDAY_HOURS)
    return {"technicians": workload}


# -------------------------------------------------------------------
# AVAILABILITY TOGGLE
# -------------------------------------------------------------------
@router.post("/technicians/{technician_id}/availability", response_model=UserRead)
async def availability_endpoint(
    technician_id: UUID,
    payload: AvailabilityUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_service_desk),
):
    try:
        technician = await get_active_technician(session, technician_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return await set_availability(session, technician, payload.is_available)
