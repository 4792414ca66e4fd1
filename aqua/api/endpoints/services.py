# aqua/api/endpoints/services.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session
from aqua.core.rbac import RequireRule, require_admin
from aqua.core.roles import PAGES_BY_KEY, AccessRule, UserRole, has_capability
from aqua.models.enums import ServiceStatus
from aqua.models.user import User
from aqua.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate
from aqua.services.customer_service import get_customer, resolve_customer_scope
from aqua.services.service_request_service import (
    can_edit_service,
    can_view_service,
    create_service,
    delete_service,
    get_service,
    list_services,
    update_service,
)

router = APIRouter(prefix="/api/services", tags=["Services"])

require_services_page = RequireRule(AccessRule(allowed_roles=PAGES_BY_KEY["services"].roles))


# -------------------------------------------------------------------
# LIST
# -------------------------------------------------------------------
@router.get("/", response_model=List[ServiceRead])
async def list_services_endpoint(
    customer_id: Optional[UUID] = Query(None),
    technician_id: Optional[UUID] = Query(None),
    status: Optional[ServiceStatus] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_services_page),
):
    if current_user.role == UserRole.Customer:
        customer_id = await resolve_customer_scope(session, current_user.id)
        if customer_id is None:
            return []
    elif current_user.role == UserRole.Technician:
        technician_id = current_user.id

    return await list_services(
        session,
        customer_id=customer_id,
        technician_id=technician_id,
        status=status.value if status else None,
    )


# -------------------------------------------------------------------
# CREATE
# -------------------------------------------------------------------
@router.post("/", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
async def create_service_endpoint(
    data: ServiceCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_services_page),
):
    payload = data.model_dump()

    if current_user.role == UserRole.Customer:
        scope = await resolve_customer_scope(session, current_user.id)
        if scope is None:
            raise HTTPException(status_code=400, detail="No customer record is linked to this account")
        payload["customer_id"] = scope
    elif has_capability(current_user.role, "can_manage_services"):
        if not payload.get("customer_id"):
            raise HTTPException(status_code=400, detail="customer_id is required")
        if not await get_customer(session, payload["customer_id"]):
            raise HTTPException(status_code=404, detail="Customer not found")
    else:
        raise HTTPException(status_code=403, detail="Access denied")

    return await create_service(session, payload)


# -------------------------------------------------------------------
# GET ONE
# -------------------------------------------------------------------
@router.get("/{service_id}", response_model=ServiceRead)
async def get_service_endpoint(
    service_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_services_page),
):
    service = await get_service(session, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")

    scope = None
    if current_user.role == UserRole.Customer:
        scope = await resolve_customer_scope(session, current_user.id)

    if not can_view_service(current_user, service, scope):
        raise HTTPException(status_code=403, detail="Access denied")

    return service


# -------------------------------------------------------------------
# UPDATE (service desk: any field; assigned technician: progress only)
# -------------------------------------------------------------------
@router.patch("/{service_id}", response_model=ServiceRead)
async def update_service_endpoint(
    service_id: UUID,
    data: ServiceUpdate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_services_page),
):
    service = await get_service(session, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")

    if not can_edit_service(current_user, service):
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        return await update_service(session, current_user, service, data.model_dump(exclude_unset=True))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# -------------------------------------------------------------------
# DELETE (admin only)
# -------------------------------------------------------------------
@router.delete("/{service_id}")
async def delete_service_endpoint(
    service_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    service = await get_service(session, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")

    try:
        await delete_service(session, service)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"detail": "Service deleted successfully"}
