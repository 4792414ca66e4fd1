# aqua/api/endpoints/complaints.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session
from aqua.core.rbac import RequireCapability, RequireRule, require_user_manager
from aqua.core.roles import PAGES_BY_KEY, AccessRule, UserRole, has_capability
from aqua.models.complaint import Complaint
from aqua.models.enums import ComplaintPriority, ComplaintStatus
from aqua.models.user import User
from aqua.schemas.complaint import ComplaintCreate, ComplaintRead, ComplaintUpdate
from aqua.services.complaint_service import (
    create_complaint,
    delete_complaint,
    get_complaint,
    list_complaints,
    update_complaint,
)
from aqua.services.customer_service import get_customer, resolve_customer_scope

router = APIRouter(prefix="/api/complaints", tags=["Complaints"])

# Whoever can open the complaints page can call the read endpoints
require_complaints_page = RequireRule(AccessRule(allowed_roles=PAGES_BY_KEY["complaints"].roles))
require_complaint_desk = RequireCapability("can_manage_complaints")


async def _visible_complaint(session: AsyncSession, user: User, complaint_id: UUID) -> Complaint:
    complaint = await get_complaint(session, complaint_id)
    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")

    if user.role == UserRole.Customer:
        scope = await resolve_customer_scope(session, user.id)
        if complaint.customer_id != scope:
            raise HTTPException(status_code=403, detail="Access denied")
    elif user.role == UserRole.Technician and complaint.assigned_to != user.id:
        raise HTTPException(status_code=403, detail="Access denied")

    return complaint


# -------------------------------------------------------------------
# LIST (scoped: customers see theirs, technicians their assignments)
# -------------------------------------------------------------------
@router.get("/", response_model=List[ComplaintRead])
async def list_complaints_endpoint(
    customer_id: Optional[UUID] = Query(None),
    assigned_to: Optional[UUID] = Query(None),
    status: Optional[ComplaintStatus] = Query(None),
    priority: Optional[ComplaintPriority] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_complaints_page),
):
    if current_user.role == UserRole.Customer:
        customer_id = await resolve_customer_scope(session, current_user.id)
        if customer_id is None:
            return []
    elif current_user.role == UserRole.Technician:
        assigned_to = current_user.id

    return await list_complaints(
        session,
        customer_id=customer_id,
        assigned_to=assigned_to,
        status=status.value if status else None,
        priority=priority.value if priority else None,
    )


@router.get("/{complaint_id}", response_model=ComplaintRead)
async def get_complaint_endpoint(
    complaint_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_complaints_page),
):
    return await _visible_complaint(session, current_user, complaint_id)


# -------------------------------------------------------------------
# CREATE
# -------------------------------------------------------------------
@router.post("/", response_model=ComplaintRead, status_code=status.HTTP_201_CREATED)
async def create_complaint_endpoint(
    data: ComplaintCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_complaints_page),
):
    payload = data.model_dump()

    if current_user.role == UserRole.Customer:
        scope = await resolve_customer_scope(session, current_user.id)
        if scope is None:
            raise HTTPException(status_code=400, detail="No customer record is linked to this account")
        payload["customer_id"] = scope
    elif has_capability(current_user.role, "can_manage_complaints"):
        if not payload.get("customer_id"):
            raise HTTPException(status_code=400, detail="customer_id is required")
        if not await get_customer(session, payload["customer_id"]):
            raise HTTPException(status_code=404, detail="Customer not found")
    else:
        raise HTTPException(status_code=403, detail="Access denied")

    return await create_complaint(session, payload, reported_by=current_user.id)


# -------------------------------------------------------------------
# UPDATE
# -------------------------------------------------------------------
@router.patch("/{complaint_id}", response_model=ComplaintRead)
async def update_complaint_endpoint(
    complaint_id: UUID,
    data: ComplaintUpdate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_complaint_desk),
):
    complaint = await _visible_complaint(session, current_user, complaint_id)

    try:
        return await update_complaint(session, current_user, complaint, data.model_dump(exclude_unset=True))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# -------------------------------------------------------------------
# DELETE (admin / dept head)
# -------------------------------------------------------------------
@router.delete("/{complaint_id}")
async def delete_complaint_endpoint(
    complaint_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_user_manager),
):
    complaint = await get_complaint(session, complaint_id)
    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")

    try:
        await delete_complaint(session, complaint)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"detail": "Complaint deleted successfully"}
