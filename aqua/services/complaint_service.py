# aqua/services/complaint_service.py

from datetime import datetime
from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.core.roles import UserRole
from aqua.models.complaint import Complaint
from aqua.models.enums import ComplaintStatus
from aqua.models.user import User
from aqua.services.numbering import next_sequence_number
from aqua.services.service_request_service import get_active_technician


async def get_complaint(session: AsyncSession, complaint_id: UUID) -> Complaint | None:
    return await session.get(Complaint, complaint_id)


async def list_complaints(
    session: AsyncSession,
    customer_id: Optional[UUID] = None,
    assigned_to: Optional[UUID] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
) -> list[Complaint]:
    query = select(Complaint).order_by(Complaint.created_at.desc())

    if customer_id:
        query = query.where(Complaint.customer_id == customer_id)
    if assigned_to:
        query = query.where(Complaint.assigned_to == assigned_to)
    if status:
        query = query.where(Complaint.status == status)
    if priority:
        query = query.where(Complaint.priority == priority)

    result = await session.execute(query)
    return result.scalars().all()


async def create_complaint(session: AsyncSession, data: dict, reported_by: UUID) -> Complaint:
    complaint = Complaint(
        complaint_number=await next_sequence_number(session, Complaint.complaint_number, "CMP"),
        reported_by=reported_by,
        status=ComplaintStatus.Open.value,
        **data,
    )
    session.add(complaint)
    await session.commit()
    await session.refresh(complaint)

    logger.info(f"Created complaint {complaint.complaint_number}")
    return complaint


# Statuses a technician may move their own complaint into
TECHNICIAN_STATUSES = {
    ComplaintStatus.Assigned.value,
    ComplaintStatus.InProgress.value,
    ComplaintStatus.Resolved.value,
}

# Columns that may be blanked with an explicit null
CLEARABLE_FIELDS = {"location", "resolution_notes"}


def filter_changes_for(user: User, changes: dict) -> dict:
    """
    Complaint desk staff edit every field. The assigned technician only
    moves the status along and writes resolution notes.
    """
    if user.role != UserRole.Technician:
        return dict(changes)

    allowed = {}
    if changes.get("status") in TECHNICIAN_STATUSES:
        allowed["status"] = changes["status"]
    if "resolution_notes" in changes:
        allowed["resolution_notes"] = changes["resolution_notes"]
    return allowed


async def update_complaint(session: AsyncSession, user: User, complaint: Complaint, changes: dict) -> Complaint:
    changes = {
        field: value
        for field, value in filter_changes_for(user, changes).items()
        if value is not None or field in CLEARABLE_FIELDS
    }

    if changes.get("assigned_to") is not None:
        await get_active_technician(session, changes["assigned_to"])

    # Resolving stamps resolved_at once
    if changes.get("status") == ComplaintStatus.Resolved.value and complaint.resolved_at is None:
        changes["resolved_at"] = datetime.utcnow()

    # Assigning someone to an open complaint moves it along
    if changes.get("assigned_to") and "status" not in changes and complaint.status == ComplaintStatus.Open.value:
        changes["status"] = ComplaintStatus.Assigned.value

    for field, value in changes.items():
        setattr(complaint, field, value)
    complaint.updated_at = datetime.utcnow()

    session.add(complaint)
    await session.commit()
    await session.refresh(complaint)
    return complaint


async def delete_complaint(session: AsyncSession, complaint: Complaint) -> None:
    await session.delete(complaint)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("Complaint is linked to a service request and cannot be deleted")
