# aqua/services/service_request_service.py

from datetime import date, datetime, time, timedelta
from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.core.roles import SERVICE_DESK_ROLES, UserRole
from aqua.models.enums import NotificationType, ServiceStatus
from aqua.models.service import Service
from aqua.models.user import User
from aqua.services.notification_service import build_notification
from aqua.services.numbering import next_sequence_number

# Statuses a technician may move their own job into
TECHNICIAN_STATUSES = {
    ServiceStatus.Assigned.value,
    ServiceStatus.InProgress.value,
    ServiceStatus.Completed.value,
}

# Jobs that count against a technician's day
OPEN_WORK_STATUSES = (ServiceStatus.Assigned.value, ServiceStatus.InProgress.value)


# ============================================================================
# READS
# ============================================================================
async def get_service(session: AsyncSession, service_id: UUID) -> Service | None:
    return await session.get(Service, service_id)


async def list_services(
    session: AsyncSession,
    customer_id: Optional[UUID] = None,
    technician_id: Optional[UUID] = None,
    status: Optional[str] = None,
) -> list[Service]:
    query = select(Service).order_by(Service.created_at.desc())

    if customer_id:
        query = query.where(Service.customer_id == customer_id)
    if technician_id:
        query = query.where(Service.assigned_technician == technician_id)
    if status:
        query = query.where(Service.status == status)

    result = await session.execute(query)
    return result.scalars().all()


def can_view_service(user: User, service: Service, customer_scope: Optional[UUID]) -> bool:
    if user.role in SERVICE_DESK_ROLES:
        return True
    if user.role == UserRole.Customer:
        return customer_scope is not None and service.customer_id == customer_scope
    if user.role == UserRole.Technician:
        return service.assigned_technician == user.id
    return False


def can_edit_service(user: User, service: Service) -> bool:
    if user.role in SERVICE_DESK_ROLES:
        return True
    return user.role == UserRole.Technician and service.assigned_technician == user.id


# ============================================================================
# WRITES
# ============================================================================
async def create_service(session: AsyncSession, data: dict) -> Service:
    service = Service(
        service_number=await next_sequence_number(session, Service.service_number, "SRV"),
        status=ServiceStatus.Pending.value,
        **data,
    )
    session.add(service)
    await session.commit()
    await session.refresh(service)

    logger.info(f"Created service request {service.service_number}")
    return service


def filter_changes_for(user: User, changes: dict) -> dict:
    """
    The service desk may edit every field. A technician only moves the
    status along (assigned / in_progress / completed) and books actual hours;
    anything else they send is dropped.
    """
    if user.role in SERVICE_DESK_ROLES:
        return dict(changes)

    allowed = {}
    if changes.get("status") in TECHNICIAN_STATUSES:
        allowed["status"] = changes["status"]
    if changes.get("actual_hours") is not None:
        allowed["actual_hours"] = changes["actual_hours"]
    return allowed


# Columns that may be blanked with an explicit null
CLEARABLE_FIELDS = {"scheduled_date", "estimated_hours", "actual_hours"}


async def update_service(session: AsyncSession, user: User, service: Service, changes: dict) -> Service:
    changes = {
        field: value
        for field, value in filter_changes_for(user, changes).items()
        if value is not None or field in CLEARABLE_FIELDS
    }

    technician = None
    technician_id = changes.get("assigned_technician")
    if technician_id is not None:
        technician = await get_active_technician(session, technician_id)
        if "status" not in changes:
            changes["status"] = ServiceStatus.Assigned.value

    if changes.get("status") == ServiceStatus.Completed.value and service.completed_date is None:
        changes["completed_date"] = datetime.utcnow()

    newly_assigned = technician is not None and technician.id != service.assigned_technician

    for field, value in changes.items():
        setattr(service, field, value)
    service.updated_at = datetime.utcnow()

    session.add(service)
    if newly_assigned:
        session.add(_assignment_notice(service, technician))
    await session.commit()
    await session.refresh(service)
    return service


async def delete_service(session: AsyncSession, service: Service) -> None:
    await session.delete(service)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("Service could not be deleted")


# ============================================================================
# ASSIGNMENT
# ============================================================================
async def get_active_technician(session: AsyncSession, technician_id: UUID) -> User:
    technician = await session.get(User, technician_id)
    if not technician:
        raise LookupError("Technician not found")
    if technician.role != UserRole.Technician or not technician.is_active:
        raise ValueError("Invalid technician or technician is not active")
    return technician


def _assignment_notice(service: Service, technician: User):
    return build_notification(
        user_id=technician.id,
        title="New service assignment",
        message=f"Service {service.service_number} ({service.service_type}) has been assigned to you.",
        type=NotificationType.Assignment.value,
        related_id=service.id,
        action_url=f"/services/{service.id}",
    )


async def assign_service(session: AsyncSession, service: Service, technician: User) -> Service:
    service.assigned_technician = technician.id
    service.status = ServiceStatus.Assigned.value
    service.updated_at = datetime.utcnow()

    session.add(service)
    session.add(_assignment_notice(service, technician))
    await session.commit()
    await session.refresh(service)

    logger.info(f"Service {service.service_number} assigned to {technician.email}")
    return service


async def reassign_service(
    session: AsyncSession,
    service: Service,
    technician: User,
    reason: Optional[str] = None,
) -> Service:
    if reason:
        note = f"[{datetime.utcnow().isoformat()}] Reassigned to {technician.full_name}. Reason: {reason}"
        service.service_notes = f"{service.service_notes}\n{note}" if service.service_notes else note

    return await assign_service(session, service, technician)


# ============================================================================
# TECHNICIANS
# ============================================================================
async def list_technicians(session: AsyncSession) -> list[User]:
    result = await session.execute(
        select(User)
        .where((User.role == UserRole.Technician) & (User.is_active == True))  # noqa: E712
        .order_by(User.full_name)
    )
    return result.scalars().all()


async def technician_workload(
    session: AsyncSession,
    day: date,
    workday_hours: float,
) -> list[dict]:
    """
    Hours already booked per active technician on `day`, counting only
    assigned / in-progress jobs, and whether that leaves them available.
    """
    technicians = await list_technicians(session)

    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1)

    result = await session.execute(
        select(Service.assigned_technician, func.coalesce(func.sum(Service.estimated_hours), 0))
        .where(Service.scheduled_date >= start)
        .where(Service.scheduled_date < end)
        .where(Service.status.in_(OPEN_WORK_STATUSES))
        .group_by(Service.assigned_technician)
    )
    booked = {row[0]: float(row[1]) for row in result.all()}

    workload = []
    for tech in technicians:
        hours = booked.get(tech.id, 0.0)
        workload.append({
            "id": tech.id,
            "full_name": tech.full_name,
            "email": tech.email,
            "phone": tech.phone,
            "department": tech.department,
            "is_available": tech.is_available,
            "scheduled_hours": hours,
            "availability": "available" if hours < workday_hours else "busy",
        })
    return workload


async def set_availability(session: AsyncSession, technician: User, is_available: bool) -> User:
    technician.is_available = is_available
    technician.updated_at = datetime.utcnow()
    session.add(technician)
    await session.commit()
    await session.refresh(technician)
    return technician
