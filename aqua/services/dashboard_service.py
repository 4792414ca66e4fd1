# aqua/services/dashboard_service.py

from collections import Counter
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.core.config import settings
from aqua.core.roles import UserRole
from aqua.models.complaint import Complaint
from aqua.models.customer import Customer
from aqua.models.service import Service
from aqua.models.user import User
from aqua.services.customer_service import resolve_customer_scope

ACTIVE_SERVICE = {"pending", "assigned", "in_progress"}
PENDING_COMPLAINT = {"open", "assigned"}


async def _status_counts(session: AsyncSession, column, *where) -> Counter:
    query = select(column, func.count()).group_by(column)
    for clause in where:
        query = query.where(clause)
    result = await session.execute(query)
    return Counter({row[0]: row[1] for row in result.all()})


async def customer_stats(session: AsyncSession, customer_id: Optional[UUID]) -> dict:
    if customer_id is None:
        services, complaints = Counter(), Counter()
    else:
        services = await _status_counts(session, Service.status, Service.customer_id == customer_id)
        complaints = await _status_counts(session, Complaint.status, Complaint.customer_id == customer_id)

    return {
        "active_services": sum(services[s] for s in ACTIVE_SERVICE),
        "completed_services": services["completed"],
        "pending_complaints": sum(complaints[s] for s in PENDING_COMPLAINT),
        "resolved_complaints": complaints["resolved"],
    }


async def technician_stats(session: AsyncSession, technician_id: UUID) -> dict:
    jobs = await _status_counts(session, Service.status, Service.assigned_technician == technician_id)

    hours = (await session.execute(
        select(func.coalesce(func.sum(Service.actual_hours), 0))
        .where(Service.assigned_technician == technician_id)
    )).scalar_one()

    return {
        "assigned_jobs": jobs["assigned"],
        "in_progress_jobs": jobs["in_progress"],
        "completed_jobs": jobs["completed"],
        "total_hours": float(hours),
    }


async def overview_stats(session: AsyncSession) -> dict:
    total_users = (await session.execute(select(func.count()).select_from(User))).scalar_one()
    active_users = (await session.execute(
        select(func.count()).select_from(User).where(User.is_active == True)  # noqa: E712
    )).scalar_one()
    total_customers = (await session.execute(select(func.count()).select_from(Customer))).scalar_one()

    services = await _status_counts(session, Service.status)
    complaints = await _status_counts(session, Complaint.status)

    return {
        "total_users": total_users,
        "active_users": active_users,
        "total_customers": total_customers,
        "total_services": sum(services.values()),
        "pending_services": services["pending"],
        "completed_services": services["completed"],
        "total_complaints": sum(complaints.values()),
        "open_complaints": complaints["open"],
        "resolved_complaints": complaints["resolved"],
    }


async def stats_for(session: AsyncSession, user: User) -> dict:
    """Pick the stat cards for the caller's dashboard."""
    if user.role == UserRole.Customer:
        scope = await resolve_customer_scope(session, user.id)
        view, stats = "customer", await customer_stats(session, scope)
    elif user.role == UserRole.Technician:
        view, stats = "technician", await technician_stats(session, user.id)
    else:
        view, stats = "overview", await overview_stats(session)

    return {
        "view": view,
        "stats": stats,
        "refresh_interval_seconds": settings.DASHBOARD_REFRESH_SECONDS,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
