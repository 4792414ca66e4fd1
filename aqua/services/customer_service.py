# aqua/services/customer_service.py

import math
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.models.customer import Customer
from aqua.services.numbering import next_sequence_number


async def get_customer(session: AsyncSession, customer_id: UUID) -> Customer | None:
    return await session.get(Customer, customer_id)


async def get_customer_for_user(session: AsyncSession, user_id: UUID) -> Customer | None:
    result = await session.execute(select(Customer).where(Customer.user_id == user_id))
    return result.scalars().first()


async def list_customers(
    session: AsyncSession,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    status: str = "",
) -> dict:
    query = select(Customer)

    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Customer.customer_code.ilike(pattern),
            Customer.business_name.ilike(pattern),
            Customer.contact_person.ilike(pattern),
        ))
    if status:
        query = query.where(Customer.status == status)

    total = (await session.execute(
        select(func.count()).select_from(query.subquery())
    )).scalar_one()

    offset = (page - 1) * limit
    result = await session.execute(
        query.order_by(Customer.created_at.desc()).offset(offset).limit(limit)
    )

    return {
        "customers": result.scalars().all(),
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if limit else 0,
        },
    }


async def create_customer(session: AsyncSession, data: dict) -> Customer:
    if not data.get("billing_address"):
        raise ValueError("Billing address is required")

    if not data.get("customer_code"):
        data["customer_code"] = await next_sequence_number(session, Customer.customer_code, "CUST")

    customer = Customer(**data)
    session.add(customer)

    try:
        await session.commit()
        await session.refresh(customer)
        return customer
    except IntegrityError:
        await session.rollback()
        raise ValueError(f"Customer code '{data['customer_code']}' already exists")


# Columns that may be blanked with an explicit null
CLEARABLE_FIELDS = {"business_name", "contact_person", "service_address", "water_connection_id", "meter_number"}


async def update_customer(session: AsyncSession, customer: Customer, changes: dict) -> Customer:
    for field, value in changes.items():
        if value is None and field not in CLEARABLE_FIELDS:
            continue
        setattr(customer, field, value)
    customer.updated_at = datetime.utcnow()

    session.add(customer)
    await session.commit()
    await session.refresh(customer)
    return customer


async def delete_customer(session: AsyncSession, customer: Customer) -> None:
    await session.delete(customer)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("Customer has complaints or services on record and cannot be deleted")


async def resolve_customer_scope(session: AsyncSession, user_id: UUID) -> Optional[UUID]:
    """Customer id a customer-role principal is confined to, or None if they have no record."""
    customer = await get_customer_for_user(session, user_id)
    return customer.id if customer else None
