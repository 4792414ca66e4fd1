# aqua/api/endpoints/customers.py

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_db_session
from aqua.core.rbac import RequireCapability
from aqua.models.user import User
from aqua.schemas.customer import CustomerCreate, CustomerPage, CustomerRead, CustomerUpdate
from aqua.services.customer_service import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)

router = APIRouter(prefix="/api/customers", tags=["Customers"])

require_customer_desk = RequireCapability("can_manage_customers")


@router.get("/", response_model=CustomerPage)
async def list_customers_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    status: str = Query(""),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_customer_desk),
):
    return await list_customers(session, page=page, limit=limit, search=search, status=status)


@router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer_endpoint(
    data: CustomerCreate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_customer_desk),
):
    try:
        return await create_customer(session, data.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer_endpoint(
    customer_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_customer_desk),
):
    customer = await get_customer(session, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.patch("/{customer_id}", response_model=CustomerRead)
async def update_customer_endpoint(
    customer_id: UUID,
    data: CustomerUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_customer_desk),
):
    customer = await get_customer(session, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return await update_customer(session, customer, data.model_dump(exclude_unset=True))


@router.delete("/{customer_id}")
async def delete_customer_endpoint(
    customer_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_customer_desk),
):
    customer = await get_customer(session, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    try:
        await delete_customer(session, customer)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"detail": "Customer deleted successfully"}
