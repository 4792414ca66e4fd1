from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from aqua.models.enums import CustomerStatus


class CustomerCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: Optional[UUID] = None
    customer_code: Optional[str] = None   # generated when missing
    business_name: Optional[str] = None
    contact_person: Optional[str] = None
    billing_address: str
    service_address: Optional[str] = None
    water_connection_id: Optional[str] = None
    meter_number: Optional[str] = None
    status: CustomerStatus = CustomerStatus.Active


class CustomerUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    business_name: Optional[str] = None
    contact_person: Optional[str] = None
    billing_address: Optional[str] = None
    service_address: Optional[str] = None
    water_connection_id: Optional[str] = None
    meter_number: Optional[str] = None
    status: Optional[CustomerStatus] = None


class CustomerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: Optional[UUID] = None
    customer_code: str
    business_name: Optional[str] = None
    contact_person: Optional[str] = None
    billing_address: str
    service_address: Optional[str] = None
    water_connection_id: Optional[str] = None
    meter_number: Optional[str] = None
    registration_date: date
    status: str
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class CustomerPage(BaseModel):
    customers: List[CustomerRead]
    pagination: Pagination
