# aqua/models/customer.py

from sqlmodel import SQLModel, Field
from datetime import date, datetime
from uuid import UUID, uuid4
from typing import Optional


class Customer(SQLModel, table=True):
    __tablename__ = "customers"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # login account for self-service customers; staff-created records may have none
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)

    customer_code: str = Field(index=True, unique=True)
    business_name: Optional[str] = None
    contact_person: Optional[str] = None
    billing_address: str
    service_address: Optional[str] = None
    water_connection_id: Optional[str] = None
    meter_number: Optional[str] = None

    registration_date: date = Field(default_factory=date.today)
    status: str = Field(default="active", index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
