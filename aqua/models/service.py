# aqua/models/service.py

from sqlmodel import SQLModel, Field
from datetime import datetime
from uuid import UUID, uuid4
from typing import Optional


class Service(SQLModel, table=True):
    __tablename__ = "services"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    service_number: str = Field(index=True, unique=True)

    customer_id: UUID = Field(foreign_key="customers.id", index=True)
    complaint_id: Optional[UUID] = Field(default=None, foreign_key="complaints.id")
    assigned_technician: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)

    service_type: str
    description: str
    priority: str = Field(default="medium")
    status: str = Field(default="pending", index=True)

    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None

    # append-only free text; reassignment notes land here
    service_notes: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
