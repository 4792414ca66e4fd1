# aqua/models/complaint.py

from sqlmodel import SQLModel, Field
from datetime import datetime
from uuid import UUID, uuid4
from typing import Optional


class Complaint(SQLModel, table=True):
    __tablename__ = "complaints"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    complaint_number: str = Field(index=True, unique=True)

    customer_id: UUID = Field(foreign_key="customers.id", index=True)

    title: str
    description: str
    category: str = Field(default="general")
    priority: str = Field(default="medium")
    status: str = Field(default="open", index=True)

    assigned_to: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)
    reported_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    location: Optional[str] = None

    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
