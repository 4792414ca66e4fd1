from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from aqua.models.enums import ComplaintPriority, ComplaintStatus


class ComplaintCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    # customers may omit it; their own record is used
    customer_id: Optional[UUID] = None
    title: str
    description: str
    category: str = "general"
    priority: ComplaintPriority = ComplaintPriority.Medium
    location: Optional[str] = None


class ComplaintUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[ComplaintPriority] = None
    status: Optional[ComplaintStatus] = None
    assigned_to: Optional[UUID] = None
    location: Optional[str] = None
    resolution_notes: Optional[str] = None


class ComplaintRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    complaint_number: str
    customer_id: UUID
    title: str
    description: str
    category: str
    priority: str
    status: str
    assigned_to: Optional[UUID] = None
    reported_by: Optional[UUID] = None
    location: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
