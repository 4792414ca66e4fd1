from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from aqua.models.enums import ComplaintPriority, ServiceStatus


class ServiceCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    customer_id: Optional[UUID] = None
    service_type: str
    description: str
    priority: ComplaintPriority = ComplaintPriority.Medium
    scheduled_date: Optional[datetime] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    complaint_id: Optional[UUID] = None


class ServiceUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    service_type: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[ComplaintPriority] = None
    status: Optional[ServiceStatus] = None
    scheduled_date: Optional[datetime] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    actual_hours: Optional[float] = Field(default=None, ge=0)
    assigned_technician: Optional[UUID] = None


class ServiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    service_number: str
    customer_id: UUID
    complaint_id: Optional[UUID] = None
    assigned_technician: Optional[UUID] = None
    service_type: str
    description: str
    priority: str
    status: str
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    service_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# -------------------------------------------------------------------
# ASSIGNMENT BOARD
# -------------------------------------------------------------------
class AssignRequest(BaseModel):
    service_id: UUID
    technician_id: UUID


class ReassignRequest(BaseModel):
    service_id: UUID
    new_technician_id: UUID
    reason: Optional[str] = None


class TechnicianWorkload(BaseModel):
    id: UUID
    full_name: str
    email: str
    phone: Optional[str] = None
    department: Optional[str] = None
    is_available: bool = True
    scheduled_hours: Optional[float] = None
    availability: Optional[str] = None


class TechnicianList(BaseModel):
    technicians: List[TechnicianWorkload]


class AvailabilityUpdate(BaseModel):
    is_available: bool
