# aqua/models/audit.py

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, Dict, Any
from uuid import UUID, uuid4
from datetime import datetime


class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    actor_id: Optional[UUID] = Field(default=None, index=True)
    actor_role: Optional[str] = None

    # snapshot, survives the actor being renamed or deleted
    actor_name: Optional[str] = None

    # e.g. "USER_ROLE_CHANGED", "SERVICE_ASSIGNED"
    action: str = Field(index=True)
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    remarks: Optional[str] = None

    # {"old_role": "...", "new_role": "..."}
    details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    timestamp: datetime = Field(default_factory=datetime.utcnow, index=True)
