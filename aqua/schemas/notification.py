from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from aqua.models.enums import NotificationType


class NotificationCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: UUID
    title: str
    message: str
    type: NotificationType = NotificationType.Info
    related_id: Optional[UUID] = None
    action_url: Optional[str] = None


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    message: str
    type: str
    related_id: Optional[UUID] = None
    action_url: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationList(BaseModel):
    notifications: List[NotificationRead]
    unread_count: int


class ReadStateUpdate(BaseModel):
    is_read: bool


class MarkReadRequest(BaseModel):
    notification_ids: Optional[List[UUID]] = None
    mark_all: bool = False
