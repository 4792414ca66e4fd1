# aqua/models/notification.py

from sqlmodel import SQLModel, Field
from datetime import datetime
from uuid import UUID, uuid4
from typing import Optional


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)

    title: str
    message: str
    type: str = Field(default="info")

    # id of the complaint/service the notification points at, if any
    related_id: Optional[UUID] = None
    action_url: Optional[str] = None

    is_read: bool = Field(default=False, index=True)
    read_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
