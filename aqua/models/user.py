# aqua/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String
from sqlalchemy import Enum as SAEnum
from datetime import datetime
import uuid
from typing import Optional

from aqua.core.roles import UserRole


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    full_name: str = Field(nullable=False)
    email: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)

    # stored by value ("dept_head"), one role per user
    role: UserRole = Field(
        sa_column=Column(
            SAEnum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        )
    )

    phone: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    department: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    employee_id: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    address: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    # technicians only; toggled from the assignment board
    is_available: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
